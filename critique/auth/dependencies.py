from __future__ import annotations

from fastapi import HTTPException, Request


def get_current_user(request: Request) -> dict | None:
    """Return the session identity ``{id, email}``, or ``None``."""
    return request.session.get("user")


def login_session(request: Request, user_id: str, email: str) -> None:
    request.session["user"] = {"id": user_id, "email": email}


def require_user(request: Request) -> dict:
    """Raise 401 if no user is logged in."""
    user = request.session.get("user")
    if not user:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user


def require_self(user_id: str, request: Request) -> dict:
    """Raise 401 if not logged in, 403 if *user_id* is someone else."""
    user = require_user(request)
    if user["id"] != user_id:
        raise HTTPException(status_code=403, detail="Access denied")
    return user
