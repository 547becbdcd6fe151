from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    not_found = "not_found"
    bad_request = "bad_request"
    unauthorized = "unauthorized"
    forbidden = "forbidden"
    conflict = "conflict"


STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.not_found: 404,
    ErrorKind.bad_request: 400,
    ErrorKind.unauthorized: 401,
    ErrorKind.forbidden: 403,
    ErrorKind.conflict: 409,
}


class ServiceError(Exception):
    """Client-visible failure raised by the service layer."""

    kind: ErrorKind = ErrorKind.bad_request

    def __init__(self, message: str, kind: ErrorKind | None = None) -> None:
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


class NotFoundError(ServiceError):
    kind = ErrorKind.not_found


class BadRequestError(ServiceError):
    kind = ErrorKind.bad_request


class UnauthorizedError(ServiceError):
    kind = ErrorKind.unauthorized


class ForbiddenError(ServiceError):
    kind = ErrorKind.forbidden


class ConflictError(ServiceError):
    kind = ErrorKind.conflict
