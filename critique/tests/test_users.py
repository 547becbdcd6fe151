from __future__ import annotations


def _register(c, email="sam@example.com", password="password123"):
    resp = c.post("/api/auth/register", json={"email": email, "password": password, "name": "Sam"})
    return resp.json()["user"]


def _login(c, email="sam@example.com", password="password123"):
    return c.post("/api/auth/login", json={"email": email, "password": password})


# ── Profile ──────────────────────────────────────────────────────────────


def test_update_profile(client):
    user = _register(client)

    resp = client.put(
        f"/api/users/{user['id']}",
        json={"name": "Samantha", "profilePicture": "https://img.example.com/s.png"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Samantha"
    assert body["profilePicture"] == "https://img.example.com/s.png"
    assert body["email"] == "sam@example.com"


def test_update_profile_ignores_email(client):
    user = _register(client)
    resp = client.put(f"/api/users/{user['id']}", json={"email": "evil@example.com"})
    assert resp.json()["email"] == "sam@example.com"


def test_get_missing_user(client):
    assert client.get("/api/users/nobody").status_code == 404


# ── Preferences ──────────────────────────────────────────────────────────


def test_preferences_round_trip(client):
    user = _register(client)
    prefs = {
        "favoriteCategories": ["cafe", "bar"],
        "priceRange": "$$",
        "dietaryRestrictions": ["vegan"],
    }

    put = client.put(f"/api/users/{user['id']}/preferences", json=prefs)
    get = client.get(f"/api/users/{user['id']}/preferences")

    assert put.status_code == 200
    assert get.json() == prefs


def test_preferences_reject_unknown_category(client):
    user = _register(client)
    resp = client.put(
        f"/api/users/{user['id']}/preferences",
        json={"favoriteCategories": ["spaceport"]},
    )
    assert resp.status_code == 422


def test_new_user_has_empty_preferences(client):
    user = _register(client)
    prefs = client.get(f"/api/users/{user['id']}/preferences").json()
    assert prefs == {"favoriteCategories": [], "priceRange": "", "dietaryRestrictions": []}


# ── Password ─────────────────────────────────────────────────────────────


def test_change_password(client):
    user = _register(client)

    resp = client.put(
        f"/api/users/{user['id']}/password",
        json={"currentPassword": "password123", "newPassword": "better-password"},
    )

    assert resp.status_code == 200
    assert resp.json()["message"] == "Password updated successfully"
    client.post("/api/auth/logout")
    assert _login(client).status_code == 401
    assert _login(client, password="better-password").status_code == 200


def test_change_password_wrong_current(client):
    user = _register(client)
    resp = client.put(
        f"/api/users/{user['id']}/password",
        json={"currentPassword": "nope-nope", "newPassword": "better-password"},
    )
    assert resp.status_code == 401
    assert resp.json()["error"] == "Current password is incorrect"


# ── History ──────────────────────────────────────────────────────────────


def test_history_lists_recent_reviews_and_favorites(client, make_place):
    user = _register(client)
    places = [make_place(f"P{i}") for i in range(12)]
    for place in places:
        client.post("/api/reviews", json={"placeId": place.id, "rating": 4})
    client.post("/api/favorites", json={"placeId": places[0].id})

    body = client.get(f"/api/users/{user['id']}/history").json()

    assert body["user"]["id"] == user["id"]
    assert len(body["reviews"]) == 10
    assert [p["name"] for p in body["favorites"]] == ["P0"]


# ── Account deletion ─────────────────────────────────────────────────────


def test_delete_account_removes_user_data(client, store, make_place):
    place = make_place()
    other = _register(client, email="other@example.com")
    client.post("/api/reviews", json={"placeId": place.id, "rating": 2})
    client.post("/api/auth/logout")

    user = _register(client)
    client.post("/api/reviews", json={"placeId": place.id, "rating": 5})
    client.post("/api/favorites", json={"placeId": place.id})
    assert store.get_place(place.id).average_rating == 3.5

    resp = client.request("DELETE", f"/api/users/{user['id']}", json={"password": "password123"})

    assert resp.status_code == 200
    assert resp.json()["message"] == "Account deleted successfully"
    assert store.get_user(user["id"]) is None
    assert store.reviews_for_user(user["id"]) == []
    assert store.favorites_for_user(user["id"]) == []
    # Remaining reviews are re-aggregated
    updated = store.get_place(place.id)
    assert (updated.average_rating, updated.review_count) == (2.0, 1)
    assert store.get_user(other["id"]) is not None
    # Session is gone
    assert client.get("/api/auth/me").status_code == 401


def test_delete_account_wrong_password(client, store):
    user = _register(client)
    resp = client.request("DELETE", f"/api/users/{user['id']}", json={"password": "wrong-one"})
    assert resp.status_code == 401
    assert store.get_user(user["id"]) is not None
