from __future__ import annotations

import pytest

from critique.errors import BadRequestError
from critique.places.service import parse_sort

NEW_PLACE = {
    "name": "Corner Bistro",
    "category": "restaurant",
    "location": {"address": "10 Elm St", "city": "Boston", "state": "MA", "zipCode": "02108"},
    "description": "Neighbourhood bistro",
    "priceRange": "$$",
}


def _register(c, email="owner@example.com"):
    c.post("/api/auth/register", json={"email": email, "password": "password123", "name": "Owner"})


# ── Sort parsing ─────────────────────────────────────────────────────────


def test_parse_sort_defaults_to_rating():
    assert parse_sort(None) == ("-average_rating",)
    assert parse_sort("  ") == ("-average_rating",)


def test_parse_sort_accepts_camel_case_keys():
    assert parse_sort("-averageRating,name") == ("-average_rating", "name")
    assert parse_sort("-reviewCount") == ("-review_count",)


def test_parse_sort_rejects_unknown_field():
    with pytest.raises(BadRequestError):
        parse_sort("password")


# ── Search ───────────────────────────────────────────────────────────────


def test_search_defaults_to_highest_rated_first(client, make_place):
    make_place("Low", average_rating=2.0, review_count=1)
    make_place("High", average_rating=4.5, review_count=1)

    names = [p["name"] for p in client.get("/api/places").json()]

    assert names == ["High", "Low"]


def test_search_filters(client, make_place):
    make_place("Blue Bottle", "coffee_shop", price_range="$", city="Oakland")
    make_place("Blue Moon", "bar", price_range="$$", city="Boston")
    make_place("Red Rooster", "restaurant", price_range="$$", city="Boston")

    def names(**params):
        return sorted(p["name"] for p in client.get("/api/places", params=params).json())

    assert names(name="blue") == ["Blue Bottle", "Blue Moon"]
    assert names(location="bos") == ["Blue Moon", "Red Rooster"]
    assert names(category="bar") == ["Blue Moon"]
    assert names(priceRange="$$") == ["Blue Moon", "Red Rooster"]
    assert names(name="blue", location="boston") == ["Blue Moon"]


def test_search_with_custom_sort(client, make_place):
    make_place("B", average_rating=4.0, review_count=3)
    make_place("A", average_rating=4.0, review_count=9)

    resp = client.get("/api/places", params={"sort": "name"})

    assert [p["name"] for p in resp.json()] == ["A", "B"]


def test_search_with_bad_sort(client):
    resp = client.get("/api/places", params={"sort": "secret"})
    assert resp.status_code == 400
    assert "secret" in resp.json()["error"]


def test_search_with_unknown_category(client):
    assert client.get("/api/places", params={"category": "spaceport"}).status_code == 422


# ── CRUD ─────────────────────────────────────────────────────────────────


def test_create_and_get_place(client):
    _register(client)

    resp = client.post("/api/places", json=NEW_PLACE)

    assert resp.status_code == 201
    created = resp.json()
    assert created["averageRating"] == 0
    assert created["reviewCount"] == 0
    assert created["location"]["zipCode"] == "02108"

    fetched = client.get(f"/api/places/{created['id']}").json()
    assert fetched["name"] == "Corner Bistro"
    assert fetched["priceRange"] == "$$"


def test_create_place_ignores_aggregate_fields(client):
    _register(client)

    resp = client.post("/api/places", json={**NEW_PLACE, "averageRating": 5, "reviewCount": 500})

    assert resp.json()["averageRating"] == 0
    assert resp.json()["reviewCount"] == 0


def test_create_place_duplicate_external_id(client):
    _register(client)
    client.post("/api/places", json={**NEW_PLACE, "externalId": "ext-1"})
    resp = client.post("/api/places", json={**NEW_PLACE, "externalId": "ext-1"})
    assert resp.status_code == 409


def test_create_place_requires_address_and_city(client):
    _register(client)
    resp = client.post("/api/places", json={**NEW_PLACE, "location": {"address": "1 St"}})
    assert resp.status_code == 422


def test_get_missing_place(client):
    resp = client.get("/api/places/missing")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Place not found"}


def test_update_place_partial(client, store, make_place):
    place = make_place("Old Name", average_rating=4.2, review_count=5)
    _register(client)

    resp = client.put(f"/api/places/{place.id}", json={"name": "New Name", "description": None})

    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "New Name"
    assert body["category"] == "restaurant"
    assert body["description"] is None
    # Aggregates survive edits
    assert body["averageRating"] == 4.2
    assert store.get_place(place.id).review_count == 5


def test_update_missing_place(client):
    _register(client)
    assert client.put("/api/places/missing", json={"name": "X"}).status_code == 404


def test_delete_place_cascades(client, store, make_place):
    place = make_place()
    _register(client)
    client.post("/api/reviews", json={"placeId": place.id, "rating": 4})
    client.post("/api/favorites", json={"placeId": place.id})

    resp = client.delete(f"/api/places/{place.id}")

    assert resp.status_code == 204
    assert store.get_place(place.id) is None
    assert store.reviews_for_place(place.id) == []
    assert client.get("/api/favorites").json() == []


def test_metadata(client, make_place):
    make_place(city="Denver")
    make_place(city="Austin")
    body = client.get("/metadata").json()
    assert "coffee_shop" in body["categories"]
    assert body["priceRanges"] == ["$", "$$", "$$$"]
    assert body["cities"] == ["Austin", "Denver"]
