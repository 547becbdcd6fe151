from __future__ import annotations

from unittest.mock import patch

from critique.ratings.aggregator import RatingAggregator, average_rating


# ── Rounding ─────────────────────────────────────────────────────────────


def test_average_of_whole_mean():
    assert average_rating([5, 4, 3]) == 4.0


def test_average_rounds_repeating_decimal_up():
    assert average_rating([5, 5, 4]) == 4.7


def test_average_rounds_half_up_not_to_even():
    # 17 / 4 = 4.25 exactly
    assert average_rating([5, 4, 4, 4]) == 4.3
    # 13 / 4 = 3.25 exactly
    assert average_rating([4, 3, 3, 3]) == 3.3


def test_average_rounds_down_below_half():
    # 13 / 3 = 4.333...
    assert average_rating([5, 4, 4]) == 4.3


def test_average_of_empty_set_is_zero():
    assert average_rating([]) == 0.0


# ── Recompute ────────────────────────────────────────────────────────────


def test_recompute_writes_mean_and_count(store, make_user, make_place, make_review):
    user = make_user()
    place = make_place()
    for rating in (5, 4, 3):
        make_review(user, place, rating)

    RatingAggregator(store).recompute(place.id)

    updated = store.get_place(place.id)
    assert updated.average_rating == 4.0
    assert updated.review_count == 3


def test_recompute_applies_rounding(store, make_user, make_place, make_review):
    user = make_user()
    place = make_place()
    for rating in (5, 5, 4):
        make_review(user, place, rating)

    RatingAggregator(store).recompute(place.id)

    assert store.get_place(place.id).average_rating == 4.7


def test_recompute_with_no_reviews_resets_to_zero(store, make_place):
    place = make_place(average_rating=4.2, review_count=12)

    RatingAggregator(store).recompute(place.id)

    updated = store.get_place(place.id)
    assert updated.average_rating == 0
    assert updated.review_count == 0


def test_recompute_is_idempotent(store, make_user, make_place, make_review):
    user = make_user()
    place = make_place()
    for rating in (2, 5, 4, 4):
        make_review(user, place, rating)
    aggregator = RatingAggregator(store)

    aggregator.recompute(place.id)
    first = store.get_place(place.id)
    aggregator.recompute(place.id)
    second = store.get_place(place.id)

    assert (first.average_rating, first.review_count) == (second.average_rating, second.review_count)


def test_recompute_touches_only_target_place(store, make_user, make_place, make_review):
    user = make_user()
    target = make_place(name="Target")
    other = make_place(name="Other", average_rating=3.9, review_count=7)
    make_review(user, target, 2)

    RatingAggregator(store).recompute(target.id)

    untouched = store.get_place(other.id)
    assert untouched.average_rating == 3.9
    assert untouched.review_count == 7
    updated = store.get_place(target.id)
    assert updated.name == "Target"
    assert updated.category == target.category
    assert updated.location == target.location


def test_recompute_missing_place_is_silent(store):
    RatingAggregator(store).recompute("does-not-exist")


def test_recompute_swallows_store_errors(store, make_place, caplog):
    place = make_place(average_rating=3.0, review_count=1)
    aggregator = RatingAggregator(store)

    with patch.object(store, "reviews_for_place", side_effect=RuntimeError("connection reset")):
        aggregator.recompute(place.id)

    assert store.get_place(place.id).average_rating == 3.0
    assert "Rating recompute failed" in caplog.text
