"""Tests for list search, filtering and sorting."""

from datetime import date

from munch_log.domain.listing import SortMode, visible_visits
from munch_log.domain.models import VisitRecord


def _visit(
    visit_id: str, name: str, dishes: str, visited: date, rating: int
) -> VisitRecord:
    return VisitRecord(
        id=visit_id,
        user_id="user-1",
        restaurant_name=name,
        date_visited=visited,
        dishes_ordered=dishes,
        rating=rating,
    )


VISITS = [
    _visit("a", "Cafe Luna", "Latte, croissant", date(2024, 3, 1), 8),
    _visit("b", "Pizza Place", "Margherita", date(2024, 5, 20), 6),
    _visit("c", "Noodle Bar", "Ramen with egg", date(2023, 12, 24), 9),
    _visit("d", "Lunar Diner", "Pancakes", date(2024, 1, 5), 8),
]


def test_date_sort_is_strictly_descending() -> None:
    result = visible_visits(VISITS, "", None, SortMode.DATE)

    dates = [visit.date_visited for visit in result]
    assert dates == sorted(dates, reverse=True)
    assert len(set(dates)) == len(dates)
    assert [visit.id for visit in result] == ["b", "a", "d", "c"]


def test_rating_sort_is_non_increasing() -> None:
    result = visible_visits(VISITS, "", None, SortMode.RATING)

    ratings = [visit.rating for visit in result]
    assert all(left >= right for left, right in zip(ratings, ratings[1:]))
    assert result[0].id == "c"


def test_rating_sort_keeps_stored_order_for_ties() -> None:
    result = visible_visits(VISITS, "", None, SortMode.RATING)

    tied = [visit.id for visit in result if visit.rating == 8]
    assert tied == ["a", "d"]


def test_search_matches_name_or_dishes_case_insensitively() -> None:
    by_name = visible_visits(VISITS, "LUN", None, SortMode.DATE)
    by_dish = visible_visits(VISITS, "ramen", None, SortMode.DATE)

    assert {visit.id for visit in by_name} == {"a", "d"}
    assert [visit.id for visit in by_dish] == ["c"]


def test_search_and_rating_filters_compose() -> None:
    result = visible_visits(VISITS, "lun", 8, SortMode.DATE)
    assert [visit.id for visit in result] == ["a", "d"]

    result = visible_visits(VISITS, "lun", 9, SortMode.DATE)
    assert result == []

    result = visible_visits(VISITS, "", 6, SortMode.DATE)
    assert [visit.id for visit in result] == ["b"]


def test_filtering_leaves_stored_list_untouched() -> None:
    stored = list(VISITS)

    visible_visits(stored, "pizza", 6, SortMode.RATING)

    assert stored == VISITS


def test_sort_mode_parse_falls_back_to_date() -> None:
    assert SortMode.parse("rating") is SortMode.RATING
    assert SortMode.parse("date") is SortMode.DATE
    assert SortMode.parse("bogus") is SortMode.DATE
    assert SortMode.parse(None) is SortMode.DATE
    assert SortMode.RATING.label == "Highest Rated"
