"""Search, filter and sort for the visit list."""

from enum import Enum

from munch_log.domain.models import VisitRecord


class SortMode(Enum):
    """Orderings offered by the list screen."""

    DATE = "date"
    RATING = "rating"

    @property
    def label(self) -> str:
        return _SORT_LABELS[self]

    @classmethod
    def parse(cls, raw: str | None) -> "SortMode":
        """Return the mode for a form value, falling back to date order."""
        for mode in cls:
            if mode.value == raw:
                return mode
        return cls.DATE


_SORT_LABELS = {
    SortMode.DATE: "Latest First",
    SortMode.RATING: "Highest Rated",
}

RATING_CHOICES = tuple(range(10, 0, -1))


def visible_visits(
    visits: list[VisitRecord],
    search_term: str,
    filter_rating: int | None,
    sort_by: SortMode,
) -> list[VisitRecord]:
    """Derive the displayed list without touching the stored order."""
    needle = search_term.lower()
    matched = [
        visit
        for visit in visits
        if needle in visit.restaurant_name.lower()
        or needle in visit.dishes_ordered.lower()
    ]
    if filter_rating:
        matched = [visit for visit in matched if visit.rating == filter_rating]
    if sort_by is SortMode.RATING:
        return sorted(matched, key=lambda visit: visit.rating, reverse=True)
    return sorted(matched, key=lambda visit: visit.date_visited, reverse=True)
