"""Ordering of flagged report items."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from .models import ReportItem

SORT_KEYS = ("size", "added", "gap", "last_activity", "inactivity")
SORT_ORDERS = ("asc", "desc")
DEFAULT_SORT_KEY = "size"
DEFAULT_SORT_ORDER = "desc"

EPOCH_MIN = datetime.min.replace(tzinfo=timezone.utc)


class UnsupportedSortError(ValueError):
    """Raised for a sort key that is not one of SORT_KEYS."""


def _days(span: timedelta) -> float:
    return max(span / timedelta(days=1), 0.0)


def gap_days(
    added_at: datetime | None, first_activity_at: datetime | None, generated_at: datetime
) -> float:
    """Days between being added and first being watched (or now if never)."""
    if added_at is None:
        return 0.0
    end = first_activity_at if first_activity_at is not None else generated_at
    return _days(end - added_at)


def inactivity_days(
    added_at: datetime | None, last_activity_at: datetime | None, generated_at: datetime
) -> float:
    """Days since last activity, falling back to days since added."""
    if last_activity_at is not None:
        return _days(generated_at - last_activity_at)
    if added_at is not None:
        return _days(generated_at - added_at)
    return 0.0


def _time_value(value: datetime | None) -> datetime:
    return value if value is not None else EPOCH_MIN


def _sort_key(sort_by: str, generated_at: datetime) -> Callable[[ReportItem], object]:
    if sort_by == "size":
        return lambda item: item.size_bytes
    if sort_by == "added":
        return lambda item: _time_value(item.added_at)
    if sort_by == "gap":
        return lambda item: gap_days(item.added_at, item.first_activity_at, generated_at)
    if sort_by == "last_activity":
        return lambda item: _time_value(item.last_activity_at)
    if sort_by == "inactivity":
        return lambda item: inactivity_days(item.added_at, item.last_activity_at, generated_at)
    raise UnsupportedSortError(f"unsupported sort option: {sort_by}")


def sort_items(
    items: list[ReportItem],
    sort_by: str = DEFAULT_SORT_KEY,
    order: str = DEFAULT_SORT_ORDER,
    generated_at: datetime | None = None,
) -> list[ReportItem]:
    """
    Stably sort items in place and return them.

    Equal keys keep their input order in both directions. Any order other
    than "asc" sorts descending.

    Raises:
        UnsupportedSortError: If sort_by is not a known key
    """
    key = _sort_key(sort_by or DEFAULT_SORT_KEY, generated_at or datetime.now(timezone.utc))
    descending = (order or DEFAULT_SORT_ORDER) != "asc"
    items.sort(key=key, reverse=descending)
    return items
