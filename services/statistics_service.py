"""Time-bucketed totals and per-category breakdown over a list of records.

All functions are pure: they read the records they are handed and a
reference datetime, and return a fresh Statistics snapshot.
"""
from datetime import datetime, timedelta
from typing import Callable, Iterable

from models.category import builtin_categories_for
from models.statistics import Statistics
from models.transaction import Transaction
from utils.date_helpers import is_same_day, month_start, next_month_start, week_start

Window = tuple[datetime, datetime]


def _safe_window(build: Callable[[], Window]) -> Window | None:
    """None when the calendar arithmetic runs off the supported date range."""
    try:
        return build()
    except (OverflowError, ValueError):
        return None


def week_window(reference: datetime, first_weekday: int = 0) -> Window | None:
    """[week start 00:00, week start + 7 days)."""
    def build():
        start = week_start(reference, first_weekday)
        return start, start + timedelta(days=7)
    return _safe_window(build)


def month_window(reference: datetime) -> Window | None:
    """[first of month 00:00, first of next month 00:00)."""
    return _safe_window(lambda: (month_start(reference), next_month_start(reference)))


def _sum_in_window(records: list[Transaction], window: Window | None) -> float:
    # An uncomputable window counts as already elapsed
    if window is None:
        return 0.0
    start, end = window
    return sum(r.amount for r in records if start <= r.occurred_at < end)


def compute_statistics(
    records: Iterable[Transaction],
    reference: datetime,
    kind: str = "expense",
    first_weekday: int = 0,
) -> Statistics:
    records = list(records)

    total_today = sum(r.amount for r in records if is_same_day(r.occurred_at, reference))
    total_week = _sum_in_window(records, week_window(reference, first_weekday))
    total_month = _sum_in_window(records, month_window(reference))

    # Every enumerated category appears, even at zero; custom names roll into Other
    breakdown = {category: 0.0 for category in builtin_categories_for(kind)}
    for record in records:
        category = builtin_categories_for(kind).from_name(record.category_name)
        breakdown[category] += record.amount

    return Statistics(
        total_today=total_today,
        total_this_week=total_week,
        total_this_month=total_month,
        category_breakdown=breakdown,
    )
