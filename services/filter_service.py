"""Narrow a record list by time scope, category and free-text search.

The passes always run in that order; search only sees what the time and
category passes kept.
"""
from datetime import datetime

from models.filter_state import FilterState, TimeScope
from models.transaction import Transaction
from utils.date_helpers import is_same_day
from utils.date_helpers import now as current_time


def _time_pass(records: list[Transaction], state: FilterState, now: datetime) -> list[Transaction]:
    if state.time_scope == TimeScope.TODAY:
        return [r for r in records if is_same_day(r.occurred_at, now)]
    if state.time_scope == TimeScope.CUSTOM and state.custom_date is not None:
        return [r for r in records if is_same_day(r.occurred_at, state.custom_date)]
    return records


def _category_pass(records: list[Transaction], state: FilterState) -> list[Transaction]:
    if state.category is None:
        return records
    return [r for r in records if r.builtin_category == state.category]


def _search_pass(records: list[Transaction], state: FilterState) -> list[Transaction]:
    if not state.search:
        return records
    needle = state.search.casefold()
    return [
        r for r in records
        if (r.notes and needle in r.notes.casefold())
        or needle in r.category_name.casefold()
    ]


def filter_records(
    records: list[Transaction],
    state: FilterState,
    now: datetime | None = None,
) -> list[Transaction]:
    """Return the visible subset as a new list; the input is never mutated."""
    now = now or current_time()
    visible = list(records)
    visible = _time_pass(visible, state, now)
    visible = _category_pass(visible, state)
    visible = _search_pass(visible, state)
    return visible


def reference_date(state: FilterState, now: datetime | None = None) -> datetime:
    """Statistics follow the chosen day while a custom date filter is active."""
    if state.time_scope == TimeScope.CUSTOM and state.custom_date is not None:
        return state.custom_date
    return now or current_time()
