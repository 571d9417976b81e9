from datetime import datetime, timedelta

from models.category import ExpenseCategory
from models.filter_state import FilterState, TimeScope
from services.filter_service import filter_records, reference_date


def _ids(records):
    return [r.id for r in records]


def test_today_scope_with_category(make_record, reference):
    lunch = make_record(10.0, category="Food", notes="Lunch with team")
    taxi = make_record(25.0, category="Travel", notes="Taxi")
    old = make_record(7.0, category="Food", occurred_at=reference - timedelta(days=1))
    records = [lunch, taxi, old]

    today = FilterState(time_scope=TimeScope.TODAY)
    assert _ids(filter_records(records, today, now=reference)) == [lunch.id, taxi.id]

    today_food = FilterState(time_scope=TimeScope.TODAY, category=ExpenseCategory.FOOD)
    assert _ids(filter_records(records, today_food, now=reference)) == [lunch.id]


def test_search_only_sees_what_earlier_passes_kept(make_record, reference):
    yesterday_taxi = make_record(
        30.0, category="Travel", notes="taxi", occurred_at=reference - timedelta(days=1)
    )
    state = FilterState(time_scope=TimeScope.TODAY, search="taxi")
    assert filter_records([yesterday_taxi], state, now=reference) == []

    state.time_scope = TimeScope.ALL
    assert _ids(filter_records([yesterday_taxi], state, now=reference)) == [yesterday_taxi.id]


def test_search_is_case_insensitive_on_notes_and_category(make_record, reference):
    lunch = make_record(10.0, category="Food", notes="LUNCH")
    bill = make_record(60.0, category="Bills", notes=None)
    state = FilterState(search="lunch")
    assert _ids(filter_records([lunch, bill], state, now=reference)) == [lunch.id]

    state.search = "BILL"
    assert _ids(filter_records([lunch, bill], state, now=reference)) == [bill.id]


def test_custom_scope_without_date_behaves_like_all(make_record, reference):
    records = [
        make_record(1.0),
        make_record(2.0, occurred_at=reference - timedelta(days=30)),
    ]
    state = FilterState(time_scope=TimeScope.CUSTOM)
    assert len(filter_records(records, state, now=reference)) == 2


def test_custom_scope_keeps_chosen_day(make_record, reference):
    picked = datetime(2025, 8, 1)
    on_day = make_record(4.0, occurred_at=datetime(2025, 8, 1, 18, 45))
    other = make_record(5.0)
    state = FilterState(time_scope=TimeScope.CUSTOM, custom_date=picked)
    assert _ids(filter_records([on_day, other], state, now=reference)) == [on_day.id]


def test_all_categories_differs_from_other(make_record, reference):
    custom = make_record(8.0, category="Groceries")
    food = make_record(3.0, category="Food")

    everything = FilterState(category=None)
    assert len(filter_records([custom, food], everything, now=reference)) == 2

    other_only = FilterState(category=ExpenseCategory.OTHER)
    assert _ids(filter_records([custom, food], other_only, now=reference)) == [custom.id]


def test_input_is_not_mutated(make_record, reference):
    records = [make_record(1.0, category="Travel"), make_record(2.0)]
    snapshot = list(records)
    result = filter_records(records, FilterState(category=ExpenseCategory.FOOD), now=reference)
    assert records == snapshot
    assert result is not records


def test_reference_date_follows_custom_scope(reference):
    picked = datetime(2024, 2, 29)
    assert reference_date(FilterState(), now=reference) == reference
    assert reference_date(FilterState(time_scope=TimeScope.CUSTOM), now=reference) == reference
    custom = FilterState(time_scope=TimeScope.CUSTOM, custom_date=picked)
    assert reference_date(custom, now=reference) == picked
