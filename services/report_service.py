from datetime import datetime

from models.filter_state import FilterState
from models.settings import AppSettings
from models.statistics import Statistics
from models.transaction import Transaction
from services.filter_service import filter_records, reference_date
from services.statistics_service import compute_statistics
from services.transaction_service import TransactionService


class ReportService:
    def __init__(self, tx_service: TransactionService, settings: AppSettings):
        self._tx_svc = tx_service
        self._settings = settings

    def get_visible(
        self, kind: str, state: FilterState, now: datetime | None = None
    ) -> list[Transaction]:
        """Records of the given kind that pass the current filters."""
        return filter_records(self._tx_svc.list_by_kind(kind), state, now)

    def get_statistics(
        self,
        kind: str,
        state: FilterState,
        filtered: bool = True,
        now: datetime | None = None,
    ) -> Statistics:
        """Totals over the visible subset, or over every record of the kind.

        The reference date is the custom date while a custom scope is active.
        """
        records = self._tx_svc.list_by_kind(kind)
        if filtered:
            records = filter_records(records, state, now)
        return compute_statistics(
            records,
            reference_date(state, now),
            kind=kind,
            first_weekday=self._settings.first_weekday,
        )

    def get_summary(self) -> dict:
        income = sum(t.amount for t in self._tx_svc.list_income())
        expense = sum(t.amount for t in self._tx_svc.list_expenses())
        return {"income": income, "expense": expense, "net": income - expense}
