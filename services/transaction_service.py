import logging
import sqlite3
from datetime import datetime

from database.db_manager import StoreError
from database.transaction_dao import TransactionDAO
from models.transaction import Transaction
from utils.constants import TRANSACTION_KINDS

logger = logging.getLogger(__name__)


class TransactionService:
    def __init__(self, tx_dao: TransactionDAO):
        self._dao = tx_dao

    def list_expenses(self) -> list[Transaction]:
        return self.list_by_kind("expense")

    def list_income(self) -> list[Transaction]:
        return self.list_by_kind("income")

    def list_by_kind(self, kind: str) -> list[Transaction]:
        try:
            return self._dao.list_by_kind(kind)
        except sqlite3.Error as e:
            logger.exception("Failed to fetch %s records", kind)
            raise StoreError(f"Could not load {kind} records.") from e

    def add(
        self,
        kind: str,
        amount: float,
        category_name: str,
        occurred_at: datetime,
        notes: str | None = None,
    ) -> Transaction:
        category_name, notes = self._validate(kind, amount, category_name, occurred_at, notes)
        try:
            tx = self._dao.insert(kind, amount, category_name, occurred_at, notes)
        except sqlite3.Error as e:
            logger.exception("Failed to save %s", kind)
            raise StoreError(f"Could not save {kind}.") from e
        logger.info("Added %s %s in %r", kind, tx.id, category_name)
        return tx

    def update(
        self,
        tx: Transaction,
        amount: float,
        category_name: str,
        occurred_at: datetime,
        notes: str | None = None,
    ) -> Transaction:
        category_name, notes = self._validate(tx.kind, amount, category_name, occurred_at, notes)
        try:
            updated = self._dao.update_by_id(tx.id, amount, category_name, occurred_at, notes)
        except sqlite3.Error as e:
            logger.exception("Failed to update %s %s", tx.kind, tx.id)
            raise StoreError(f"Could not update {tx.kind}.") from e
        if updated is None:
            raise ValueError("This entry no longer exists.")
        return updated

    def delete(self, tx: Transaction) -> bool:
        try:
            deleted = self._dao.delete_by_id(tx.id)
        except sqlite3.Error as e:
            logger.exception("Failed to delete %s %s", tx.kind, tx.id)
            raise StoreError(f"Could not delete {tx.kind}.") from e
        if deleted:
            logger.info("Deleted %s %s", tx.kind, tx.id)
        return deleted

    def clear_all(self) -> int:
        try:
            count = self._dao.delete_all()
        except sqlite3.Error as e:
            logger.exception("Failed to clear records")
            raise StoreError("Could not clear data.") from e
        logger.warning("Cleared all data (%d records)", count)
        return count

    def _validate(
        self,
        kind: str,
        amount: float,
        category_name: str,
        occurred_at: datetime,
        notes: str | None,
    ) -> tuple[str, str | None]:
        if kind not in TRANSACTION_KINDS:
            raise ValueError(f"Invalid type: {kind}")
        if amount is None or amount <= 0:
            raise ValueError("Amount must be greater than zero.")
        category_name = (category_name or "").strip()
        if not category_name:
            raise ValueError("Please select a category.")
        if not isinstance(occurred_at, datetime):
            raise ValueError("Invalid date.")
        notes = (notes or "").strip() or None
        return category_name, notes
