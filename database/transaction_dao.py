import uuid
from datetime import datetime
from typing import Optional

from database.db_manager import DatabaseManager
from models.transaction import Transaction
from utils.date_helpers import format_datetime, parse_datetime


class TransactionDAO:
    """Local record store for expense and income entries."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            kind=row["kind"],
            amount=row["amount"],
            category_name=row["category_name"],
            occurred_at=parse_datetime(row["occurred_at"]),
            notes=row["notes"],
        )

    def list_by_kind(self, kind: str) -> list[Transaction]:
        """Newest first."""
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM transactions WHERE kind = ? ORDER BY occurred_at DESC, created_at DESC",
            (kind,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, tx_id: str) -> Optional[Transaction]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM transactions WHERE id = ?", (tx_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def insert(
        self,
        kind: str,
        amount: float,
        category_name: str,
        occurred_at: datetime,
        notes: str | None = None,
    ) -> Transaction:
        tx_id = str(uuid.uuid4())
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO transactions(id, kind, amount, category_name, occurred_at, notes)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (tx_id, kind, amount, category_name, format_datetime(occurred_at), notes),
        )
        conn.commit()
        return self.get_by_id(tx_id)

    def update_by_id(
        self,
        tx_id: str,
        amount: float,
        category_name: str,
        occurred_at: datetime,
        notes: str | None = None,
    ) -> Optional[Transaction]:
        """Full replace of the editable fields; returns None when the id is unknown."""
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE transactions
               SET amount=?, category_name=?, occurred_at=?, notes=?, updated_at=datetime('now')
               WHERE id=?""",
            (amount, category_name, format_datetime(occurred_at), notes, tx_id),
        )
        conn.commit()
        return self.get_by_id(tx_id)

    def delete_by_id(self, tx_id: str) -> bool:
        conn = self._db.get_connection()
        cursor = conn.execute("DELETE FROM transactions WHERE id = ?", (tx_id,))
        conn.commit()
        return cursor.rowcount > 0

    def delete_all(self) -> int:
        conn = self._db.get_connection()
        cursor = conn.execute("DELETE FROM transactions")
        conn.commit()
        return cursor.rowcount
