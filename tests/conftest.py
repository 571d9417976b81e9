# tests/conftest.py
import itertools
from datetime import datetime

import pytest

from database.category_dao import CategoryDAO
from database.db_manager import DatabaseManager
from database.secret_dao import SecretDAO
from database.transaction_dao import TransactionDAO
from models.transaction import Transaction
from services.category_service import CategoryResolver, CategoryService
from services.report_service import ReportService
from services.security_service import SecurityGate
from services.settings_service import SettingsService
from services.transaction_service import TransactionService

# Wednesday afternoon; the surrounding Monday-based week is 2025-08-18 .. 2025-08-24
REFERENCE = datetime(2025, 8, 20, 15, 30)


@pytest.fixture
def reference() -> datetime:
    return REFERENCE


@pytest.fixture
def db(tmp_path):
    """Fresh on-disk database with schema and seed data."""
    manager = DatabaseManager(str(tmp_path / "test.db"))
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def tx_dao(db) -> TransactionDAO:
    return TransactionDAO(db)


@pytest.fixture
def category_dao(db) -> CategoryDAO:
    return CategoryDAO(db)


@pytest.fixture
def secret_dao(db) -> SecretDAO:
    return SecretDAO(db)


@pytest.fixture
def tx_service(tx_dao) -> TransactionService:
    return TransactionService(tx_dao)


@pytest.fixture
def category_service(category_dao) -> CategoryService:
    return CategoryService(category_dao)


@pytest.fixture
def resolver(category_dao) -> CategoryResolver:
    return CategoryResolver(category_dao)


@pytest.fixture
def settings_service(db) -> SettingsService:
    return SettingsService(db)


@pytest.fixture
def settings(settings_service):
    return settings_service.load()


@pytest.fixture
def report_service(tx_service, settings) -> ReportService:
    return ReportService(tx_service, settings)


@pytest.fixture
def gate(settings, settings_service, secret_dao) -> SecurityGate:
    return SecurityGate(settings, settings_service, secret_dao)


@pytest.fixture
def make_record():
    """Factory for in-memory records; ids are unique per test."""
    counter = itertools.count(1)

    def _make(
        amount: float,
        category: str = "Food",
        occurred_at: datetime = REFERENCE,
        kind: str = "expense",
        notes: str | None = None,
    ) -> Transaction:
        return Transaction(
            id=f"rec-{next(counter)}",
            kind=kind,
            amount=amount,
            category_name=category,
            occurred_at=occurred_at,
            notes=notes,
        )

    return _make
