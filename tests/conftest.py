"""
Pytest fixtures for the budget engine test suite.

Database tests run against in-memory SQLite with the real ORM models.
``StaticPool`` keeps one connection so every session sees the same
database.  PostgreSQL-only behaviour (the exclusion constraint) is tested
against the DDL text, not a live server.
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from budget_kernel.db.base import Base
from budget_kernel.domain.clock import DeterministicClock
from budget_kernel.domain.dtos import Budget, NewBudget, PeriodKind, TransactionType
from budget_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from budget_kernel.models import TransactionModel
from budget_kernel.selectors.transaction_selector import TransactionSelector
from budget_kernel.services.budget_store import SqlBudgetStore
from budget_kernel.services.notification_sink import CollectingNotificationSink


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture budget_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, budget_service):
            budget_service.create_budget(...)
            assert any(r["message"] == "budget_created" for r in captured_logs())
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("budget_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite emits its own BEGIN lazily, which breaks SAVEPOINT; let
    # SQLAlchemy own the transaction instead.
    @event.listens_for(eng, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(eng, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def session(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def budget_store(session):
    return SqlBudgetStore(session)


@pytest.fixture
def transactions(session):
    return TransactionSelector(session)


@pytest.fixture
def sink():
    return CollectingNotificationSink()


# =============================================================================
# Clock fixtures
# =============================================================================


@pytest.fixture
def clock():
    """Mid-August 2025, the reference scenario date."""
    return DeterministicClock.on_day(date(2025, 8, 16))


# =============================================================================
# Builders
# =============================================================================


def _make_budget(
    owner_id: int = 1,
    category_key: str = "food",
    amount: str = "500000",
    start: date = date(2025, 8, 1),
    end: date = date(2025, 8, 31),
    period_kind: PeriodKind = PeriodKind.MONTHLY,
    is_active: bool = True,
) -> Budget:
    """Unpersisted Budget DTO for pure engine tests."""
    return Budget(
        id=uuid4(),
        owner_id=owner_id,
        category_key=category_key,
        amount=Decimal(amount),
        period_kind=period_kind,
        start_date=start,
        end_date=end,
        is_active=is_active,
    )


def _new_budget(
    owner_id: int = 1,
    category_key: str = "food",
    amount: str = "500000",
    start: date = date(2025, 8, 1),
    end: date = date(2025, 8, 31),
    period_kind: PeriodKind = PeriodKind.MONTHLY,
    is_active: bool = True,
) -> NewBudget:
    return NewBudget(
        owner_id=owner_id,
        category_key=category_key,
        amount=Decimal(amount),
        period_kind=period_kind,
        start_date=start,
        end_date=end,
        is_active=is_active,
    )


def _add_expense(
    session,
    amount: str,
    on: date,
    owner_id: int = 1,
    category_key: str = "food",
    transaction_type: TransactionType = TransactionType.EXPENSE,
) -> TransactionModel:
    row = TransactionModel(
        owner_id=owner_id,
        category_key=category_key,
        transaction_type=transaction_type.value,
        amount=Decimal(amount),
        transaction_date=on,
    )
    session.add(row)
    session.flush()
    return row


@pytest.fixture
def make_budget():
    return _make_budget


@pytest.fixture
def new_budget():
    return _new_budget


@pytest.fixture
def add_expense(session):
    def _add(amount: str, on: date, **kwargs) -> TransactionModel:
        return _add_expense(session, amount, on, **kwargs)

    return _add
