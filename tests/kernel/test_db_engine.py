"""
Tests for budget_kernel.db.engine -- module-level engine and session scope.
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import event, func, select

from budget_kernel.db import (
    create_tables,
    drop_tables,
    get_engine,
    get_session,
    get_session_factory,
    init_engine_from_url,
    is_postgres,
    reset_engine,
    session_scope,
)
from budget_kernel.domain.dtos import NewBudget, PeriodKind
from budget_kernel.models import BudgetModel
from budget_kernel.services.budget_store import SqlBudgetStore


@pytest.fixture
def memory_engine():
    engine = init_engine_from_url("sqlite:///:memory:")

    # Same pysqlite savepoint recipe as the shared engine fixture.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    create_tables()
    yield engine
    drop_tables()
    reset_engine()


def _august_food() -> NewBudget:
    return NewBudget(
        owner_id=1,
        category_key="food",
        amount=Decimal("100"),
        period_kind=PeriodKind.MONTHLY,
        start_date=date(2025, 8, 1),
        end_date=date(2025, 8, 31),
    )


def _count() -> int:
    with session_scope() as session:
        return session.execute(select(func.count()).select_from(BudgetModel)).scalar_one()


class TestUninitialized:
    def test_accessors_raise_before_init(self):
        reset_engine()
        with pytest.raises(RuntimeError):
            get_engine()
        with pytest.raises(RuntimeError):
            get_session()
        with pytest.raises(RuntimeError):
            get_session_factory()
        assert is_postgres() is False


class TestSessionScope:
    def test_sqlite_backend(self, memory_engine):
        assert get_engine() is memory_engine
        assert is_postgres() is False
        assert get_session_factory().kw["expire_on_commit"] is False

    def test_commits_on_success(self, memory_engine):
        with session_scope() as session:
            SqlBudgetStore(session).create(_august_food())
        assert _count() == 1

    def test_rolls_back_and_reraises(self, memory_engine, captured_logs):
        with pytest.raises(RuntimeError, match="abort"):
            with session_scope() as session:
                SqlBudgetStore(session).create(_august_food())
                raise RuntimeError("abort")

        assert _count() == 0
        assert any(r["message"] == "transaction_rolled_back" for r in captured_logs())
