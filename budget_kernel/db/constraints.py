"""
Module: budget_kernel.db.constraints
Responsibility: Loading and installing the PostgreSQL exclusion constraint
    that makes overlapping active budgets impossible at the storage level.
Architecture position: Kernel > DB.  May import from db/ only.

Invariants enforced:
    For a given (owner_id, category_key) no two rows with is_active = true
    may have intersecting inclusive [start_date, end_date] ranges.  The
    service-level overlap check is a read-then-write sequence with a race
    window between concurrent requests; this constraint closes it.

Failure modes:
    - IntegrityError (ExclusionViolation) on INSERT/UPDATE of a conflicting
      row.  SqlBudgetStore translates it into DuplicateBudgetPeriodError.
    - ProgrammingError if the btree_gist extension cannot be created.
"""

from pathlib import Path

from sqlalchemy import text
from sqlalchemy.engine import Engine

SQL_DIR = Path(__file__).parent / "sql"

OVERLAP_CONSTRAINT_FILE = "01_budget_overlap.sql"
OVERLAP_CONSTRAINT_NAME = "ex_budgets_active_overlap"


def load_overlap_constraint_sql() -> str:
    """Read the constraint DDL from the packaged SQL file."""
    path = SQL_DIR / OVERLAP_CONSTRAINT_FILE
    if not path.exists():
        raise FileNotFoundError(f"Constraint SQL file not found: {path}")
    return path.read_text()


def install_overlap_constraint(engine: Engine) -> None:
    """
    Install the overlap exclusion constraint (idempotent).

    Preconditions: the ``budgets`` table exists; engine is PostgreSQL.
    """
    with engine.connect() as conn:
        conn.execute(text(load_overlap_constraint_sql()))
        conn.commit()
