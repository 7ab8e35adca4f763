"""
BaseService -- abstract base for kernel services that write.

Responsibility:
    Common constructor and session-handling contract.  Concrete services
    receive a SQLAlchemy ``Session`` and persist with ``session.flush()``,
    never ``session.commit()``.

Invariants enforced:
    Transaction boundaries belong to the caller (request handler, scan
    scheduler tick, or test), so a rejected write leaves nothing behind.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from budget_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """Abstract base class for kernel services."""

    def __init__(self, session: Session):
        self.session = session
