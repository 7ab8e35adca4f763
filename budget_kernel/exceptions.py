"""
Typed exception hierarchy for the budget engine.

Every error has a typed class (catch by type, not message), a ``code`` class
attribute (machine-readable, API-safe) and carries structured data as
attributes rather than only a message string.

    BudgetEngineError (base)
    |
    +-- BudgetValidationError
    |   +-- InvalidPeriodError
    |
    +-- BudgetConflictError
    |   +-- DuplicateBudgetPeriodError
    |
    +-- BudgetNotFoundError
    |
    +-- ComputationDegenerateError
    |
    +-- ConfigurationError

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Validation      | INVALID_PERIOD              | end before start, or amount not positive
----------------|-----------------------------|-----------------------------------------
Conflict        | DUPLICATE_BUDGET_PERIOD     | window overlaps an active budget for the
                |                             | same owner and category
----------------|-----------------------------|-----------------------------------------
Lookup          | BUDGET_NOT_FOUND            | unknown id, or id owned by someone else
----------------|-----------------------------|-----------------------------------------
Computation     | COMPUTATION_DEGENERATE      | NaN or Infinity produced by progress math
----------------|-----------------------------|-----------------------------------------
Config          | CONFIGURATION_ERROR         | malformed or inconsistent configuration

Handling:

    try:
        service.create_budget(data)
    except DuplicateBudgetPeriodError as e:
        return {"error": e.code, "conflicting_budget_id": str(e.existing_budget_id)}
    except InvalidPeriodError as e:
        return {"error": e.code, "reason": e.reason}

Validation and conflict errors are recovered at the write boundary and
rendered by the caller.  ``BudgetNotFoundError`` deliberately does not say
whether the budget exists under another owner.
"""


class BudgetEngineError(Exception):
    """
    Base exception for all budget engine errors.

    All subclasses must have a ``code`` class attribute.
    """

    code: str = "BUDGET_ENGINE_ERROR"


# Validation


class BudgetValidationError(BudgetEngineError):
    """Base exception for individually malformed input."""

    code: str = "BUDGET_VALIDATION_ERROR"


class InvalidPeriodError(BudgetValidationError):
    """Budget window or amount is invalid on its own."""

    code: str = "INVALID_PERIOD"

    def __init__(self, reason: str, start_date: str | None = None,
                 end_date: str | None = None, amount: str | None = None):
        self.reason = reason
        self.start_date = start_date
        self.end_date = end_date
        self.amount = amount
        super().__init__(f"Invalid budget period: {reason}")


# Conflict


class BudgetConflictError(BudgetEngineError):
    """Base exception for well-formed input that collides with stored state."""

    code: str = "BUDGET_CONFLICT"


class DuplicateBudgetPeriodError(BudgetConflictError):
    """
    Window overlaps an existing active budget for the same owner/category.

    Windows are inclusive on both ends, so a budget ending on the day
    another one starts is a conflict.
    """

    code: str = "DUPLICATE_BUDGET_PERIOD"

    def __init__(
        self,
        owner_id: int,
        category_key: str,
        existing_budget_id: str | None,
        overlap_start: str | None = None,
        overlap_end: str | None = None,
    ):
        self.owner_id = owner_id
        self.category_key = category_key
        self.existing_budget_id = existing_budget_id
        self.overlap_start = overlap_start
        self.overlap_end = overlap_end
        window = (
            f" ({overlap_start} to {overlap_end})"
            if overlap_start and overlap_end
            else ""
        )
        super().__init__(
            f"Budget for category '{category_key}' overlaps an existing "
            f"active budget{window}"
        )


# Lookup


class BudgetNotFoundError(BudgetEngineError):
    """Budget does not exist for this owner."""

    code: str = "BUDGET_NOT_FOUND"

    def __init__(self, budget_id: str):
        self.budget_id = budget_id
        super().__init__(f"Budget not found: {budget_id}")


# Computation


class ComputationDegenerateError(BudgetEngineError):
    """
    Progress computation produced a non-finite value.

    Unreachable for finite inputs; seeing it means a defect upstream.
    """

    code: str = "COMPUTATION_DEGENERATE"

    def __init__(self, budget_id: str, field_name: str, value: str):
        self.budget_id = budget_id
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"Non-finite {field_name}={value} computed for budget {budget_id}"
        )


# Configuration


class ConfigurationError(BudgetEngineError):
    """Configuration is malformed or internally inconsistent."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        super().__init__(message)
