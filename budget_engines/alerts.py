"""
budget_engines.alerts -- Map a progress snapshot to zero or one alert.

Responsibility:
    Compare ``percentage_used`` against configurable warning/critical
    thresholds and build the alert message.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Thresholds come from
    ``budget_config``; defaults are 80% (warning) and 100% (critical).

Invariants enforced:
    - Stateless: the evaluator does not know whether the same alert was
      produced in an earlier cycle.  Callers that evaluate repeatedly
      re-alert every time the budget is above a threshold.
    - Boundaries are inclusive: exactly 80% is a warning, exactly 100% is
      critical.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from budget_kernel.domain.dtos import Alert, AlertSeverity, BudgetProgress
from budget_kernel.exceptions import ConfigurationError
from budget_engines.tracer import traced_engine


@dataclass(frozen=True)
class AlertThresholds:
    """Percentage thresholds for the two alert tiers."""

    warning: Decimal = Decimal("80")
    critical: Decimal = Decimal("100")

    def __post_init__(self) -> None:
        # Accept ints/strings from callers and YAML, store Decimals.
        object.__setattr__(self, "warning", Decimal(str(self.warning)))
        object.__setattr__(self, "critical", Decimal(str(self.critical)))
        if not (self.warning.is_finite() and self.critical.is_finite()):
            raise ConfigurationError("Alert thresholds must be finite numbers")
        if self.warning < 0 or self.critical < 0:
            raise ConfigurationError(
                f"Alert thresholds must be non-negative: "
                f"warning={self.warning}, critical={self.critical}"
            )
        if self.warning > self.critical:
            raise ConfigurationError(
                f"Warning threshold {self.warning} exceeds critical "
                f"threshold {self.critical}"
            )


DEFAULT_THRESHOLDS = AlertThresholds()


def classify(
    percentage_used: Decimal, thresholds: AlertThresholds = DEFAULT_THRESHOLDS,
) -> AlertSeverity | None:
    """Severity tier for a usage percentage, or None below the warning line."""
    if percentage_used >= thresholds.critical:
        return AlertSeverity.CRITICAL
    if percentage_used >= thresholds.warning:
        return AlertSeverity.WARNING
    return None


def _plain(value: Decimal) -> str:
    """Fixed-point text with trailing fractional zeros dropped."""
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def build_message(progress: BudgetProgress, severity: AlertSeverity) -> str:
    category = progress.budget.category_key
    # quantize() fails past the context precision; format() does not
    pct = f"{progress.percentage_used:.1f}"
    if severity is AlertSeverity.CRITICAL:
        return (
            f"Spending for '{category}' has reached {pct}% of the budget "
            f"({_plain(progress.spent_amount)} of {_plain(progress.budget.amount)})."
        )
    return (
        f"Spending for '{category}' is at {pct}% of the budget with "
        f"{progress.days_remaining} day(s) remaining."
    )


@traced_engine("alerts", "1.0", fingerprint_fields=("progress", "thresholds"))
def evaluate(
    progress: BudgetProgress, thresholds: AlertThresholds = DEFAULT_THRESHOLDS,
) -> Alert | None:
    """Return the alert ``progress`` warrants under ``thresholds``, if any."""
    severity = classify(progress.percentage_used, thresholds)
    if severity is None:
        return None

    budget = progress.budget
    return Alert(
        budget_id=budget.id,
        owner_id=budget.owner_id,
        category_key=budget.category_key,
        severity=severity,
        percentage_used=progress.percentage_used,
        days_remaining=progress.days_remaining,
        message=build_message(progress, severity),
    )


class AlertEvaluator:
    """Evaluator bound to one threshold configuration."""

    def __init__(self, thresholds: AlertThresholds | None = None):
        self._thresholds = thresholds or DEFAULT_THRESHOLDS

    @property
    def thresholds(self) -> AlertThresholds:
        return self._thresholds

    def evaluate(self, progress: BudgetProgress) -> Alert | None:
        return evaluate(progress, self._thresholds)
