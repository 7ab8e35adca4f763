"""
Module: budget_engines
Responsibility:
    Package entrypoint re-exporting the pure calculation engines: period
    arithmetic, progress/projection, alert evaluation, summaries and
    per-category performance.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import budget_kernel.domain, budget_kernel.exceptions and
    budget_kernel.logging_config.  MUST NOT import budget_services or
    budget_batch.

Invariants enforced:
    - Purity: engines never read a clock.  "now" is always a parameter.
    - Decimal-only arithmetic for amounts and percentages.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Engine invocations are traced via ``@traced_engine``, emitting
    BUDGET_ENGINE_TRACE debug records with engine name, version, input
    fingerprint and duration.
"""

from budget_engines.alerts import (
    DEFAULT_THRESHOLDS,
    AlertEvaluator,
    AlertThresholds,
    classify,
    evaluate,
)
from budget_engines.period_math import (
    days_elapsed,
    days_remaining,
    intervals_overlap,
    month_bounds,
    overlap_window,
    period_length,
    shift_months,
)
from budget_engines.performance import category_performance
from budget_engines.progress import ProgressCalculator
from budget_engines.summary import summarize, summarize_month, utilization
from budget_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "DEFAULT_THRESHOLDS",
    "AlertEvaluator",
    "AlertThresholds",
    "ProgressCalculator",
    "category_performance",
    "classify",
    "compute_input_fingerprint",
    "days_elapsed",
    "days_remaining",
    "evaluate",
    "intervals_overlap",
    "month_bounds",
    "overlap_window",
    "period_length",
    "shift_months",
    "summarize",
    "summarize_month",
    "traced_engine",
    "utilization",
]
