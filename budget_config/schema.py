"""
Configuration schema (``budget_config.schema``).

Frozen dataclasses describing one parsed configuration set.  Instances are
produced by ``budget_config.loader`` and handed out by
``budget_config.get_active_config()``; nothing else constructs them from
files.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from budget_batch.domain.types import ScheduleFrequency
from budget_engines.alerts import AlertThresholds

__all__ = ["AlertThresholds", "EngineConfig", "ScanSettings"]


@dataclass(frozen=True)
class ScanSettings:
    """When and how the periodic alert scan runs."""

    frequency: ScheduleFrequency = ScheduleFrequency.DAILY
    cron_expression: str | None = None
    tick_interval_seconds: float = 60
    deactivate_expired: bool = True


@dataclass(frozen=True)
class EngineConfig:
    """Root configuration object."""

    config_id: str
    version: int
    thresholds: AlertThresholds = field(default_factory=AlertThresholds)
    scan: ScanSettings = field(default_factory=ScanSettings)
    log_level: str = "INFO"
    checksum: str = ""
