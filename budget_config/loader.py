"""
Configuration Loader (``budget_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into typed
``budget_config.schema`` dataclasses.  Runtime code should go through
``budget_config.get_active_config()`` rather than calling this directly.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Invalid values raise ``ConfigurationError`` naming the offending key;
  unknown keys are rejected rather than ignored.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

import yaml

from budget_batch.domain.schedule import parse_cron
from budget_batch.domain.types import ScheduleFrequency
from budget_config.schema import AlertThresholds, EngineConfig, ScanSettings
from budget_kernel.exceptions import ConfigurationError

_ROOT_KEYS = frozenset({"config_id", "version", "alerts", "scan", "logging"})
_ALERT_KEYS = frozenset({"warning_percentage", "critical_percentage"})
_SCAN_KEYS = frozenset(
    {"frequency", "cron_expression", "tick_interval_seconds", "deactivate_expired"}
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Top level of {path} must be a mapping", source=str(path),
        )
    return data


def _check_keys(section: str, data: Any, allowed: frozenset[str]) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"'{section}' must be a mapping", source=section)
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ConfigurationError(
            f"Unknown key(s) in '{section}': {', '.join(unknown)}", source=section,
        )
    return data


def parse_thresholds(data: dict[str, Any] | None) -> AlertThresholds:
    data = _check_keys("alerts", data, _ALERT_KEYS)
    defaults = AlertThresholds()
    try:
        return AlertThresholds(
            warning=str(data.get("warning_percentage", defaults.warning)),
            critical=str(data.get("critical_percentage", defaults.critical)),
        )
    except ArithmeticError as exc:
        raise ConfigurationError(
            f"Alert thresholds must be numbers: {data}", source="alerts",
        ) from exc


def parse_scan_settings(data: dict[str, Any] | None) -> ScanSettings:
    data = _check_keys("scan", data, _SCAN_KEYS)

    raw_frequency = data.get("frequency", ScheduleFrequency.DAILY.value)
    try:
        frequency = ScheduleFrequency(raw_frequency)
    except ValueError as exc:
        allowed = ", ".join(f.value for f in ScheduleFrequency)
        raise ConfigurationError(
            f"scan.frequency {raw_frequency!r} is not one of: {allowed}",
            source="scan.frequency",
        ) from exc

    cron_expression = data.get("cron_expression")
    if cron_expression:
        try:
            parse_cron(cron_expression)
        except ValueError as exc:
            raise ConfigurationError(
                f"scan.cron_expression is invalid: {exc}",
                source="scan.cron_expression",
            ) from exc

    interval = data.get("tick_interval_seconds", 60)
    if isinstance(interval, bool) or not isinstance(interval, (int, float)) or interval <= 0:
        raise ConfigurationError(
            f"scan.tick_interval_seconds must be a positive number, got {interval!r}",
            source="scan.tick_interval_seconds",
        )

    deactivate = data.get("deactivate_expired", True)
    if not isinstance(deactivate, bool):
        raise ConfigurationError(
            "scan.deactivate_expired must be true or false",
            source="scan.deactivate_expired",
        )

    return ScanSettings(
        frequency=frequency,
        cron_expression=cron_expression or None,
        tick_interval_seconds=interval,
        deactivate_expired=deactivate,
    )


def parse_log_level(data: dict[str, Any] | None) -> str:
    data = _check_keys("logging", data, frozenset({"level"}))
    level = str(data.get("level", "INFO")).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(
            f"logging.level {level!r} is not a logging level", source="logging.level",
        )
    return level


def parse_engine_config(data: dict[str, Any]) -> EngineConfig:
    """Parse a whole configuration document.

    ``config_id`` is required; everything else falls back to defaults.
    """
    data = _check_keys("<root>", data, _ROOT_KEYS)
    if not data.get("config_id"):
        raise ConfigurationError("config_id is required", source="config_id")

    return EngineConfig(
        config_id=str(data["config_id"]),
        version=int(data.get("version", 1)),
        thresholds=parse_thresholds(data.get("alerts")),
        scan=parse_scan_settings(data.get("scan")),
        log_level=parse_log_level(data.get("logging")),
        checksum=compute_checksum(data),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
