"""
budget_config -- single public entrypoint for engine configuration.

Responsibility:
    ``get_active_config()`` is the only way runtime code obtains alert
    thresholds and scan settings.  YAML loading stays internal.

Architecture position:
    Configuration -- sits above ``budget_kernel`` and ``budget_engines``.
    The kernel never imports from ``budget_config``.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``ConfigurationError`` -- invalid thresholds, frequency, cron
      expression or unknown keys.

Audit relevance:
    Every successful call emits a ``BUDGET_CONFIG_TRACE`` log entry with
    the config_id, version and checksum, tying scan results to the exact
    configuration that produced them.
"""

from __future__ import annotations

from pathlib import Path

from budget_config.loader import load_yaml_file, parse_engine_config
from budget_config.schema import AlertThresholds, EngineConfig, ScanSettings
from budget_kernel.logging_config import get_logger

_logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "AlertThresholds",
    "EngineConfig",
    "ScanSettings",
    "get_active_config",
]


def get_active_config(config_path: Path | str | None = None) -> EngineConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Override path to a YAML configuration file.
            Defaults to budget_config/sets/default.yaml.

    Returns:
        A frozen ``EngineConfig``.  Not cached; callers hold on to it for
        the lifetime of their scheduler or request.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = parse_engine_config(load_yaml_file(path))

    _logger.info(
        "BUDGET_CONFIG_TRACE",
        extra={
            "trace_type": "BUDGET_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "config_path": str(path),
        },
    )
    return config
