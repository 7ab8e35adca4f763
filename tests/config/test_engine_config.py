"""
Tests for budget_config: YAML loading, validation and the config trace.
"""

from decimal import Decimal

import pytest
import yaml

from budget_batch.domain.types import ScheduleFrequency
from budget_config import DEFAULT_CONFIG_PATH, get_active_config
from budget_config.loader import compute_checksum, parse_engine_config
from budget_kernel.exceptions import ConfigurationError


def _write(tmp_path, document) -> str:
    path = tmp_path / "engine.yaml"
    path.write_text(yaml.safe_dump(document))
    return str(path)


class TestDefaultConfig:
    def test_default_values(self):
        config = get_active_config()

        assert config.config_id == "default"
        assert config.version == 1
        assert config.thresholds.warning == Decimal("80")
        assert config.thresholds.critical == Decimal("100")
        assert config.scan.frequency is ScheduleFrequency.DAILY
        assert config.scan.cron_expression == "0 9 * * *"
        assert config.scan.tick_interval_seconds == 60
        assert config.scan.deactivate_expired is True
        assert config.log_level == "INFO"

    def test_checksum_is_stable(self):
        assert get_active_config().checksum == get_active_config().checksum
        assert len(get_active_config().checksum) == 64

    def test_trace_logged(self, captured_logs):
        config = get_active_config()
        [record] = [r for r in captured_logs() if r["message"] == "BUDGET_CONFIG_TRACE"]
        assert record["config_id"] == "default"
        assert record["checksum"] == config.checksum
        assert record["config_path"] == str(DEFAULT_CONFIG_PATH)


class TestCustomConfig:
    def test_custom_file(self, tmp_path):
        path = _write(tmp_path, {
            "config_id": "strict",
            "version": 3,
            "alerts": {"warning_percentage": 50, "critical_percentage": 75.5},
            "scan": {"frequency": "hourly", "tick_interval_seconds": 5},
            "logging": {"level": "debug"},
        })

        config = get_active_config(path)

        assert config.config_id == "strict"
        assert config.version == 3
        assert config.thresholds.warning == Decimal("50")
        assert config.thresholds.critical == Decimal("75.5")
        assert config.scan.frequency is ScheduleFrequency.HOURLY
        assert config.scan.cron_expression is None
        assert config.log_level == "DEBUG"

    def test_missing_sections_use_defaults(self):
        config = parse_engine_config({"config_id": "minimal"})
        assert config.thresholds.warning == Decimal("80")
        assert config.scan.frequency is ScheduleFrequency.DAILY

    def test_checksum_tracks_content(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})
        assert compute_checksum({"a": 1}) != compute_checksum({"a": 2})

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError):
            get_active_config(path)


class TestInvalidConfig:
    @pytest.mark.parametrize(
        "document, source",
        [
            ({"config_id": "x", "extra": 1}, "<root>"),
            ({"config_id": "x", "alerts": {"warn": 10}}, "alerts"),
            ({"version": 1}, "config_id"),
            ({"config_id": "x", "scan": {"frequency": "monthly"}}, "scan.frequency"),
            ({"config_id": "x", "scan": {"cron_expression": "61 * * * *"}}, "scan.cron_expression"),
            ({"config_id": "x", "scan": {"tick_interval_seconds": 0}}, "scan.tick_interval_seconds"),
            ({"config_id": "x", "scan": {"tick_interval_seconds": True}}, "scan.tick_interval_seconds"),
            ({"config_id": "x", "scan": {"deactivate_expired": "yes"}}, "scan.deactivate_expired"),
            ({"config_id": "x", "logging": {"level": "LOUD"}}, "logging.level"),
        ],
    )
    def test_rejected(self, document, source):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_engine_config(document)
        assert exc_info.value.source == source

    @pytest.mark.parametrize(
        "alerts",
        [
            {"warning_percentage": 90, "critical_percentage": 80},
            {"warning_percentage": -1},
            {"critical_percentage": "abc"},
        ],
    )
    def test_bad_thresholds(self, alerts):
        with pytest.raises(ConfigurationError):
            parse_engine_config({"config_id": "x", "alerts": alerts})
