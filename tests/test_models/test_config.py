"""Tests for configuration models."""

import json
from uuid import uuid4

import pytest
from pydantic import ValidationError

from hostwatch.models.config import (
    Config,
    MonitorSettings,
    TargetConfig,
    clamp_timeout,
)


class TestClampTimeout:
    """Tests for the timeout clamp helper."""

    def test_in_range(self):
        assert clamp_timeout(3) == 3
        assert clamp_timeout(1) == 1
        assert clamp_timeout(10) == 10

    def test_below_range(self):
        assert clamp_timeout(0) == 1
        assert clamp_timeout(-5) == 1
        assert clamp_timeout(0.5) == 1

    def test_above_range(self):
        assert clamp_timeout(11) == 10
        assert clamp_timeout(600) == 10

    def test_fractional_rounds_to_nearest_second(self):
        assert clamp_timeout(2.9) == 3
        assert clamp_timeout(2.4) == 2
        assert clamp_timeout(9.6) == 10


class TestTargetConfig:
    """Tests for TargetConfig model."""

    def test_valid_target(self):
        """Test creating a valid target config."""
        target = TargetConfig(name="Router", host="192.168.1.1", port=443)
        assert target.name == "Router"
        assert target.host == "192.168.1.1"
        assert target.port == 443
        assert target.id is None

    def test_defaults(self):
        target = TargetConfig(host="example.com")
        assert target.name == ""
        assert target.port == 80

    def test_strips_whitespace(self):
        target = TargetConfig(name="  NAS ", host="  nas.local  ")
        assert target.name == "NAS"
        assert target.host == "nas.local"

    def test_empty_host_rejected(self):
        """Test that blank hosts are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            TargetConfig(host="   ")
        assert "Host must not be empty" in str(exc_info.value)

    def test_out_of_range_port_accepted(self):
        """Port range is checked at probe time, not here."""
        assert TargetConfig(host="h", port=0).port == 0
        assert TargetConfig(host="h", port=70000).port == 70000

    def test_to_target_without_id(self):
        target = TargetConfig(name="NAS", host="nas.local", port=5000).to_target()
        assert target.name == "NAS"
        assert target.address == "nas.local:5000"

    def test_to_target_keeps_id(self):
        target_id = uuid4()
        target = TargetConfig(host="nas.local", id=target_id).to_target()
        assert target.id == target_id


class TestMonitorSettings:
    """Tests for MonitorSettings model."""

    def test_defaults(self):
        settings = MonitorSettings()
        assert settings.timeout_seconds == 3
        assert settings.refresh_interval_seconds == 15.0
        assert settings.debounce_seconds == 1.0
        assert settings.log_level == "INFO"

    def test_timeout_clamped(self):
        """Out-of-range timeouts are clamped instead of rejected."""
        assert MonitorSettings(timeout_seconds=0).timeout_seconds == 1
        assert MonitorSettings(timeout_seconds=99).timeout_seconds == 10
        assert MonitorSettings(timeout_seconds=7).timeout_seconds == 7
        assert MonitorSettings(timeout_seconds=2.6).timeout_seconds == 3

    def test_non_numeric_timeout_rejected(self):
        with pytest.raises(ValidationError):
            MonitorSettings(timeout_seconds="soon")

    def test_refresh_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            MonitorSettings(refresh_interval_seconds=0)

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            MonitorSettings(log_level="TRACE")


class TestConfig:
    """Tests for main Config model."""

    def test_default_config(self):
        config = Config()
        assert config.targets == []
        assert config.settings.timeout_seconds == 3

    def test_load_from_file(self, sample_config_file):
        """Test loading config from JSON file."""
        config = Config.load(sample_config_file)
        assert len(config.targets) == 2
        assert config.targets[0].name == "Router"
        assert config.targets[1].port == 5000
        assert config.settings.timeout_seconds == 5
        assert config.settings.refresh_interval_seconds == 30
        assert config.settings.log_level == "DEBUG"

    def test_load_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            Config.load(temp_dir / "missing.json")

    def test_load_or_default_missing_file(self, temp_dir):
        config = Config.load_or_default(temp_dir / "missing.json")
        assert config.targets == []

    def test_load_invalid_target(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"targets": [{"host": ""}]}))
        with pytest.raises(ValidationError):
            Config.load(path)

    def test_build_targets(self, sample_config_file):
        targets = Config.load(sample_config_file).build_targets()
        assert [t.address for t in targets] == ["192.168.1.1:80", "nas.local:5000"]
        assert targets[0].id != targets[1].id
