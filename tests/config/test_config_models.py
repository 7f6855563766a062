"""Tests for config/models.py module.

Covers:
- LogOutputConfig model
- LoggingConfig model
- GateConfig model
- PathsConfig model
- DetectionConfig model
- DiffGaugeConfig root model
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from diffgauge.config.models import (
    DetectionConfig,
    DiffGaugeConfig,
    GateConfig,
    LoggingConfig,
    LogOutputConfig,
    PathsConfig,
)


class TestLogOutputConfig:
    """Tests for LogOutputConfig model."""

    def test_defaults(self) -> None:
        """Default values."""
        config = LogOutputConfig()
        assert config.format == "console"
        assert config.destination == "stderr"
        assert config.level is None

    def test_stdout_destination(self) -> None:
        """stdout is valid destination."""
        config = LogOutputConfig(destination="stdout")
        assert config.destination == "stdout"

    def test_absolute_path_destination(self) -> None:
        """Absolute path is valid destination."""
        config = LogOutputConfig(destination="/var/log/diffgauge.log")
        assert config.destination == "/var/log/diffgauge.log"

    def test_relative_path_fails(self) -> None:
        """Relative path is rejected."""
        with pytest.raises(ValidationError, match="absolute path"):
            LogOutputConfig(destination="logs/gate.log")


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_defaults(self) -> None:
        """Default values."""
        config = LoggingConfig()
        assert config.level == "INFO"
        assert len(config.outputs) == 1

    def test_invalid_level_fails(self) -> None:
        """Unknown level names are rejected."""
        with pytest.raises(ValidationError):
            LoggingConfig(level="VERBOSE")  # type: ignore[arg-type]


class TestGateConfig:
    """Tests for GateConfig model."""

    def test_defaults(self) -> None:
        """Threshold defaults to 80 with no per-class overrides."""
        config = GateConfig()
        assert config.threshold == 80.0
        assert config.threshold_new is None
        assert config.threshold_modified is None

    @pytest.mark.parametrize("value", [0.0, 55.5, 100.0])
    def test_accepts_percentages(self, value: float) -> None:
        """Bounds are inclusive."""
        assert GateConfig(threshold=value).threshold == value

    @pytest.mark.parametrize(
        "field", ["threshold", "threshold_new", "threshold_modified"]
    )
    def test_rejects_out_of_range(self, field: str) -> None:
        """Every threshold must lie in 0-100."""
        with pytest.raises(ValidationError, match="0-100"):
            GateConfig(**{field: 100.5})

    def test_effective_thresholds_fall_back(self) -> None:
        """Unset overrides inherit the main threshold."""
        config = GateConfig(threshold=70.0)
        assert config.effective_thresholds() == (70.0, 70.0)

    def test_effective_thresholds_use_overrides(self) -> None:
        """Overrides win when set, including zero."""
        config = GateConfig(threshold=70.0, threshold_new=90.0, threshold_modified=0.0)
        assert config.effective_thresholds() == (90.0, 0.0)


class TestPathsAndDetectionConfig:
    """Tests for PathsConfig and DetectionConfig models."""

    def test_paths_defaults(self) -> None:
        """Basename matching is on and no prefixes are stripped."""
        config = PathsConfig()
        assert config.allow_basename_match is True
        assert config.strip_prefixes == []

    def test_detection_default(self) -> None:
        """Detection inspects 1024 characters by default."""
        assert DetectionConfig().sniff_bytes == 1024

    @pytest.mark.parametrize("value", [0, -1])
    def test_detection_rejects_non_positive(self, value: int) -> None:
        """sniff_bytes must be positive."""
        with pytest.raises(ValidationError, match="positive"):
            DetectionConfig(sniff_bytes=value)


class TestDiffGaugeConfig:
    """Tests for the root model."""

    def test_all_sections_present(self) -> None:
        """Root config builds every section from defaults."""
        config = DiffGaugeConfig()
        assert config.logging.level == "INFO"
        assert config.gate.threshold == 80.0
        assert config.paths.allow_basename_match is True
        assert config.detection.sniff_bytes == 1024

    def test_from_nested_dict(self) -> None:
        """Nested dicts validate into section models."""
        config = DiffGaugeConfig.model_validate(
            {"gate": {"threshold": 90}, "paths": {"strip_prefixes": ["github.com/acme/app/"]}}
        )
        assert config.gate.threshold == 90.0
        assert config.paths.strip_prefixes == ["github.com/acme/app/"]
