"""Config module exports."""

from diffgauge.config.loader import DiffGaugeSettings, load_config
from diffgauge.config.models import (
    DetectionConfig,
    DiffGaugeConfig,
    GateConfig,
    LoggingConfig,
    PathsConfig,
)

__all__ = [
    "load_config",
    "DiffGaugeConfig",
    "DiffGaugeSettings",
    "DetectionConfig",
    "GateConfig",
    "LoggingConfig",
    "PathsConfig",
]
