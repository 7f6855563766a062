"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (DIFFGAUGE__SECTION__KEY)
3. Repo YAML (.diffgauge.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    DIFFGAUGE__<SECTION>__<KEY>=<VALUE>

Examples:
    DIFFGAUGE__GATE__THRESHOLD=85
    DIFFGAUGE__GATE__THRESHOLD_NEW=90
    DIFFGAUGE__PATHS__ALLOW_BASENAME_MATCH=false
    DIFFGAUGE__LOGGING__LEVEL=DEBUG
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        DIFFGAUGE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every skipped record and path miss.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class GateConfig(BaseModel):
    """Coverage gate thresholds (percentages, 0-100).

    Env vars:
        DIFFGAUGE__GATE__THRESHOLD: Changed-line coverage required to pass
        DIFFGAUGE__GATE__THRESHOLD_NEW: Override for lines in new files
        DIFFGAUGE__GATE__THRESHOLD_MODIFIED: Override for lines in modified files
    """

    threshold: float = Field(
        default=80.0,
        description="Minimum changed-line coverage percentage.",
    )
    threshold_new: float | None = Field(
        default=None,
        description="Threshold for new files. Falls back to threshold when unset.",
    )
    threshold_modified: float | None = Field(
        default=None,
        description="Threshold for modified files. Falls back to threshold when unset.",
    )

    @field_validator("threshold", "threshold_new", "threshold_modified")
    @classmethod
    def validate_percentage(cls, v: float | None) -> float | None:
        if v is not None and not (0.0 <= v <= 100.0):
            raise ValueError(f"Threshold must be 0-100, got {v}")
        return v

    def effective_thresholds(self) -> tuple[float, float]:
        """Return (new, modified) thresholds with fallbacks applied."""
        new = self.threshold if self.threshold_new is None else self.threshold_new
        modified = self.threshold if self.threshold_modified is None else self.threshold_modified
        return new, modified


class PathsConfig(BaseModel):
    """Path reconciliation between diff and coverage sources.

    Env vars:
        DIFFGAUGE__PATHS__ALLOW_BASENAME_MATCH: Enable filename-only fallback
    """

    allow_basename_match: bool = Field(
        default=True,
        description="Match files by basename as a last resort. "
        "RISK: may pick the wrong file when basenames collide across directories.",
    )
    strip_prefixes: list[str] = Field(
        default_factory=list,
        description="Module prefixes removed from Go coverage profile paths "
        "(e.g. 'github.com/org/repo/').",
    )


class DetectionConfig(BaseModel):
    """Coverage format sniffing."""

    sniff_bytes: int = Field(
        default=1024,
        description="Characters of an artifact inspected when detecting its format.",
    )

    @field_validator("sniff_bytes")
    @classmethod
    def validate_sniff_bytes(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"sniff_bytes must be positive, got {v}")
        return v


class DiffGaugeConfig(BaseModel):
    """Root configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    gate: GateConfig = Field(default_factory=GateConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
