"""Core module exports."""

from diffgauge.core.errors import (
    ConfigError,
    CoverageParseError,
    DiffGaugeError,
    ErrorCode,
    InvalidInputError,
    MalformedHunkHeaderError,
)
from diffgauge.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "CoverageParseError",
    "DiffGaugeError",
    "ErrorCode",
    "InvalidInputError",
    "MalformedHunkHeaderError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
