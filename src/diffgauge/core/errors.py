"""diffgauge error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Input
- 4xxx: Diff parsing
- 5xxx: Coverage parsing
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Input (3xxx)
    INVALID_INPUT = 3001

    # Diff (4xxx)
    MALFORMED_HUNK_HEADER = 4001

    # Coverage (5xxx)
    COVERAGE_UNPARSEABLE = 5001
    COVERAGE_UNREADABLE = 5002
    COVERAGE_UNKNOWN_FORMAT = 5003


@dataclass(frozen=True, slots=True)
class DiffGaugeError(Exception):
    """Base error with structured context for report consumers."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'INVALID_INPUT')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(DiffGaugeError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class InvalidInputError(DiffGaugeError):
    """A required argument was missing or empty."""

    @classmethod
    def missing(cls, argument: str) -> "InvalidInputError":
        return cls(
            code=ErrorCode.INVALID_INPUT,
            message=f"{argument} is required",
            details={"argument": argument},
        )

    @classmethod
    def mismatch(cls, reason: str, **details: Any) -> "InvalidInputError":
        return cls(
            code=ErrorCode.INVALID_INPUT,
            message=reason,
            details=details,
        )


class MalformedHunkHeaderError(DiffGaugeError):
    """A hunk header carried a non-numeric line field."""

    @classmethod
    def bad_number(cls, header: str, field: str, line_no: int) -> "MalformedHunkHeaderError":
        return cls(
            code=ErrorCode.MALFORMED_HUNK_HEADER,
            message=f"Cannot parse line number {field!r} in hunk header at diff line {line_no}",
            details={"header": header, "field": field, "line": line_no},
        )


class CoverageParseError(DiffGaugeError):
    """A coverage artifact could not be read or recognized."""

    @classmethod
    def unparseable(cls, format_id: str, reason: str, **details: Any) -> "CoverageParseError":
        return cls(
            code=ErrorCode.COVERAGE_UNPARSEABLE,
            message=f"Unparseable {format_id} coverage: {reason}",
            details={"format": format_id, "reason": reason, **details},
        )

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "CoverageParseError":
        return cls(
            code=ErrorCode.COVERAGE_UNREADABLE,
            message=f"Failed to read coverage artifact {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def unknown_format(cls, format_id: str, valid: list[str]) -> "CoverageParseError":
        return cls(
            code=ErrorCode.COVERAGE_UNKNOWN_FORMAT,
            message=f"Unknown coverage format: {format_id!r}. Valid formats: {', '.join(valid)}",
            details={"format": format_id, "valid": valid},
        )
