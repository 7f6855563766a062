"""Coverage parser registry and format detection.

This module provides:
- PARSER_BY_FORMAT: one parser per CoverageFormat
- detect_format: sniff an artifact's leading text
- parse_coverage: detect + parse artifact text
- parse_artifact: read a file and parse it
"""

from pathlib import Path

from diffgauge.core.errors import CoverageParseError
from diffgauge.core.logging import get_logger
from diffgauge.coverage.models import CoverageFormat, CoverageReport

from .base import DEFAULT_OPTIONS, DEFAULT_SNIFF_BYTES, CoverageParser, ParseOptions
from .cobertura import CoberturaParser
from .gocov import GocovParser
from .lcov import LcovParser

log = get_logger("coverage.parsers")

PARSER_BY_FORMAT: dict[CoverageFormat, CoverageParser] = {
    CoverageFormat.LCOV: LcovParser(),
    CoverageFormat.COBERTURA: CoberturaParser(),
    CoverageFormat.GOCOV: GocovParser(),
}

_EXTENSION_HINTS: dict[str, CoverageFormat] = {
    ".out": CoverageFormat.GOCOV,
    ".xml": CoverageFormat.COBERTURA,
    ".info": CoverageFormat.LCOV,
    ".lcov": CoverageFormat.LCOV,
}

# Names other tools use for the same dialects
_FORMAT_ALIASES = {"go": "gocov", "info": "lcov", "xml": "cobertura"}

__all__ = [
    "DEFAULT_OPTIONS",
    "DEFAULT_SNIFF_BYTES",
    "PARSER_BY_FORMAT",
    "CoberturaParser",
    "CoverageParser",
    "GocovParser",
    "LcovParser",
    "ParseOptions",
    "detect_format",
    "parse_artifact",
    "parse_coverage",
]


def detect_format(
    content: str,
    filename: str | None = None,
    *,
    sniff_bytes: int = DEFAULT_SNIFF_BYTES,
) -> CoverageFormat:
    """Pick the dialect for an artifact from its leading text.

    Detection order (first match wins):
    1. LCOV: starts with TN:/SF:, or has both SF: and DA: markers
    2. Cobertura: XML declaration or <coverage root, plus <package/<class
    3. Go profile: starts with a mode: declaration
    4. File extension hint (.out, .xml, .info, .lcov)
    5. LCOV

    LCOV is checked before the Go profile because both are short
    colon-prefixed text formats.
    """
    head = content[:sniff_bytes]
    trimmed = head.strip()

    if trimmed.startswith(("TN:", "SF:")) or ("SF:" in head and "DA:" in head):
        return CoverageFormat.LCOV

    if (trimmed.startswith("<?xml") or "<coverage" in head) and (
        "<package" in head or "<class" in head
    ):
        return CoverageFormat.COBERTURA

    if trimmed.startswith("mode:"):
        return CoverageFormat.GOCOV

    if filename:
        hinted = _EXTENSION_HINTS.get(Path(filename).suffix.lower())
        if hinted is not None:
            return hinted

    return CoverageFormat.LCOV


def _coerce_format(format_id: CoverageFormat | str) -> CoverageFormat:
    if isinstance(format_id, CoverageFormat):
        return format_id
    try:
        return CoverageFormat(_FORMAT_ALIASES.get(format_id.lower(), format_id.lower()))
    except ValueError:
        raise CoverageParseError.unknown_format(
            format_id, sorted(f.value for f in CoverageFormat)
        ) from None


def parse_coverage(
    content: str,
    *,
    format_id: CoverageFormat | str | None = None,
    filename: str | None = None,
    options: ParseOptions = DEFAULT_OPTIONS,
    sniff_bytes: int | None = None,
) -> CoverageReport:
    """Parse coverage artifact text into a unified CoverageReport.

    Args:
        content: Artifact text.
        format_id: Force a dialect (skip detection).
        filename: Name used only as a detection hint.
        options: Path environment for key construction.
        sniff_bytes: How much leading text detection inspects. Defaults to
            ``options.sniff_bytes``.

    Raises:
        CoverageParseError: If the format is unknown or the content is not
            recognizable as the selected dialect.
    """
    if format_id:
        fmt = _coerce_format(format_id)
    else:
        if sniff_bytes is None:
            sniff_bytes = options.sniff_bytes
        fmt = detect_format(content, filename, sniff_bytes=sniff_bytes)
    log.debug(
        "coverage_format_selected", format=fmt.value, forced=bool(format_id), filename=filename
    )
    return PARSER_BY_FORMAT[fmt].parse(content, options=options)


def parse_artifact(
    path: Path,
    *,
    format_id: CoverageFormat | str | None = None,
    options: ParseOptions = DEFAULT_OPTIONS,
    sniff_bytes: int | None = None,
) -> CoverageReport:
    """Read a coverage file and parse it.

    Raises:
        CoverageParseError: If the file cannot be read or parsed.
    """
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise CoverageParseError.unreadable(str(path), str(e)) from e
    return parse_coverage(
        content,
        format_id=format_id,
        filename=path.name,
        options=options,
        sniff_bytes=sniff_bytes,
    )
