"""Suite-type detection and suite report construction."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import PurePosixPath

from diffgauge.core.errors import InvalidInputError
from diffgauge.coverage.models import CoverageReport
from diffgauge.health.models import SuiteReport, SuiteType

# Checked in order against the lowercased source; first hit wins
_NAME_RULES: tuple[tuple[tuple[str, ...], SuiteType], ...] = (
    (("unit", "_test.go"), SuiteType.UNIT),
    (("integration",), SuiteType.INTEGRATION),
    (("api",), SuiteType.API),
    (("e2e", "end-to-end"), SuiteType.E2E),
    (("functional",), SuiteType.FUNCTIONAL),
)

# Coverage formats that unit runners usually emit
_UNIT_EXTENSIONS = frozenset({".out", ".info"})

_TOOL_RULES: tuple[tuple[tuple[str, ...], SuiteType], ...] = (
    (("go test", "pytest", "jest"), SuiteType.UNIT),
    (("cypress", "playwright"), SuiteType.FUNCTIONAL),
    (("postman", "newman"), SuiteType.API),
)


def detect_suite_type(source: str) -> SuiteType:
    """Guess the suite type from an artifact path or test command.

    Keywords in the name win, then the artifact extension, then the name of
    a known test runner. Anything unrecognized is treated as unit tests.
    """
    lowered = source.lower()

    for keywords, suite_type in _NAME_RULES:
        if any(k in lowered for k in keywords):
            return suite_type

    if PurePosixPath(lowered.replace("\\", "/")).suffix in _UNIT_EXTENSIONS:
        return SuiteType.UNIT

    for keywords, suite_type in _TOOL_RULES:
        if any(k in lowered for k in keywords):
            return suite_type

    return SuiteType.UNIT


def build_suite_reports(
    sources: Sequence[str],
    reports: Sequence[CoverageReport],
    types: Sequence[SuiteType | str | None] | None = None,
) -> list[SuiteReport]:
    """Pair coverage reports with their sources and suite types.

    ``types`` may be shorter than ``sources`` or contain None; missing
    entries are detected from the source. Suite names are the sources,
    suffixed ``#2``, ``#3``... when a source repeats.

    Raises:
        InvalidInputError: If sources and reports differ in length, or a
            type is not a known suite type.
    """
    if len(sources) != len(reports):
        raise InvalidInputError.mismatch(
            "sources and reports must have the same length",
            sources=len(sources),
            reports=len(reports),
        )
    types = types or ()

    suites: list[SuiteReport] = []
    seen: dict[str, int] = {}
    for i, (source, report) in enumerate(zip(sources, reports, strict=True)):
        explicit = types[i] if i < len(types) else None
        if explicit:
            try:
                suite_type = SuiteType(explicit)
            except ValueError:
                raise InvalidInputError.mismatch(
                    f"Unknown suite type: {explicit!r}",
                    suite_type=str(explicit),
                    valid=[t.value for t in SuiteType],
                ) from None
        else:
            suite_type = detect_suite_type(source)

        seen[source] = seen.get(source, 0) + 1
        name = source if seen[source] == 1 else f"{source}#{seen[source]}"
        suites.append(SuiteReport(name=name, suite_type=suite_type, report=report, source=source))
    return suites
