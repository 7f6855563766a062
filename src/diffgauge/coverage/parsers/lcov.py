"""LCOV format parser.

LCOV format is a plain text format with records like:
- TN:<test name>
- SF:<source file path>
- FN:<line>,<name>
- FNDA:<hit count>,<name>
- DA:<line>,<hit count>[,<checksum>]
- LF:<lines found>
- LH:<lines hit>
- end_of_record

Used by: pytest-cov, c8/nyc, cargo-llvm-cov, gcov/lcov, dart test
"""

import re

from diffgauge.core.errors import CoverageParseError
from diffgauge.core.logging import get_logger
from diffgauge.coverage.models import (
    CoverageFormat,
    CoverageReport,
    FileCoverage,
    FunctionCoverage,
)

from .base import DEFAULT_OPTIONS, ParseOptions

log = get_logger("coverage.lcov")

_DIRECTIVE_RE = re.compile(r"^[A-Z]{2,5}:")


class LcovParser:
    """Parser for LCOV format coverage files."""

    @property
    def format(self) -> CoverageFormat:
        return CoverageFormat.LCOV

    def parse(
        self,
        content: str,
        *,
        options: ParseOptions = DEFAULT_OPTIONS,  # noqa: ARG002
    ) -> CoverageReport:
        """Parse LCOV text into CoverageReport.

        Keys are kept exactly as written after ``SF:``; path spelling is
        reconciled at lookup time.
        """
        report = CoverageReport(source_format=CoverageFormat.LCOV.value)
        current: FileCoverage | None = None
        # Track function start lines for FNDA matching
        fn_lines: dict[str, int] = {}
        recognized = False
        skipped = 0

        for raw in content.splitlines():
            line = raw.strip()
            if not line:
                continue

            if line.startswith("SF:"):
                recognized = True
                current = report.file(line[3:].strip())
                fn_lines = {}
                continue

            if line == "end_of_record":
                recognized = True
                current = None
                fn_lines = {}
                continue

            if _DIRECTIVE_RE.match(line):
                recognized = True
            if current is None:
                continue

            if line.startswith("DA:"):
                # DA:line,hits[,checksum]
                parts = line[3:].split(",")
                if len(parts) < 2:
                    skipped += 1
                    continue
                try:
                    line_num = int(parts[0])
                    # Some tools write '-' for lines that never ran
                    hits = 0 if parts[1] == "-" else int(parts[1])
                except ValueError:
                    skipped += 1
                    continue
                if line_num <= 0:
                    skipped += 1
                    continue
                current.record(line_num, hits)

            elif line.startswith("FN:"):
                # FN:line,name (lcov 2.x: FN:start,end,name)
                parts = line[3:].split(",")
                if len(parts) < 2:
                    skipped += 1
                    continue
                try:
                    fn_lines[parts[-1]] = int(parts[0])
                except ValueError:
                    skipped += 1

            elif line.startswith("FNDA:"):
                # FNDA:hits,name
                parts = line[5:].split(",", 1)
                if len(parts) < 2:
                    skipped += 1
                    continue
                try:
                    hits = int(parts[0])
                except ValueError:
                    skipped += 1
                    continue
                name = parts[1]
                current.functions[name] = FunctionCoverage(
                    name=name,
                    start_line=fn_lines.get(name, 0),
                    hits=max(hits, 0),
                )

        if not recognized and content.strip():
            raise CoverageParseError.unparseable(
                CoverageFormat.LCOV.value, "no SF:/end_of_record records or LCOV directives found"
            )

        log.debug("lcov_parsed", files=len(report.files), skipped=skipped)
        return report
