"""Unified coverage data model.

File-centric model: every dialect converts to ``path -> line -> hit count``.
A line missing from a file's map was not instrumented; lookups treat it as
uncovered rather than failing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class CoverageFormat(str, Enum):
    """Closed set of coverage dialects understood by the parsers."""

    LCOV = "lcov"  # SF:/DA:/end_of_record line records
    COBERTURA = "cobertura"  # <coverage><packages><package><classes><class>
    GOCOV = "gocov"  # Go profile: mode: + path:start.col,end.col stmts count


MERGED = "merged"
"""Source format tag for reports produced by aggregating several suites."""


@dataclass(frozen=True, slots=True)
class FunctionCoverage:
    """Function/method coverage."""

    name: str
    start_line: int
    hits: int


@dataclass(slots=True)
class FileCoverage:
    """Coverage data for a single file.

    Lines are stored as a dict mapping line number → hit count.
    Line numbers are 1-based to match source file conventions.
    """

    path: str
    lines: dict[int, int] = field(default_factory=dict)  # line_number → hit_count
    functions: dict[str, FunctionCoverage] = field(default_factory=dict)  # name → coverage
    # Instrumented-line figure carried over from one suite during aggregation
    reported_total: int | None = None

    def record(self, line: int, hits: int) -> None:
        """Record hits for a line, keeping the max when seen twice."""
        hits = max(hits, 0)
        self.lines[line] = max(self.lines.get(line, 0), hits)

    def hits(self, line: int) -> int:
        """Hit count for a line; 0 when the line was not instrumented."""
        return self.lines.get(line, 0)

    def is_line_covered(self, line: int) -> bool:
        return self.lines.get(line, 0) > 0

    @property
    def lines_found(self) -> int:
        """Total number of instrumented lines."""
        return len(self.lines)

    @property
    def lines_hit(self) -> int:
        """Number of lines with at least one hit."""
        return sum(1 for hits in self.lines.values() if hits > 0)

    @property
    def total_lines(self) -> int:
        """Instrumented-line count as reported (aggregated records may differ)."""
        return self.lines_found if self.reported_total is None else self.reported_total

    @property
    def line_rate(self) -> float:
        """Fraction of lines covered (0.0 to 1.0)."""
        if not self.lines:
            return 0.0
        return self.lines_hit / len(self.lines)

    @property
    def covered_lines(self) -> list[int]:
        """Sorted list of line numbers with at least one hit."""
        return sorted(line for line, hits in self.lines.items() if hits > 0)

    @property
    def uncovered_lines(self) -> list[int]:
        """Sorted list of line numbers with zero hits."""
        return sorted(line for line, hits in self.lines.items() if hits == 0)

    @property
    def functions_found(self) -> int:
        return len(self.functions)

    @property
    def functions_hit(self) -> int:
        return sum(1 for f in self.functions.values() if f.hits > 0)


@dataclass(frozen=True, slots=True)
class CoverageSummary:
    """Aggregate coverage statistics.

    Computed from a CoverageReport; an immutable snapshot.
    """

    files: int
    lines_found: int
    lines_hit: int
    functions_found: int
    functions_hit: int
    line_rate: float
    function_rate: float


@dataclass(slots=True)
class CoverageReport:
    """Complete coverage report from one artifact or several merged suites.

    Files are keyed by the path spelling the source used. ``approximate`` is
    set when the data was reconstructed at function rather than line
    granularity.
    """

    source_format: str  # CoverageFormat value or "merged"
    files: dict[str, FileCoverage] = field(default_factory=dict)  # path → coverage
    approximate: bool = False

    def get(self, path: str) -> FileCoverage | None:
        """Exact-key lookup. Use PathResolver for spelling-tolerant lookups."""
        return self.files.get(path)

    def file(self, path: str) -> FileCoverage:
        """Get or create the record for ``path``."""
        fc = self.files.get(path)
        if fc is None:
            fc = FileCoverage(path=path)
            self.files[path] = fc
        return fc

    def hits(self, path: str, line: int) -> int:
        fc = self.files.get(path)
        return fc.hits(line) if fc else 0

    def is_line_covered(self, path: str, line: int) -> bool:
        return self.hits(path, line) > 0

    @property
    def summary(self) -> CoverageSummary:
        """Compute aggregate summary across all files."""
        lines_found = sum(f.lines_found for f in self.files.values())
        lines_hit = sum(f.lines_hit for f in self.files.values())
        functions_found = sum(f.functions_found for f in self.files.values())
        functions_hit = sum(f.functions_hit for f in self.files.values())

        return CoverageSummary(
            files=len(self.files),
            lines_found=lines_found,
            lines_hit=lines_hit,
            functions_found=functions_found,
            functions_hit=functions_hit,
            line_rate=lines_hit / lines_found if lines_found > 0 else 0.0,
            function_rate=functions_hit / functions_found if functions_found > 0 else 0.0,
        )
