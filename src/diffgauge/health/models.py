"""Multi-suite health report model.

A health report applies changed-line analysis to coverage merged from
several test suites, then keeps enough per-suite detail to say which kind
of test exercised each changed line.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from diffgauge.analysis.models import FileResult, FileTypeMetrics, coverage_percentage
from diffgauge.coverage.models import CoverageReport

InsightType = Literal["info", "warning", "error", "success"]
InsightCategory = Literal["coverage", "regression", "test-gap"]
Severity = Literal["low", "medium", "high", "critical"]
RecommendationCategory = Literal["add-tests", "fix-regression"]


class SuiteType(str, Enum):
    """Kind of test suite a coverage artifact came from."""

    UNIT = "unit"
    API = "api"
    FUNCTIONAL = "functional"
    INTEGRATION = "integration"
    E2E = "e2e"


@dataclass(frozen=True, slots=True)
class SuiteReport:
    """Coverage produced by one named test suite."""

    name: str
    suite_type: SuiteType
    report: CoverageReport
    source: str | None = None  # artifact path or command that produced it


@dataclass(slots=True)
class SuiteLineCoverage:
    """Changed lines of one file that a single suite covered."""

    suite: str
    suite_type: SuiteType
    covered_line_numbers: list[int] = field(default_factory=list)
    changed_lines: int = 0

    @property
    def covered_lines(self) -> int:
        return len(self.covered_line_numbers)

    @property
    def coverage_percentage(self) -> float:
        return coverage_percentage(self.covered_lines, self.changed_lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "suite_type": self.suite_type.value,
            "covered_lines": self.covered_lines,
            "coverage_percentage": self.coverage_percentage,
            "covered_line_numbers": list(self.covered_line_numbers),
        }


@dataclass(slots=True)
class FileHealth:
    """Health of one changed file across all suites."""

    changes: FileResult
    suites: dict[str, SuiteLineCoverage] = field(default_factory=dict)
    total_lines: int = 0  # as reported; the last suite wins when suites disagree
    covered_total: int = 0
    has_regression: bool = False
    needs_attention: bool = False

    @property
    def file_path(self) -> str:
        return self.changes.file_path

    @property
    def is_new_file(self) -> bool:
        return self.changes.is_new_file

    @property
    def coverage_percentage(self) -> float:
        """Whole-file coverage from the merged record."""
        return coverage_percentage(self.covered_total, self.total_lines)

    @property
    def changed_lines(self) -> int:
        return self.changes.total_changed_lines

    @property
    def changed_covered_lines(self) -> int:
        return self.changes.covered_lines

    @property
    def changed_uncovered_lines(self) -> int:
        return self.changes.uncovered_lines

    @property
    def changed_coverage_percentage(self) -> float:
        return self.changes.coverage_percentage

    @property
    def baseline_coverage_percentage(self) -> float:
        return self.changes.baseline_coverage_percentage

    @property
    def coverage_delta(self) -> float:
        return self.changes.coverage_delta

    @property
    def covering_suite_types(self) -> set[SuiteType]:
        """Suite types that covered at least one changed line."""
        return {s.suite_type for s in self.suites.values() if s.covered_lines}

    def to_dict(self) -> dict[str, Any]:
        data = self.changes.to_dict()
        data.update(
            {
                "total_lines": self.total_lines,
                "coverage_percentage_overall": self.coverage_percentage,
                "has_regression": self.has_regression,
                "needs_attention": self.needs_attention,
                "suites": {name: s.to_dict() for name, s in sorted(self.suites.items())},
            }
        )
        return data


@dataclass(frozen=True, slots=True)
class Insight:
    """An observation about testing health."""

    type: InsightType
    category: InsightCategory
    title: str
    description: str
    severity: Severity
    file: str | None = None
    line_numbers: tuple[int, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "category": self.category,
            "title": self.title,
            "description": self.description,
            "severity": self.severity,
        }
        if self.file is not None:
            data["file"] = self.file
        if self.line_numbers:
            data["line_numbers"] = list(self.line_numbers)
        return data


@dataclass(frozen=True, slots=True)
class Recommendation:
    """A suggested action, listing the files it applies to."""

    priority: Severity
    category: RecommendationCategory
    title: str
    description: str
    action: str
    files: tuple[str, ...] = ()
    suite_type: SuiteType = SuiteType.UNIT

    def to_dict(self) -> dict[str, Any]:
        return {
            "priority": self.priority,
            "category": self.category,
            "title": self.title,
            "description": self.description,
            "action": self.action,
            "files": list(self.files),
            "suite_type": self.suite_type.value,
        }


@dataclass(slots=True)
class HealthReport:
    """Changed-line coverage across suites plus derived guidance.

    Project totals come from the merged coverage map. Changed-line totals
    and the file counts are derived from ``file_health``.
    """

    threshold: float
    file_health: dict[str, FileHealth] = field(default_factory=dict)
    total_files: int = 0
    total_lines: int = 0
    total_covered_lines: int = 0
    suite_coverage: dict[str, float] = field(default_factory=dict)  # suite name → overall %
    new_files: FileTypeMetrics = field(default_factory=FileTypeMetrics)
    modified_files: FileTypeMetrics = field(default_factory=FileTypeMetrics)
    insights: list[Insight] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    approximate: bool = False

    @property
    def total_uncovered_lines(self) -> int:
        return self.total_lines - self.total_covered_lines

    @property
    def overall_coverage(self) -> float:
        return coverage_percentage(self.total_covered_lines, self.total_lines)

    @property
    def changed_files(self) -> int:
        return len(self.file_health)

    @property
    def changed_lines(self) -> int:
        return sum(fh.changed_lines for fh in self.file_health.values())

    @property
    def changed_covered_lines(self) -> int:
        return sum(fh.changed_covered_lines for fh in self.file_health.values())

    @property
    def changed_uncovered_lines(self) -> int:
        return sum(fh.changed_uncovered_lines for fh in self.file_health.values())

    @property
    def changed_coverage(self) -> float:
        return coverage_percentage(self.changed_covered_lines, self.changed_lines)

    @property
    def healthy_files(self) -> int:
        return sum(
            1
            for fh in self.file_health.values()
            if fh.changed_coverage_percentage >= self.threshold
        )

    @property
    def at_risk_files(self) -> int:
        return self.changed_files - self.healthy_files

    @property
    def regressing_files(self) -> int:
        return sum(1 for fh in self.file_health.values() if fh.has_regression)

    @property
    def passed(self) -> bool:
        """Gate outcome: no regressions and changed coverage meets the threshold."""
        return self.regressing_files == 0 and self.changed_coverage >= self.threshold

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "threshold": self.threshold,
            "approximate": self.approximate,
            "project": {
                "total_files": self.total_files,
                "total_lines": self.total_lines,
                "covered_lines": self.total_covered_lines,
                "uncovered_lines": self.total_uncovered_lines,
                "coverage_percentage": self.overall_coverage,
            },
            "changes": {
                "files": self.changed_files,
                "lines": self.changed_lines,
                "covered_lines": self.changed_covered_lines,
                "uncovered_lines": self.changed_uncovered_lines,
                "coverage_percentage": self.changed_coverage,
                "new_files": self.new_files.to_dict(),
                "modified_files": self.modified_files.to_dict(),
            },
            "summary": {
                "healthy_files": self.healthy_files,
                "at_risk_files": self.at_risk_files,
                "regressing_files": self.regressing_files,
            },
            "suite_coverage": dict(sorted(self.suite_coverage.items())),
            "files": {path: fh.to_dict() for path, fh in sorted(self.file_health.items())},
            "insights": [i.to_dict() for i in self.insights],
            "recommendations": [r.to_dict() for r in self.recommendations],
        }
