"""Changed-line coverage results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def coverage_percentage(covered: int, total: int) -> float:
    """covered/total as a percentage; 0.0 when there is nothing to measure."""
    if total <= 0:
        return 0.0
    return covered / total * 100.0


@dataclass(slots=True)
class FileResult:
    """Coverage of the changed lines in one file.

    ``resolved_path`` is the coverage key the file matched, or None when the
    report had no record for it (every changed line is then uncovered).
    """

    file_path: str
    is_new_file: bool
    covered_line_numbers: list[int] = field(default_factory=list)
    uncovered_line_numbers: list[int] = field(default_factory=list)
    resolved_path: str | None = None
    has_baseline: bool = False
    baseline_coverage_percentage: float = 0.0

    @property
    def covered_lines(self) -> int:
        return len(self.covered_line_numbers)

    @property
    def uncovered_lines(self) -> int:
        return len(self.uncovered_line_numbers)

    @property
    def total_changed_lines(self) -> int:
        return self.covered_lines + self.uncovered_lines

    @property
    def coverage_percentage(self) -> float:
        return coverage_percentage(self.covered_lines, self.total_changed_lines)

    @property
    def coverage_delta(self) -> float:
        """Current minus baseline percentage; 0.0 without a baseline."""
        if not self.has_baseline:
            return 0.0
        return self.coverage_percentage - self.baseline_coverage_percentage

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "file_path": self.file_path,
            "is_new_file": self.is_new_file,
            "resolved_path": self.resolved_path,
            "total_changed_lines": self.total_changed_lines,
            "covered_lines": self.covered_lines,
            "uncovered_lines": self.uncovered_lines,
            "coverage_percentage": self.coverage_percentage,
            "covered_line_numbers": list(self.covered_line_numbers),
            "uncovered_line_numbers": list(self.uncovered_line_numbers),
        }
        if self.has_baseline:
            data["baseline_coverage_percentage"] = self.baseline_coverage_percentage
            data["coverage_delta"] = self.coverage_delta
        return data


@dataclass(slots=True)
class FileTypeMetrics:
    """Changed-line totals for one class of files (new or modified)."""

    total_changed_lines: int = 0
    covered_lines: int = 0
    uncovered_lines: int = 0
    file_count: int = 0

    @property
    def coverage_percentage(self) -> float:
        return coverage_percentage(self.covered_lines, self.total_changed_lines)

    def add(self, result: FileResult) -> None:
        self.total_changed_lines += result.total_changed_lines
        self.covered_lines += result.covered_lines
        self.uncovered_lines += result.uncovered_lines
        self.file_count += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_changed_lines": self.total_changed_lines,
            "covered_lines": self.covered_lines,
            "uncovered_lines": self.uncovered_lines,
            "coverage_percentage": self.coverage_percentage,
            "file_count": self.file_count,
        }


@dataclass(slots=True)
class AnalysisResult:
    """Changed-line coverage for a whole diff.

    Totals are derived from ``file_results`` so they always agree with the
    per-file figures.
    """

    file_results: dict[str, FileResult] = field(default_factory=dict)
    new_files: FileTypeMetrics = field(default_factory=FileTypeMetrics)
    modified_files: FileTypeMetrics = field(default_factory=FileTypeMetrics)
    approximate: bool = False

    @property
    def total_changed_lines(self) -> int:
        return sum(fr.total_changed_lines for fr in self.file_results.values())

    @property
    def covered_lines(self) -> int:
        return sum(fr.covered_lines for fr in self.file_results.values())

    @property
    def uncovered_lines(self) -> int:
        return sum(fr.uncovered_lines for fr in self.file_results.values())

    @property
    def coverage_percentage(self) -> float:
        return coverage_percentage(self.covered_lines, self.total_changed_lines)

    @property
    def has_uncovered_lines(self) -> bool:
        return self.uncovered_lines > 0

    def add(self, result: FileResult) -> None:
        self.file_results[result.file_path] = result
        if result.is_new_file:
            self.new_files.add(result)
        else:
            self.modified_files.add(result)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_changed_lines": self.total_changed_lines,
            "covered_lines": self.covered_lines,
            "uncovered_lines": self.uncovered_lines,
            "coverage_percentage": self.coverage_percentage,
            "approximate": self.approximate,
            "new_files": self.new_files.to_dict(),
            "modified_files": self.modified_files.to_dict(),
            "files": {path: fr.to_dict() for path, fr in sorted(self.file_results.items())},
        }
