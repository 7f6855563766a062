"""Change analyzer: coverage restricted to the lines a diff touched.

A changed line counts as covered only when the coverage record for its file
reports at least one hit. Lines the coverage tool never instrumented, and
files the report does not mention, count as uncovered.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from diffgauge.analysis.models import AnalysisResult, FileResult, coverage_percentage
from diffgauge.core.errors import InvalidInputError
from diffgauge.core.logging import get_logger
from diffgauge.coverage.models import CoverageReport, FileCoverage
from diffgauge.coverage.paths import PathResolver
from diffgauge.diff.models import ChangeSet, FileChange

if TYPE_CHECKING:
    from diffgauge.config.models import GateConfig

log = get_logger("analysis.analyzer")


def split_lines(
    lines: Iterable[int], record: FileCoverage | None
) -> tuple[list[int], list[int]]:
    """Partition ``lines`` into sorted (covered, uncovered) lists."""
    covered: list[int] = []
    uncovered: list[int] = []
    for line in sorted(lines):
        if record is not None and record.is_line_covered(line):
            covered.append(line)
        else:
            uncovered.append(line)
    return covered, uncovered


def analyze_file(
    change: FileChange,
    current: CoverageReport,
    baseline: CoverageReport | None,
    resolver: PathResolver,
) -> FileResult:
    """Measure one file's changed lines against current and baseline coverage."""
    key = resolver.resolve(change.path, current.files.keys())
    record = current.files[key] if key is not None else None
    covered, uncovered = split_lines(change.changed, record)

    result = FileResult(
        file_path=change.path,
        is_new_file=change.is_new_file,
        covered_line_numbers=covered,
        uncovered_line_numbers=uncovered,
        resolved_path=key,
    )

    # New files have no history to compare against
    if baseline is not None and not change.is_new_file:
        base_record = resolver.lookup(baseline, change.path)
        if base_record is not None:
            base_covered, _ = split_lines(change.changed, base_record)
            result.has_baseline = True
            result.baseline_coverage_percentage = coverage_percentage(
                len(base_covered), len(change.changed)
            )

    log.debug(
        "file_analyzed",
        path=change.path,
        resolved=key,
        changed=result.total_changed_lines,
        covered=result.covered_lines,
        has_baseline=result.has_baseline,
    )
    return result


def analyze(
    change_set: ChangeSet | None,
    current: CoverageReport | None,
    baseline: CoverageReport | None = None,
    *,
    resolver: PathResolver | None = None,
) -> AnalysisResult:
    """Compute changed-line coverage for a diff.

    Args:
        change_set: Parsed diff.
        current: Coverage for the post-change tree.
        baseline: Optional coverage from before the change. Only modified
            files are compared, over the same changed-line set.
        resolver: Path matcher between diff paths and coverage keys.

    Returns:
        AnalysisResult with per-file and new/modified breakdowns.

    Raises:
        InvalidInputError: If change_set or current is None.
    """
    if change_set is None:
        raise InvalidInputError.missing("change_set")
    if current is None:
        raise InvalidInputError.missing("current")
    resolver = resolver or PathResolver()

    result = AnalysisResult(approximate=current.approximate)
    for change in change_set:
        result.add(analyze_file(change, current, baseline, resolver))

    log.debug(
        "analysis_complete",
        files=len(result.file_results),
        changed=result.total_changed_lines,
        covered=result.covered_lines,
        percentage=round(result.coverage_percentage, 2),
    )
    return result


def meets_threshold(result: AnalysisResult, threshold: float) -> bool:
    """True when changed-line coverage is at least ``threshold`` percent."""
    return result.coverage_percentage >= threshold


def meets_thresholds(
    result: AnalysisResult, threshold_new: float, threshold_modified: float
) -> bool:
    """Check new-file and modified-file coverage against separate thresholds.

    A subset with no changed lines has nothing to fail and passes.
    """
    for metrics, threshold in (
        (result.new_files, threshold_new),
        (result.modified_files, threshold_modified),
    ):
        if metrics.total_changed_lines and metrics.coverage_percentage < threshold:
            return False
    return True


def meets_gate(result: AnalysisResult, gate: GateConfig) -> bool:
    """Apply configured gate thresholds, with per-subset overrides inheriting the base."""
    threshold_new, threshold_modified = gate.effective_thresholds()
    return meets_thresholds(result, threshold_new, threshold_modified)
