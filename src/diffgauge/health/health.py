"""Health aggregation across multiple test suites.

Suites are merged line by line with max-hit semantics, so a line counts as
covered when any suite covered it. Changed-line analysis then runs against
the merged coverage exactly as it does for a single report, and each
covered changed line is attributed to the suites that hit it.
"""

from __future__ import annotations

from collections.abc import Sequence

from diffgauge.analysis.analyzer import analyze_file
from diffgauge.analysis.models import FileResult, coverage_percentage
from diffgauge.core.errors import InvalidInputError
from diffgauge.core.logging import get_logger
from diffgauge.coverage.merge import merge_reports
from diffgauge.coverage.models import CoverageReport
from diffgauge.coverage.paths import PathResolver
from diffgauge.diff.models import ChangeSet
from diffgauge.health.insights import generate_insights, generate_recommendations
from diffgauge.health.models import FileHealth, HealthReport, SuiteLineCoverage, SuiteReport

log = get_logger("health")

DEFAULT_THRESHOLD = 80.0


def aggregate(
    suite_reports: Sequence[SuiteReport],
    *,
    resolver: PathResolver | None = None,
) -> CoverageReport:
    """Merge suite coverage into one report keyed by normalized path.

    Line hits are the max across suites and do not depend on suite order.
    A file's ``reported_total`` comes from the last suite that mentions it.
    """
    resolver = resolver or PathResolver()
    merged = merge_reports((s.report for s in suite_reports), key=resolver.normalize)
    log.debug("suites_aggregated", suites=len(suite_reports), files=len(merged.files))
    return merged


def _reported_lines(report: CoverageReport) -> int:
    """Instrumented lines as reported; merged files carry the last suite's figure."""
    return sum(fc.total_lines for fc in report.files.values())


def _suite_breakdown(
    result: FileResult,
    suite_reports: Sequence[SuiteReport],
    resolver: PathResolver,
) -> dict[str, SuiteLineCoverage]:
    breakdown: dict[str, SuiteLineCoverage] = {}
    for suite in suite_reports:
        record = resolver.lookup(suite.report, result.file_path)
        covered = [
            line
            for line in result.covered_line_numbers
            if record is not None and record.is_line_covered(line)
        ]
        breakdown[suite.name] = SuiteLineCoverage(
            suite=suite.name,
            suite_type=suite.suite_type,
            covered_line_numbers=covered,
            changed_lines=result.total_changed_lines,
        )
    return breakdown


def analyze_health(
    change_set: ChangeSet | None,
    suite_reports: Sequence[SuiteReport],
    baseline_suite_reports: Sequence[SuiteReport] | None = None,
    threshold: float = DEFAULT_THRESHOLD,
    *,
    resolver: PathResolver | None = None,
) -> HealthReport:
    """Build a health report for a diff from several suites' coverage.

    Args:
        change_set: Parsed diff.
        suite_reports: Current coverage, one entry per suite. Must not be empty.
        baseline_suite_reports: Optional coverage from before the change.
        threshold: Changed-line coverage percentage a file needs to be healthy.
        resolver: Path matcher between diff paths and coverage keys.

    Returns:
        HealthReport with insights and recommendations filled in.

    Raises:
        InvalidInputError: If change_set is None or no suite reports are given.
    """
    if change_set is None:
        raise InvalidInputError.missing("change_set")
    if not suite_reports:
        raise InvalidInputError.missing("suite_reports")
    resolver = resolver or PathResolver()

    current = aggregate(suite_reports, resolver=resolver)
    baseline = (
        aggregate(baseline_suite_reports, resolver=resolver) if baseline_suite_reports else None
    )

    summary = current.summary
    report = HealthReport(
        threshold=threshold,
        total_files=summary.files,
        total_lines=_reported_lines(current),
        total_covered_lines=summary.lines_hit,
        suite_coverage={
            s.name: coverage_percentage(s.report.summary.lines_hit, _reported_lines(s.report))
            for s in suite_reports
        },
        approximate=current.approximate,
    )

    for change in change_set:
        result = analyze_file(change, current, baseline, resolver)
        record = current.files.get(result.resolved_path) if result.resolved_path else None

        has_regression = (
            result.has_baseline
            and result.coverage_delta < 0
            and result.coverage_percentage < threshold
        )
        fh = FileHealth(
            changes=result,
            suites=_suite_breakdown(result, suite_reports, resolver),
            total_lines=record.total_lines if record else 0,
            covered_total=record.lines_hit if record else 0,
            has_regression=has_regression,
            needs_attention=result.coverage_percentage < threshold or has_regression,
        )
        report.file_health[change.path] = fh
        if fh.is_new_file:
            report.new_files.add(result)
        else:
            report.modified_files.add(result)

        if has_regression:
            log.debug(
                "file_regressed",
                path=change.path,
                baseline=result.baseline_coverage_percentage,
                current=result.coverage_percentage,
            )

    report.insights = generate_insights(report)
    report.recommendations = generate_recommendations(report)

    log.debug(
        "health_analyzed",
        files=report.changed_files,
        changed_coverage=round(report.changed_coverage, 2),
        regressing=report.regressing_files,
        passed=report.passed,
    )
    return report
