"""Insight and recommendation rules for health reports.

Rules are deterministic: files are visited in sorted order, so the same
inputs always yield the same lists in the same order.
"""

from __future__ import annotations

from diffgauge.health.models import (
    FileHealth,
    HealthReport,
    Insight,
    Recommendation,
    SuiteType,
)


def _gap_insight(fh: FileHealth) -> Insight | None:
    if fh.changed_uncovered_lines == 0:
        return None

    uncovered = tuple(fh.changes.uncovered_line_numbers)
    covering = fh.covering_suite_types
    if not covering:
        return Insight(
            type="warning",
            category="test-gap",
            title="No test coverage for changed lines",
            description=f"{fh.file_path} has {fh.changed_uncovered_lines} uncovered changed lines",
            severity="high",
            file=fh.file_path,
            line_numbers=uncovered,
        )
    if len(covering) == 1:
        (only,) = covering
        return Insight(
            type="info",
            category="test-gap",
            title=f"Only {only.value} tests cover changes",
            description=(
                f"{fh.file_path} is covered by {only.value} tests alone and has "
                f"{fh.changed_uncovered_lines} uncovered changed lines"
            ),
            severity="medium",
            file=fh.file_path,
            line_numbers=uncovered,
        )
    return None


def generate_insights(report: HealthReport) -> list[Insight]:
    """Derive insights from a populated report."""
    insights: list[Insight] = []
    threshold = report.threshold

    if report.changed_coverage >= threshold:
        insights.append(
            Insight(
                type="success",
                category="coverage",
                title="Coverage threshold met",
                description=(
                    f"Overall change coverage is {report.changed_coverage:.1f}%, "
                    f"meeting the {threshold:.1f}% threshold"
                ),
                severity="low",
            )
        )
    else:
        insights.append(
            Insight(
                type="warning",
                category="coverage",
                title="Coverage below threshold",
                description=(
                    f"Overall change coverage is {report.changed_coverage:.1f}%, "
                    f"below the {threshold:.1f}% threshold"
                ),
                severity="high",
            )
        )

    ordered = [report.file_health[path] for path in sorted(report.file_health)]

    for fh in ordered:
        if fh.has_regression:
            insights.append(
                Insight(
                    type="error",
                    category="regression",
                    title="Coverage regression",
                    description=(
                        f"{fh.file_path} changed-line coverage fell from "
                        f"{fh.baseline_coverage_percentage:.1f}% to "
                        f"{fh.changed_coverage_percentage:.1f}%"
                    ),
                    severity="critical",
                    file=fh.file_path,
                )
            )

    for fh in ordered:
        gap = _gap_insight(fh)
        if gap is not None:
            insights.append(gap)

    return insights


def generate_recommendations(report: HealthReport) -> list[Recommendation]:
    """Derive recommendations; a regressing file is listed only under fix-regression."""
    regressing: list[str] = []
    needs_tests: list[str] = []
    for path in sorted(report.file_health):
        fh = report.file_health[path]
        if not fh.needs_attention:
            continue
        if fh.has_regression:
            regressing.append(path)
        elif fh.changed_coverage_percentage < report.threshold:
            needs_tests.append(path)

    recommendations: list[Recommendation] = []
    if regressing:
        recommendations.append(
            Recommendation(
                priority="critical",
                category="fix-regression",
                title="Fix coverage regression",
                description=f"{len(regressing)} file(s) have coverage below baseline",
                action="Restore test coverage to baseline levels",
                files=tuple(regressing),
                suite_type=SuiteType.UNIT,
            )
        )
    if needs_tests:
        recommendations.append(
            Recommendation(
                priority="high",
                category="add-tests",
                title="Add tests for uncovered changes",
                description=f"{len(needs_tests)} file(s) have changes below coverage threshold",
                action="Add unit tests for uncovered changed lines",
                files=tuple(needs_tests),
                suite_type=SuiteType.UNIT,
            )
        )
    return recommendations
