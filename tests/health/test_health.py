"""Tests for multi-suite health aggregation."""

from __future__ import annotations

import pytest

from diffgauge.core.errors import InvalidInputError
from diffgauge.coverage import CoverageReport, FileCoverage, PathResolver
from diffgauge.diff import ChangeSet, FileChange
from diffgauge.health import SuiteReport, SuiteType, aggregate, analyze_health


def _suite(name: str, suite_type: SuiteType, files: dict[str, dict[int, int]]) -> SuiteReport:
    report = CoverageReport(
        source_format="lcov",
        files={path: FileCoverage(path=path, lines=lines) for path, lines in files.items()},
    )
    return SuiteReport(name=name, suite_type=suite_type, report=report)


def _changes(*files: tuple[str, bool, set[int]]) -> ChangeSet:
    return ChangeSet.from_files(
        [FileChange(path=p, is_new_file=new, changed=frozenset(lines)) for p, new, lines in files]
    )


class TestAggregate:
    """Tests for aggregate."""

    def test_max_hits_across_suites(self, resolver: PathResolver) -> None:
        unit = _suite("unit", SuiteType.UNIT, {"a.py": {1: 1, 2: 0, 3: 0}})
        api = _suite("api", SuiteType.API, {"a.py": {2: 4}})

        merged = aggregate([unit, api], resolver=resolver)
        assert merged.files["a.py"].lines == {1: 1, 2: 4, 3: 0}

    def test_order_independent(self, resolver: PathResolver) -> None:
        one = _suite("one", SuiteType.UNIT, {"a.py": {1: 0, 2: 3}, "b.py": {5: 1}})
        two = _suite("two", SuiteType.E2E, {"a.py": {1: 2}})

        forward = aggregate([one, two], resolver=resolver)
        backward = aggregate([two, one], resolver=resolver)
        assert {p: fc.lines for p, fc in forward.files.items()} == {
            p: fc.lines for p, fc in backward.files.items()
        }

    def test_spellings_merge_under_normalized_key(self, resolver: PathResolver) -> None:
        unit = _suite("unit", SuiteType.UNIT, {"./src/a.py": {1: 1}})
        api = _suite("api", SuiteType.API, {"src\\a.py": {2: 1}})

        merged = aggregate([unit, api], resolver=resolver)
        assert list(merged.files) == ["src/a.py"]
        assert merged.files["src/a.py"].lines == {1: 1, 2: 1}

    def test_total_from_last_suite(self, resolver: PathResolver) -> None:
        first = _suite("first", SuiteType.UNIT, {"a.py": {1: 1, 2: 1, 3: 1}})
        last = _suite("last", SuiteType.API, {"a.py": {1: 1}})

        merged = aggregate([first, last], resolver=resolver)
        assert merged.files["a.py"].total_lines == 1
        assert merged.files["a.py"].lines_found == 3

    def test_suite_reports_not_mutated(self, resolver: PathResolver) -> None:
        unit = _suite("unit", SuiteType.UNIT, {"a.py": {1: 0}})
        api = _suite("api", SuiteType.API, {"a.py": {1: 5}})

        aggregate([unit, api], resolver=resolver)
        assert unit.report.files["a.py"].lines == {1: 0}


class TestAnalyzeHealth:
    """Tests for analyze_health."""

    def test_missing_inputs_raise(self) -> None:
        unit = _suite("unit", SuiteType.UNIT, {})
        with pytest.raises(InvalidInputError, match="change_set"):
            analyze_health(None, [unit])
        with pytest.raises(InvalidInputError, match="suite_reports"):
            analyze_health(_changes(), [])

    def test_changed_lines_use_merged_coverage(self, resolver: PathResolver) -> None:
        unit = _suite("unit", SuiteType.UNIT, {"a.py": {1: 1, 2: 0, 3: 0}})
        api = _suite("api", SuiteType.API, {"./a.py": {2: 1}})

        report = analyze_health(
            _changes(("a.py", False, {1, 2, 3})), [unit, api], resolver=resolver
        )

        fh = report.file_health["a.py"]
        assert fh.changed_covered_lines == 2
        assert fh.changes.uncovered_line_numbers == [3]
        assert report.changed_lines == 3
        assert report.changed_covered_lines == 2

    def test_per_suite_breakdown(self, resolver: PathResolver) -> None:
        unit = _suite("unit", SuiteType.UNIT, {"a.py": {1: 1, 2: 0, 3: 0}})
        api = _suite("api", SuiteType.API, {"./a.py": {2: 1}})

        report = analyze_health(
            _changes(("a.py", False, {1, 2, 3})), [unit, api], resolver=resolver
        )

        suites = report.file_health["a.py"].suites
        assert suites["unit"].covered_line_numbers == [1]
        assert suites["api"].covered_line_numbers == [2]
        assert suites["api"].suite_type == SuiteType.API
        assert suites["unit"].coverage_percentage == pytest.approx(100 / 3)
        assert report.file_health["a.py"].covering_suite_types == {SuiteType.UNIT, SuiteType.API}

    def test_project_and_suite_totals(self, resolver: PathResolver) -> None:
        unit = _suite("unit", SuiteType.UNIT, {"a.py": {1: 1, 2: 0, 3: 0}})
        api = _suite("api", SuiteType.API, {"a.py": {1: 0, 2: 1, 3: 0}})

        report = analyze_health(_changes(("a.py", False, {1})), [unit, api], resolver=resolver)

        assert report.total_files == 1
        assert report.total_lines == 3
        assert report.total_covered_lines == 2
        assert report.total_uncovered_lines == 1
        assert report.suite_coverage["unit"] == pytest.approx(100 / 3)
        assert report.suite_coverage["api"] == pytest.approx(100 / 3)
        assert report.file_health["a.py"].total_lines == 3

    def test_disagreeing_totals_keep_last_suite_figure(self, resolver: PathResolver) -> None:
        """Totals use the last suite's instrumented-line count, not a recount."""
        first = _suite("first", SuiteType.UNIT, {"f.py": {1: 1, 2: 1, 3: 1}})
        last = _suite("last", SuiteType.API, {"f.py": {1: 1}})

        report = analyze_health(_changes(("f.py", False, {1})), [first, last], resolver=resolver)

        assert report.total_lines == 1
        assert report.file_health["f.py"].total_lines == 1
        assert report.total_covered_lines == 3

    def test_regression_detected(self, resolver: PathResolver) -> None:
        current = _suite("unit", SuiteType.UNIT, {"a.py": {1: 1, 2: 0}})
        baseline = _suite("unit", SuiteType.UNIT, {"a.py": {1: 1, 2: 1}})

        report = analyze_health(
            _changes(("a.py", False, {1, 2})), [current], [baseline], resolver=resolver
        )

        fh = report.file_health["a.py"]
        assert fh.has_regression
        assert fh.needs_attention
        assert fh.coverage_delta == -50.0
        assert report.regressing_files == 1
        assert not report.passed

    def test_unchanged_coverage_is_not_regression(self, resolver: PathResolver) -> None:
        suite = _suite("unit", SuiteType.UNIT, {"a.py": {1: 1, 2: 0}})

        report = analyze_health(
            _changes(("a.py", False, {1, 2})), [suite], [suite], resolver=resolver
        )

        fh = report.file_health["a.py"]
        assert fh.changed_coverage_percentage == 50.0
        assert fh.baseline_coverage_percentage == 50.0
        assert not fh.has_regression
        assert fh.needs_attention

    def test_drop_above_threshold_is_not_regression(self, resolver: PathResolver) -> None:
        hits = {n: (0 if n == 10 else 1) for n in range(1, 11)}
        current = _suite("unit", SuiteType.UNIT, {"a.py": hits})
        baseline = _suite("unit", SuiteType.UNIT, {"a.py": {n: 1 for n in range(1, 11)}})

        report = analyze_health(
            _changes(("a.py", False, set(range(1, 11)))),
            [current],
            [baseline],
            threshold=80.0,
            resolver=resolver,
        )

        fh = report.file_health["a.py"]
        assert fh.coverage_delta < 0
        assert not fh.has_regression
        assert not fh.needs_attention
        assert report.passed

    def test_new_files_skip_baseline(self, resolver: PathResolver) -> None:
        current = _suite("unit", SuiteType.UNIT, {"n.py": {1: 0}})
        baseline = _suite("unit", SuiteType.UNIT, {"n.py": {1: 1}})

        report = analyze_health(
            _changes(("n.py", True, {1})), [current], [baseline], resolver=resolver
        )

        assert not report.file_health["n.py"].has_regression
        assert not report.file_health["n.py"].changes.has_baseline

    def test_file_counts_and_breakdown(self, resolver: PathResolver) -> None:
        suite = _suite(
            "unit", SuiteType.UNIT, {"good.py": {1: 1}, "bad.py": {1: 0}, "new.py": {1: 1}}
        )
        changes = _changes(("good.py", False, {1}), ("bad.py", False, {1}), ("new.py", True, {1}))

        report = analyze_health(changes, [suite], resolver=resolver)

        assert report.changed_files == 3
        assert report.healthy_files == 2
        assert report.at_risk_files == 1
        assert report.new_files.file_count == 1
        assert report.new_files.coverage_percentage == 100.0
        assert report.modified_files.coverage_percentage == 50.0

    def test_passed_at_threshold(self, resolver: PathResolver) -> None:
        suite = _suite("unit", SuiteType.UNIT, {"a.py": {1: 1, 2: 1, 3: 1, 4: 1, 5: 0}})

        report = analyze_health(
            _changes(("a.py", False, {1, 2, 3, 4, 5})), [suite], threshold=80.0, resolver=resolver
        )

        assert report.changed_coverage == 80.0
        assert report.passed

    def test_to_dict(self, resolver: PathResolver) -> None:
        suite = _suite("unit", SuiteType.UNIT, {"a.py": {1: 1}})

        data = analyze_health(_changes(("a.py", True, {1})), [suite], resolver=resolver).to_dict()

        assert data["passed"] is True
        assert data["changes"]["coverage_percentage"] == 100.0
        assert data["files"]["a.py"]["suites"]["unit"]["covered_line_numbers"] == [1]
        assert data["insights"][0]["type"] == "success"
        assert data["recommendations"] == []
