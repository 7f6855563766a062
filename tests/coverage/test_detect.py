"""Tests for format detection and the parse entry points."""

from __future__ import annotations

from pathlib import Path

import pytest

from diffgauge.core.errors import CoverageParseError, ErrorCode
from diffgauge.coverage import CoverageFormat, detect_format, parse_artifact, parse_coverage
from diffgauge.coverage.parsers import PARSER_BY_FORMAT, ParseOptions

COBERTURA = (
    '<?xml version="1.0" ?>\n<coverage><packages><package><classes>'
    '<class filename="a.py"><lines><line number="1" hits="1"/></lines></class>'
    "</classes></package></packages></coverage>\n"
)


class TestDetectFormat:
    """Detection priority."""

    @pytest.mark.parametrize(
        ("content", "expected"),
        [
            ("TN:\nSF:a.py\nDA:1,1\n", CoverageFormat.LCOV),
            ("SF:a.py\nDA:1,1\n", CoverageFormat.LCOV),
            ("# header\nSF:a.py\nDA:1,1\n", CoverageFormat.LCOV),
            (COBERTURA, CoverageFormat.COBERTURA),
            ('<coverage version="1"><packages><package name="p"/>', CoverageFormat.COBERTURA),
            ("mode: set\na.go:1.1,2.2 1 1\n", CoverageFormat.GOCOV),
        ],
    )
    def test_content_markers(self, content: str, expected: CoverageFormat) -> None:
        assert detect_format(content) == expected

    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("cover.out", CoverageFormat.GOCOV),
            ("coverage.xml", CoverageFormat.COBERTURA),
            ("lcov.info", CoverageFormat.LCOV),
            ("report.LCOV", CoverageFormat.LCOV),
        ],
    )
    def test_extension_hint_when_content_is_silent(
        self, filename: str, expected: CoverageFormat
    ) -> None:
        assert detect_format("", filename) == expected

    def test_content_beats_extension(self) -> None:
        assert detect_format("mode: set\n", "coverage.xml") == CoverageFormat.GOCOV

    def test_defaults_to_lcov(self) -> None:
        assert detect_format("???", "unknown.bin") == CoverageFormat.LCOV

    def test_markers_beyond_sniff_window_ignored(self) -> None:
        content = "x" * 50 + "\nSF:a.py\nDA:1,1\n"
        assert detect_format(content, "cover.out", sniff_bytes=10) == CoverageFormat.GOCOV

    def test_every_format_has_a_parser(self) -> None:
        assert set(PARSER_BY_FORMAT) == set(CoverageFormat)
        for fmt, parser in PARSER_BY_FORMAT.items():
            assert parser.format == fmt


class TestParseCoverage:
    """Tests for parse_coverage and parse_artifact."""

    def test_detects_and_parses(self) -> None:
        report = parse_coverage("SF:f\nDA:10,5\nDA:11,0\nend_of_record\n")
        assert report.source_format == "lcov"
        assert report.files["f"].lines_hit == 1

    def test_sniff_window_taken_from_options(self) -> None:
        content = "x" * 50 + "\nSF:a.py\nDA:1,1\nend_of_record\n"

        assert parse_coverage(content, filename="cover.out").source_format == "lcov"
        with pytest.raises(CoverageParseError):
            parse_coverage(content, filename="cover.out", options=ParseOptions(sniff_bytes=10))

    @pytest.mark.parametrize("format_id", ["gocov", "go", "GOCOV", CoverageFormat.GOCOV])
    def test_forced_format_and_aliases(self, format_id: CoverageFormat | str) -> None:
        report = parse_coverage("mode: set\na.go:1.1,1.2 1 1\n", format_id=format_id)
        assert report.source_format == "gocov"

    def test_unknown_format_raises(self) -> None:
        with pytest.raises(CoverageParseError) as exc_info:
            parse_coverage("", format_id="jacoco")
        assert exc_info.value.code == ErrorCode.COVERAGE_UNKNOWN_FORMAT

    def test_parse_artifact_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "coverage.xml"
        path.write_text(COBERTURA)

        report = parse_artifact(path)
        assert report.source_format == "cobertura"
        assert report.files["a.py"].lines == {1: 1}

    def test_parse_artifact_uses_extension_hint(self, tmp_path: Path) -> None:
        path = tmp_path / "cover.out"
        path.write_text("")

        report = parse_artifact(path)
        assert report.source_format == "gocov"
        assert report.files == {}

    def test_missing_artifact_raises(self, tmp_path: Path) -> None:
        with pytest.raises(CoverageParseError) as exc_info:
            parse_artifact(tmp_path / "missing.info")
        assert exc_info.value.code == ErrorCode.COVERAGE_UNREADABLE
