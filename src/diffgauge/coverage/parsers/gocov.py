"""Go coverage profile parser.

``go test -coverprofile`` writes:
mode: set|count|atomic
<package>/<file>:<startline>.<startcol>,<endline>.<endcol> <count> <statements>

Example:
mode: set
github.com/user/pkg/main.go:10.2,12.16 1 3
github.com/user/pkg/main.go:15.2,20.16 0 5

When no mode line is present the text is read as ``go tool cover -func``
output instead:
github.com/user/pkg/main.go:42:    ParseThing    87.5%
total:                              (statements)  80.0%

That sub-form only has per-function percentages, so each function's start
line stands in for the whole function and the report is flagged approximate.
"""

from diffgauge.core.errors import CoverageParseError
from diffgauge.core.logging import get_logger
from diffgauge.coverage.models import CoverageFormat, CoverageReport, FunctionCoverage

from .base import DEFAULT_OPTIONS, ParseOptions

log = get_logger("coverage.gocov")


def _strip_prefixes(path: str, prefixes: tuple[str, ...]) -> str:
    path = path.replace("\\", "/")
    for prefix in prefixes:
        if prefix and path.startswith(prefix):
            return path[len(prefix) :]
    return path


def _line_of(position: str) -> int:
    """'10.2' -> 10"""
    return int(position.split(".", 1)[0])


class GocovParser:
    """Parser for Go coverage profiles."""

    @property
    def format(self) -> CoverageFormat:
        return CoverageFormat.GOCOV

    def parse(self, content: str, *, options: ParseOptions = DEFAULT_OPTIONS) -> CoverageReport:
        """Parse a Go profile, falling back to ``-func`` output."""
        lines = [ln.strip() for ln in content.splitlines()]
        if any(ln.startswith("mode:") for ln in lines):
            return self._parse_profile(lines, options)

        report = self._parse_func_listing(lines, options)
        if not report.files and content.strip():
            raise CoverageParseError.unparseable(
                CoverageFormat.GOCOV.value,
                "no mode declaration and no function coverage lines found",
            )
        return report

    def _parse_profile(self, lines: list[str], options: ParseOptions) -> CoverageReport:
        report = CoverageReport(source_format=CoverageFormat.GOCOV.value)
        mode: str | None = None
        skipped = 0

        for line in lines:
            if not line:
                continue
            if line.startswith("mode:"):
                # Concatenated profiles repeat the header
                mode = mode or line[5:].strip()
                continue

            # path:start.col,end.col count [statements]
            parts = line.split()
            if len(parts) < 2:
                skipped += 1
                continue

            path_range, _, range_part = parts[0].rpartition(":")
            start_str, sep, end_str = range_part.partition(",")
            if not path_range or not sep:
                skipped += 1
                continue

            try:
                start_line = _line_of(start_str)
                end_line = _line_of(end_str)
                count = int(parts[1])
            except ValueError:
                skipped += 1
                continue
            if start_line <= 0 or end_line < start_line:
                skipped += 1
                continue

            file_cov = report.file(_strip_prefixes(path_range, options.strip_prefixes))
            # Overlapping blocks keep the max count; each line counts once
            for line_num in range(start_line, end_line + 1):
                file_cov.record(line_num, count)

        log.debug("gocov_parsed", mode=mode, files=len(report.files), skipped=skipped)
        return report

    def _parse_func_listing(self, lines: list[str], options: ParseOptions) -> CoverageReport:
        report = CoverageReport(source_format=CoverageFormat.GOCOV.value, approximate=True)
        skipped = 0

        for line in lines:
            if not line or line.startswith("total:"):
                continue

            # path:line:  FuncName  NN.N%
            parts = line.split()
            if len(parts) < 3 or not parts[-1].endswith("%"):
                skipped += 1
                continue

            location = parts[0].rstrip(":")
            path, _, line_str = location.rpartition(":")
            try:
                line_num = int(line_str)
                percent = float(parts[-1][:-1])
            except ValueError:
                skipped += 1
                continue
            if not path or line_num <= 0:
                skipped += 1
                continue

            name = parts[1]
            hits = 1 if percent > 0 else 0
            file_cov = report.file(_strip_prefixes(path, options.strip_prefixes))
            if hits:
                file_cov.record(line_num, hits)
            file_cov.functions[name] = FunctionCoverage(name=name, start_line=line_num, hits=hits)

        if report.files:
            log.warning(
                "gocov_function_level_fallback",
                files=len(report.files),
                skipped=skipped,
                detail="coverage approximated from function start lines",
            )
        return report
