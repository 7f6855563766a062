"""Coverage parsing, path reconciliation, and merging.

This package provides:
- Three coverage dialects (LCOV, Cobertura XML, Go profiles) parsed into
  one file → line → hits model
- Content sniffing to pick the dialect
- Path reconciliation between diff paths and coverage keys
- Max-hit merge across reports

Usage:
    from diffgauge.coverage import parse_coverage, PathResolver

    report = parse_coverage(Path("coverage/lcov.info").read_text())
    record = PathResolver().lookup(report, "src/app/main.py")
"""

from diffgauge.coverage.merge import merge, merge_file_coverage, merge_reports
from diffgauge.coverage.models import (
    MERGED,
    CoverageFormat,
    CoverageReport,
    CoverageSummary,
    FileCoverage,
    FunctionCoverage,
)
from diffgauge.coverage.parsers import (
    PARSER_BY_FORMAT,
    CoverageParser,
    ParseOptions,
    detect_format,
    parse_artifact,
    parse_coverage,
)
from diffgauge.coverage.paths import (
    DEFAULT_REPO_ROOT,
    PathResolver,
    RepoRoot,
    discover_repo_root,
    normalize_path,
)

__all__ = [
    # Models
    "MERGED",
    "CoverageFormat",
    "CoverageReport",
    "CoverageSummary",
    "FileCoverage",
    "FunctionCoverage",
    # Parsers
    "CoverageParser",
    "PARSER_BY_FORMAT",
    "ParseOptions",
    "detect_format",
    "parse_artifact",
    "parse_coverage",
    # Paths
    "DEFAULT_REPO_ROOT",
    "PathResolver",
    "RepoRoot",
    "discover_repo_root",
    "normalize_path",
    # Merge
    "merge",
    "merge_file_coverage",
    "merge_reports",
]
