"""diffgauge: coverage of changed lines, for CI quality gates."""

from diffgauge.analysis import AnalysisResult, analyze, meets_threshold, meets_thresholds
from diffgauge.coverage import CoverageReport, PathResolver, parse_artifact, parse_coverage
from diffgauge.diff import ChangeSet, parse_diff
from diffgauge.health import HealthReport, SuiteReport, SuiteType, analyze_health

__version__ = "0.1.0"

__all__ = [
    "AnalysisResult",
    "ChangeSet",
    "CoverageReport",
    "HealthReport",
    "PathResolver",
    "SuiteReport",
    "SuiteType",
    "analyze",
    "analyze_health",
    "meets_threshold",
    "meets_thresholds",
    "parse_artifact",
    "parse_coverage",
    "parse_diff",
]
