"""Multi-suite coverage health."""

from diffgauge.health.health import DEFAULT_THRESHOLD, aggregate, analyze_health
from diffgauge.health.insights import generate_insights, generate_recommendations
from diffgauge.health.models import (
    FileHealth,
    HealthReport,
    Insight,
    Recommendation,
    SuiteLineCoverage,
    SuiteReport,
    SuiteType,
)
from diffgauge.health.suites import build_suite_reports, detect_suite_type

__all__ = [
    "DEFAULT_THRESHOLD",
    "FileHealth",
    "HealthReport",
    "Insight",
    "Recommendation",
    "SuiteLineCoverage",
    "SuiteReport",
    "SuiteType",
    "aggregate",
    "analyze_health",
    "build_suite_reports",
    "detect_suite_type",
    "generate_insights",
    "generate_recommendations",
]
