"""Changed-line coverage analysis."""

from diffgauge.analysis.analyzer import (
    analyze,
    meets_gate,
    meets_threshold,
    meets_thresholds,
)
from diffgauge.analysis.models import (
    AnalysisResult,
    FileResult,
    FileTypeMetrics,
    coverage_percentage,
)

__all__ = [
    "AnalysisResult",
    "FileResult",
    "FileTypeMetrics",
    "analyze",
    "coverage_percentage",
    "meets_gate",
    "meets_threshold",
    "meets_thresholds",
]
