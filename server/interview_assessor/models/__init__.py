from .analysis import (
    COMPETENCY_DISPLAY_NAMES,
    COMPETENCY_KEYS,
    AnalysisMetadata,
    AnalysisReport,
    AnalyzeRequest,
    AnalyzeResponse,
    CompetencyScore,
    CompetencySet,
    InsightReport,
    Recommendation,
    display_name,
)

__all__ = [
    "COMPETENCY_DISPLAY_NAMES",
    "COMPETENCY_KEYS",
    "AnalysisMetadata",
    "AnalysisReport",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "CompetencyScore",
    "CompetencySet",
    "InsightReport",
    "Recommendation",
    "display_name",
]
