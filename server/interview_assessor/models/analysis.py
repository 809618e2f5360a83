from datetime import datetime
from typing import Any, Iterator, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


RecommendationStatus = Literal["HIGHLY_RECOMMENDED", "RECOMMENDED", "CONDITIONAL", "NOT_RECOMMENDED"]
Priority = Literal["HIGH", "MEDIUM", "LOW", "NONE"]
ProficiencyLevel = Literal["Beginner", "Developing", "Proficient", "Advanced"]

# Canonical competency order; keys are the serialized (camelCase) names.
COMPETENCY_DISPLAY_NAMES: dict[str, str] = {
    "publicSpeaking": "Public Speaking",
    "analyticalThinking": "Analytical Thinking",
    "criticalThinking": "Critical Thinking",
    "problemSolving": "Problem Solving",
    "presentationSkills": "Presentation Skills",
    "conflictManagement": "Conflict Management",
}
COMPETENCY_KEYS: tuple[str, ...] = tuple(COMPETENCY_DISPLAY_NAMES)


def display_name(key: str) -> str:
    return COMPETENCY_DISPLAY_NAMES.get(key, key)


class CamelModel(BaseModel):
    """Models exchanged with the frontend use camelCase keys on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Competency Models
class CompetencyScore(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    score: int = Field(..., ge=0, le=100)
    analysis: str = ""
    evidence: Union[str, list[str]] = ""
    strengths: Optional[list[str]] = None
    improvements: Optional[list[str]] = None


class CompetencySet(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    public_speaking: CompetencyScore
    analytical_thinking: CompetencyScore
    critical_thinking: CompetencyScore
    problem_solving: CompetencyScore
    presentation_skills: CompetencyScore
    conflict_management: CompetencyScore

    def items(self) -> Iterator[tuple[str, CompetencyScore]]:
        """Yield (camelCase key, score) pairs in canonical order."""
        for name, field in type(self).model_fields.items():
            yield field.alias or name, getattr(self, name)

    def score_values(self) -> dict[str, int]:
        return {key: competency.score for key, competency in self.items()}


# Report Models
class Recommendation(CamelModel):
    status: RecommendationStatus
    text: str
    action: str
    priority: Priority


class InsightReport(CamelModel):
    strengths: list[str]
    development_areas: list[str]
    key_competencies: list[str]


class AnalysisMetadata(CamelModel):
    processed_at: datetime
    processing_time: str
    confidence: float
    version: str


class AnalysisReport(CamelModel):
    file_name: str
    analysis_date: datetime
    duration: str
    scores: CompetencySet
    overall_score: int
    recommendation: Recommendation
    topics: list[str]
    transcript: str
    insights: InsightReport
    metadata: AnalysisMetadata


# Request/Response Models
class AnalyzeRequest(CamelModel):
    """JSON body accepted by POST /api/analyze."""
    transcript: Optional[str] = None
    video_data: Optional[Any] = None
    file_name: Optional[str] = None


class AnalyzeResponse(CamelModel):
    success: bool = True
    data: AnalysisReport
