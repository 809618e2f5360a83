from interview_assessor.models import COMPETENCY_KEYS, CompetencySet
from interview_assessor.services.insights import InsightGenerator, proficiency_level


def _competency_set(*scores):
    return CompetencySet.model_validate(
        {key: {"score": score} for key, score in zip(COMPETENCY_KEYS, scores)}
    )


def test_strengths_and_development_areas_use_strict_thresholds():
    insights = InsightGenerator().generate(_competency_set(80, 76, 75, 60, 59, 0))
    assert insights.strengths == ["Public Speaking", "Analytical Thinking"]
    assert insights.development_areas == ["Presentation Skills", "Conflict Management"]


def test_key_competencies_list_every_competency_in_order():
    insights = InsightGenerator().generate(_competency_set(80, 76, 75, 60, 59, 0))
    assert insights.key_competencies == [
        "Public Speaking: Advanced",
        "Analytical Thinking: Proficient",
        "Critical Thinking: Proficient",
        "Problem Solving: Developing",
        "Presentation Skills: Developing",
        "Conflict Management: Beginner",
    ]


def test_proficiency_level_boundaries():
    assert proficiency_level(100) == "Advanced"
    assert proficiency_level(80) == "Advanced"
    assert proficiency_level(79) == "Proficient"
    assert proficiency_level(65) == "Proficient"
    assert proficiency_level(64) == "Developing"
    assert proficiency_level(50) == "Developing"
    assert proficiency_level(49) == "Beginner"
    assert proficiency_level(0) == "Beginner"


def test_strengths_and_development_areas_never_overlap():
    generator = InsightGenerator()
    for base in range(0, 101, 5):
        scores = [min(100, base + offset) for offset in (0, 3, 7, 11, 17, 23)]
        insights = generator.generate(_competency_set(*scores))
        assert not set(insights.strengths) & set(insights.development_areas)


def test_mid_band_scores_are_neither_strength_nor_development_area():
    insights = InsightGenerator().generate(_competency_set(60, 65, 70, 75, 62, 68))
    assert insights.strengths == []
    assert insights.development_areas == []
