from ..models import CompetencySet, InsightReport, display_name


STRENGTH_ABOVE = 75
DEVELOPMENT_BELOW = 60

# (minimum score, level), highest first
PROFICIENCY_LEVELS: tuple[tuple[int, str], ...] = (
    (80, "Advanced"),
    (65, "Proficient"),
    (50, "Developing"),
)


def proficiency_level(score: int) -> str:
    for minimum, level in PROFICIENCY_LEVELS:
        if score >= minimum:
            return level
    return "Beginner"


class InsightGenerator:
    def generate(self, scores: CompetencySet) -> InsightReport:
        """Classify competencies into strengths, development areas and proficiency levels."""
        strengths: list[str] = []
        development_areas: list[str] = []
        key_competencies: list[str] = []

        for key, competency in scores.items():
            name = display_name(key)
            if competency.score > STRENGTH_ABOVE:
                strengths.append(name)
            elif competency.score < DEVELOPMENT_BELOW:
                development_areas.append(name)
            key_competencies.append(f"{name}: {proficiency_level(competency.score)}")

        return InsightReport(
            strengths=strengths,
            development_areas=development_areas,
            key_competencies=key_competencies,
        )
