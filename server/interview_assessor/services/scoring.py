"""Overall score aggregation and hiring recommendation tiers.

The overall score is the mean of the competency scores that carry
evidence (strictly greater than zero), rounded half-up. Recommendation
tiers use inclusive lower bounds:

    >= 85  HIGHLY_RECOMMENDED  (HIGH)
    >= 70  RECOMMENDED         (MEDIUM)
    >= 55  CONDITIONAL         (LOW)
    else   NOT_RECOMMENDED     (NONE)
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from ..models import CompetencySet, Recommendation


# (minimum overall score, recommendation payload), highest tier first
RECOMMENDATION_TIERS: tuple[tuple[int, dict[str, str]], ...] = (
    (85, {
        "status": "HIGHLY_RECOMMENDED",
        "text": "Kandidat sangat direkomendasikan. Menunjukkan kompetensi excellent berdasarkan analisis transkrip.",
        "action": "Lanjut ke final interview dengan senior management",
        "priority": "HIGH",
    }),
    (70, {
        "status": "RECOMMENDED",
        "text": "Kandidat direkomendasikan dengan catatan pengembangan. Menunjukkan potensi baik.",
        "action": "Lanjut dengan assessment tambahan",
        "priority": "MEDIUM",
    }),
    (55, {
        "status": "CONDITIONAL",
        "text": "Kandidat dapat dipertimbangkan dengan program development intensif.",
        "action": "Pertimbangkan untuk posisi junior dengan training",
        "priority": "LOW",
    }),
)

NOT_RECOMMENDED = {
    "status": "NOT_RECOMMENDED",
    "text": "Kandidat belum memenuhi standar minimal berdasarkan analisis interview.",
    "action": "Sarankan pengembangan skill terlebih dahulu",
    "priority": "NONE",
}


class ScoreAggregator:
    def aggregate(self, scores: Union[CompetencySet, dict[str, int]]) -> int:
        """Rounded mean of the non-zero competency scores; 0 when none are non-zero."""
        values = scores.score_values().values() if isinstance(scores, CompetencySet) else scores.values()
        valid = [value for value in values if value > 0]
        if not valid:
            return 0

        mean = Decimal(sum(valid)) / Decimal(len(valid))
        return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def recommend(self, overall: int) -> Recommendation:
        for minimum, payload in RECOMMENDATION_TIERS:
            if overall >= minimum:
                return Recommendation(**payload)
        return Recommendation(**NOT_RECOMMENDED)
