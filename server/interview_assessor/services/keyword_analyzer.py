from typing import Optional

from ..models import CompetencySet
from .errors import InputError


# Indicator keywords per competency, matched against whitespace tokens
COMPETENCY_INDICATORS: dict[str, tuple[str, ...]] = {
    "publicSpeaking": ("saya", "kami", "pelanggan", "komunikasi", "menjelaskan", "sampaikan"),
    "analyticalThinking": ("analisis", "data", "evaluasi", "pertimbangan", "faktor", "aspek"),
    "criticalThinking": ("namun", "tetapi", "sisi lain", "perspektif", "pandangan", "objektif"),
    "problemSolving": ("solusi", "masalah", "mengatasi", "penyelesaian", "langkah", "cara"),
    "presentationSkills": ("pertama", "kedua", "ketiga", "kesimpulan", "poin", "struktur"),
    "conflictManagement": ("konflik", "mediasi", "negosiasi", "win-win", "kompromi", "tenang"),
}

BASE_SCORE = 50
POINTS_PER_INDICATOR = 10
MAX_BASE_SCORE = 85
LONG_TRANSCRIPT_WORDS = 200
LENGTH_BONUS = 10
MAX_SCORE = 95

ANALYSIS_TEXT = "Analysis based on transcript content and keyword relevance."


class KeywordAnalyzer:
    """Deterministic keyword-based competency scorer used when the AI service is unavailable."""

    def count_indicators(self, words: set[str], keywords: tuple[str, ...]) -> int:
        """Count distinct keywords that appear as exact tokens."""
        return sum(1 for keyword in keywords if keyword in words)

    def score(self, indicator_count: int, word_count: int) -> int:
        base_score = min(BASE_SCORE + indicator_count * POINTS_PER_INDICATOR, MAX_BASE_SCORE)
        length_bonus = LENGTH_BONUS if word_count > LONG_TRANSCRIPT_WORDS else 0
        return min(base_score + length_bonus, MAX_SCORE)

    def analyze(self, transcript: Optional[str]) -> CompetencySet:
        """Score all six competencies from keyword presence and transcript length."""
        if transcript is None:
            raise InputError("Transcript is required for keyword analysis")

        tokens = transcript.lower().split()
        words = set(tokens)

        scores = {}
        for competency, keywords in COMPETENCY_INDICATORS.items():
            count = self.count_indicators(words, keywords)
            scores[competency] = {
                "score": self.score(count, len(tokens)),
                "analysis": ANALYSIS_TEXT,
                "evidence": f"Found {count} relevant indicators in the transcript.",
            }

        return CompetencySet.model_validate(scores)
