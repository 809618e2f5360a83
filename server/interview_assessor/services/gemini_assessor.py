"""Gemini Assessor Service

Language-model backed scoring for interview transcripts:
1. Competency scoring - six fixed competencies, 0-100 each, with evidence
2. Topic extraction - 8-10 key topics discussed in the interview

Every failure (timeout, quota, empty or malformed reply) is raised as
AIServiceError so callers can switch to the deterministic analyzers.
"""

import asyncio
import json
import logging
from typing import Any

from google import genai
from google.genai import types
from pydantic import ValidationError

from ..models import CompetencySet
from .errors import AIServiceError

logger = logging.getLogger(__name__)

DEFAULT_CALL_TIMEOUT = 45  # seconds
MAX_TOPICS = 10


SYSTEM_INSTRUCTION = (
    "You are an expert HR assessor for Bank BCA. Provide objective analysis based ONLY on "
    "evidence from the transcript. If no evidence exists for a competency, give a low score."
)


COMPETENCY_ANALYSIS_PROMPT = """Anda adalah ahli HR Bank BCA yang mengevaluasi kandidat Service Ambassador.
Analisis transkrip wawancara berikut dan berikan penilaian OBJEKTIF dan KETAT untuk setiap kompetensi.

PENTING:
- Berikan skor berdasarkan BUKTI NYATA dari transkrip
- Jika tidak ada bukti untuk suatu kompetensi, berikan skor rendah (30-50)
- Jangan berikan skor tinggi tanpa bukti kuat

Transkrip Wawancara:
"{transcript}"

Berikan penilaian untuk:
1. Public Speaking (kejelasan bicara, artikulasi, kepercayaan diri)
2. Analytical Thinking (kemampuan analisis sistematis)
3. Critical Thinking (evaluasi objektif, multiple perspectives)
4. Problem Solving (identifikasi masalah dan solusi)
5. Presentation Skills (struktur penyampaian, clarity)
6. Conflict Management (handling konflik, mediasi)

Return ONLY a JSON object with this structure:
{{
    "publicSpeaking": {{
        "score": <0-100 berdasarkan bukti>,
        "analysis": "analisis spesifik dari transkrip",
        "evidence": "kutipan dari transkrip yang mendukung skor",
        "improvements": ["saran pengembangan"]
    }},
    "analyticalThinking": {{ ... }},
    "criticalThinking": {{ ... }},
    "problemSolving": {{ ... }},
    "presentationSkills": {{ ... }},
    "conflictManagement": {{ ... }}
}}

Return ONLY the JSON object, no other text."""


TOPIC_EXTRACTION_PROMPT = """Extract 8-10 key topics discussed in this interview transcript.
Focus on competencies and skills relevant to a Bank Service Ambassador role.

Transcript:
"{transcript}"

Return ONLY a JSON object with this structure:
{{
    "topics": ["topic1", "topic2", ...]
}}"""


def _clean_json_text(text: str) -> str:
    """Strip markdown code fences around a JSON reply."""
    text = (text or "").strip()
    if text.startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


class GeminiAssessor:
    """AI-powered competency scoring and topic extraction."""

    def __init__(
        self,
        client: genai.Client,
        model: str = "gemini-2.5-flash",
        topics_model: str = "gemini-2.5-flash-lite",
        timeout: float = DEFAULT_CALL_TIMEOUT,
    ):
        """
        Initialize the assessor.

        Args:
            client: Configured google-genai client (API key or Vertex AI).
            model: Model used for competency scoring.
            topics_model: Model used for topic extraction.
            timeout: Seconds allowed for each model call.
        """
        self.client = client
        self.model = model
        self.topics_model = topics_model
        self.timeout = timeout

    async def _generate_json(self, model: str, prompt: str, temperature: float, label: str) -> Any:
        try:
            response = await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=model,
                    contents=prompt,
                    config=types.GenerateContentConfig(
                        system_instruction=SYSTEM_INSTRUCTION,
                        temperature=temperature,
                        response_mime_type="application/json",
                    ),
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise AIServiceError(f"{label} timed out after {self.timeout}s") from e
        except Exception as e:
            raise AIServiceError(f"{label} request failed: {e}") from e

        text = _clean_json_text(response.text)
        if not text:
            raise AIServiceError(f"{label} returned an empty response")

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.debug("Unparseable %s reply: %s", label, text[:300])
            raise AIServiceError(f"{label} returned invalid JSON: {e}") from e

    async def score_competencies(self, transcript: str) -> CompetencySet:
        """Score the six competencies from transcript evidence."""
        data = await self._generate_json(
            self.model,
            COMPETENCY_ANALYSIS_PROMPT.format(transcript=transcript),
            temperature=0.3,
            label="Competency scoring",
        )
        try:
            return CompetencySet.model_validate(data)
        except ValidationError as e:
            raise AIServiceError(f"Competency scoring reply failed validation: {e}") from e

    async def extract_topics(self, transcript: str) -> list[str]:
        """Extract up to ten discussed topics."""
        data = await self._generate_json(
            self.topics_model,
            TOPIC_EXTRACTION_PROMPT.format(transcript=transcript),
            temperature=0.5,
            label="Topic extraction",
        )
        topics = data.get("topics") if isinstance(data, dict) else None
        if not isinstance(topics, list):
            raise AIServiceError("Topic extraction reply has no topics list")

        cleaned = [str(topic).strip() for topic in topics if str(topic).strip()]
        if not cleaned:
            raise AIServiceError("Topic extraction reply has an empty topics list")
        return cleaned[:MAX_TOPICS]
