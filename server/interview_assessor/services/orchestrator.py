"""Interview analysis pipeline.

Obtains a transcript (directly, or by transcribing uploaded media), scores
it with the language model when one is configured, and falls back to the
deterministic keyword analyzers whenever the model call fails. Which
collaborators are wired in decides the deployment variant:

- no assessor, no transcriber: keyword analysis of supplied transcripts only
- assessor only: AI analysis of supplied transcripts
- assessor + transcriber + audio extractor: full video pipeline
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..models import AnalysisMetadata, AnalysisReport, CompetencySet
from .errors import AIServiceError, InputError, MediaProcessingError
from .gemini_assessor import GeminiAssessor
from .insights import InsightGenerator
from .keyword_analyzer import KeywordAnalyzer
from .media import AUDIO_MIME_TYPE, AUDIO_SUFFIX, AudioExtractor, format_duration, temporary_path
from .scoring import ScoreAggregator
from .topic_extractor import TopicExtractor
from .transcriber import GeminiTranscriber

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "interview_video.mp4"
REPORT_CONFIDENCE = 0.95
REPORT_VERSION = "2.0.0"


@dataclass
class MediaInput:
    """An uploaded recording already spooled to a local file."""
    path: str
    content_type: Optional[str] = None
    file_name: Optional[str] = None

    @property
    def is_audio(self) -> bool:
        return bool(self.content_type) and self.content_type.startswith("audio/")


class AnalysisOrchestrator:
    def __init__(
        self,
        assessor: Optional[GeminiAssessor] = None,
        transcriber: Optional[GeminiTranscriber] = None,
        audio_extractor: Optional[AudioExtractor] = None,
        tmp_dir: Optional[str] = None,
    ):
        self.assessor = assessor
        self.transcriber = transcriber
        self.audio_extractor = audio_extractor
        self.tmp_dir = tmp_dir

        self.keyword_analyzer = KeywordAnalyzer()
        self.topic_extractor = TopicExtractor()
        self.aggregator = ScoreAggregator()
        self.insight_generator = InsightGenerator()

    async def run(
        self,
        transcript: Optional[str] = None,
        media: Optional[MediaInput] = None,
        file_name: Optional[str] = None,
    ) -> AnalysisReport:
        """Produce the full analysis report for one interview."""
        started = time.perf_counter()
        duration = "N/A"

        if transcript is not None and transcript.strip():
            text = transcript
        elif media is not None:
            text, duration = await self._transcribe_media(media)
        else:
            raise InputError("No transcript provided. Please provide the interview transcript.")

        if not text.strip():
            raise InputError("Transcript is empty. Please provide the interview transcript.")

        scores, topics = await asyncio.gather(
            self._score_competencies(text),
            self._extract_topics(text),
        )

        overall_score = self.aggregator.aggregate(scores)
        now = datetime.now(timezone.utc)

        return AnalysisReport(
            file_name=file_name or (media.file_name if media else None) or DEFAULT_FILE_NAME,
            analysis_date=now,
            duration=duration,
            scores=scores,
            overall_score=overall_score,
            recommendation=self.aggregator.recommend(overall_score),
            topics=topics,
            transcript=text,
            insights=self.insight_generator.generate(scores),
            metadata=AnalysisMetadata(
                processed_at=now,
                processing_time=f"{time.perf_counter() - started:.2f}s",
                confidence=REPORT_CONFIDENCE,
                version=REPORT_VERSION,
            ),
        )

    async def _transcribe_media(self, media: MediaInput) -> tuple[str, str]:
        """Transcribe uploaded media, returning (transcript, formatted duration)."""
        if self.transcriber is None:
            raise InputError("Transcription is not enabled. Please provide the interview transcript.")

        duration = "N/A"
        if self.audio_extractor is not None:
            duration = format_duration(await self.audio_extractor.probe_duration(media.path))

        if media.is_audio:
            text = await self.transcriber.transcribe(media.path, media.content_type)
            return text, duration

        if self.audio_extractor is None:
            raise MediaProcessingError("Video uploads require audio extraction, which is not configured")

        with temporary_path(suffix=AUDIO_SUFFIX, directory=self.tmp_dir) as audio_path:
            await self.audio_extractor.extract_audio(media.path, audio_path)
            text = await self.transcriber.transcribe(audio_path, AUDIO_MIME_TYPE)
        return text, duration

    async def _score_competencies(self, transcript: str) -> CompetencySet:
        if self.assessor is not None:
            try:
                return await self.assessor.score_competencies(transcript)
            except AIServiceError as e:
                logger.warning("AI competency scoring failed, using keyword analysis: %s", e)
        return self.keyword_analyzer.analyze(transcript)

    async def _extract_topics(self, transcript: str) -> list[str]:
        if self.assessor is not None:
            try:
                return await self.assessor.extract_topics(transcript)
            except AIServiceError as e:
                logger.warning("AI topic extraction failed, using keyword topics: %s", e)
        return self.topic_extractor.extract(transcript)
