import logging
from typing import Optional

from google import genai

from .config import Settings
from .services import AnalysisOrchestrator, AudioExtractor, GeminiAssessor, GeminiTranscriber

logger = logging.getLogger(__name__)

_orchestrator: Optional[AnalysisOrchestrator] = None


def create_gemini_client(settings: Settings) -> genai.Client:
    """Build the Gemini client for either Vertex AI or an API key."""
    if settings.vertex_project:
        return genai.Client(
            vertexai=True,
            project=settings.vertex_project,
            location=settings.vertex_location,
        )
    elif settings.gemini_api_key:
        return genai.Client(api_key=settings.gemini_api_key)
    else:
        raise ValueError("Either api_key or vertex_project must be provided")


def build_orchestrator(settings: Settings) -> AnalysisOrchestrator:
    """Wire the collaborators enabled by settings into an orchestrator."""
    client = None
    if settings.ai_scoring_active or settings.transcription_active:
        client = create_gemini_client(settings)

    assessor = None
    if settings.ai_scoring_active:
        assessor = GeminiAssessor(
            client,
            model=settings.analysis_model,
            topics_model=settings.topics_model,
            timeout=settings.ai_call_timeout,
        )

    transcriber = None
    audio_extractor = None
    if settings.transcription_active:
        transcriber = GeminiTranscriber(
            client,
            model=settings.transcription_model,
            language=settings.transcription_language,
        )
        audio_extractor = AudioExtractor(settings.ffmpeg_path, settings.ffprobe_path)

    logger.info(
        "Analysis pipeline: AI scoring %s, transcription %s",
        "on" if assessor else "off (keyword analysis)",
        "on" if transcriber else "off",
    )
    return AnalysisOrchestrator(
        assessor=assessor,
        transcriber=transcriber,
        audio_extractor=audio_extractor,
        tmp_dir=settings.upload_tmp_dir,
    )


def init_orchestrator(settings: Settings) -> AnalysisOrchestrator:
    global _orchestrator
    _orchestrator = build_orchestrator(settings)
    return _orchestrator


def close_orchestrator():
    global _orchestrator
    _orchestrator = None


def get_orchestrator() -> AnalysisOrchestrator:
    """Dependency returning the process-wide orchestrator."""
    if _orchestrator is None:
        raise RuntimeError("Orchestrator not initialized. Call init_orchestrator first.")
    return _orchestrator
