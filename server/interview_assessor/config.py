import logging
import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 500 * 1024 * 1024


@dataclass
class Settings:
    # Gemini API
    gemini_api_key: Optional[str]
    vertex_project: Optional[str]
    vertex_location: str
    use_vertex: bool

    # Models
    analysis_model: str
    topics_model: str
    transcription_model: str
    transcription_language: str
    ai_call_timeout: float

    # Deployment variant switches
    enable_ai_scoring: bool
    enable_transcription: bool

    # Uploads and media tools
    max_upload_bytes: int
    upload_tmp_dir: Optional[str]
    ffmpeg_path: str
    ffprobe_path: str

    # Server
    port: int
    log_level: str = "INFO"

    @property
    def has_ai_credentials(self) -> bool:
        return self.use_vertex or bool(self.gemini_api_key)

    @property
    def ai_scoring_active(self) -> bool:
        return self.enable_ai_scoring and self.has_ai_credentials

    @property
    def transcription_active(self) -> bool:
        return self.enable_transcription and self.has_ai_credentials


# Global settings instance
_settings: Optional[Settings] = None


def _env_flag(name: str, default: bool = True) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_settings() -> Settings:
    global _settings
    load_dotenv()

    # Check if using Vertex AI (service account) or API key
    vertex_project = os.getenv("VERTEX_PROJECT") or None
    api_key = os.getenv("LIVE_API") or os.getenv("GEMINI_API_KEY", "")

    use_vertex = vertex_project is not None

    if not use_vertex and not api_key:
        logger.warning(
            "Neither VERTEX_PROJECT nor LIVE_API/GEMINI_API_KEY is set; "
            "AI scoring and transcription are disabled"
        )

    _settings = Settings(
        gemini_api_key=api_key if api_key else None,
        vertex_project=vertex_project,
        vertex_location=os.getenv("VERTEX_LOCATION", "us-central1"),
        use_vertex=use_vertex,
        analysis_model=os.getenv("GEMINI_ANALYSIS_MODEL", "gemini-2.5-flash"),
        topics_model=os.getenv("GEMINI_TOPICS_MODEL", "gemini-2.5-flash-lite"),
        transcription_model=os.getenv("GEMINI_TRANSCRIPTION_MODEL", "gemini-2.5-flash"),
        transcription_language=os.getenv("TRANSCRIPTION_LANGUAGE", "id"),
        ai_call_timeout=float(os.getenv("AI_CALL_TIMEOUT", "45")),
        enable_ai_scoring=_env_flag("ENABLE_AI_SCORING"),
        enable_transcription=_env_flag("ENABLE_TRANSCRIPTION"),
        max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES))),
        upload_tmp_dir=os.getenv("UPLOAD_TMP_DIR") or None,
        ffmpeg_path=os.getenv("FFMPEG_PATH", "ffmpeg"),
        ffprobe_path=os.getenv("FFPROBE_PATH", "ffprobe"),
        port=int(os.getenv("PORT", "8000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
    return _settings


def get_settings() -> Settings:
    """Get the loaded settings. Must call load_settings() first."""
    global _settings
    if _settings is None:
        raise RuntimeError("Settings not initialized. Call load_settings() first.")
    return _settings
