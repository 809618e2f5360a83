import asyncio
import logging
import os

from google import genai
from google.genai import types

from .errors import TranscriptionError

logger = logging.getLogger(__name__)

DEFAULT_TRANSCRIPTION_TIMEOUT = 300  # seconds
# Requests above this size must go through the Files API instead of inline bytes.
INLINE_AUDIO_LIMIT = 18 * 1024 * 1024

TRANSCRIPTION_PROMPT = """Transcribe this job interview recording verbatim.
The spoken language is "{language}" (ISO 639-1 code).
Do not summarize, translate, or add speaker commentary.
Return only the transcript text."""


def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


class GeminiTranscriber:
    """Speech-to-text for interview audio using Gemini."""

    def __init__(
        self,
        client: genai.Client,
        model: str = "gemini-2.5-flash",
        language: str = "id",
        timeout: float = DEFAULT_TRANSCRIPTION_TIMEOUT,
    ):
        self.client = client
        self.model = model
        self.language = language
        self.timeout = timeout

    async def _delete_upload(self, uploaded) -> None:
        try:
            await self.client.aio.files.delete(name=uploaded.name)
        except Exception as e:
            # Uploads expire server-side; a failed delete only delays that.
            logger.warning("Failed to delete uploaded audio %s: %s", uploaded.name, e)

    async def _generate(self, audio_path: str, mime_type: str, prompt: str):
        """Send the audio (inline or via the Files API) and request the transcript."""
        uploaded = None
        try:
            if os.path.getsize(audio_path) <= INLINE_AUDIO_LIMIT:
                data = await asyncio.to_thread(_read_bytes, audio_path)
                audio = types.Part.from_bytes(data=data, mime_type=mime_type)
            else:
                uploaded = await self.client.aio.files.upload(
                    file=audio_path,
                    config=types.UploadFileConfig(mime_type=mime_type),
                )
                audio = uploaded

            return await self.client.aio.models.generate_content(
                model=self.model,
                contents=[audio, prompt],
                config=types.GenerateContentConfig(temperature=0.0),
            )
        finally:
            if uploaded is not None:
                await self._delete_upload(uploaded)

    async def transcribe(self, audio_path: str, mime_type: str = "audio/mpeg") -> str:
        """Transcribe an audio file and return the plain transcript text."""
        prompt = TRANSCRIPTION_PROMPT.format(language=self.language)

        try:
            # Upload, generation and cleanup all share one deadline.
            response = await asyncio.wait_for(
                self._generate(audio_path, mime_type, prompt),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error("Transcription timed out after %s seconds", self.timeout)
            raise TranscriptionError(f"Transcription timed out after {self.timeout}s") from e
        except Exception as e:
            logger.error("Transcription failed: %s", e, exc_info=True)
            raise TranscriptionError(f"Transcription failed: {e}") from e

        transcript_text = (response.text or "").strip()
        logger.info("Transcribed %d characters from %s", len(transcript_text), os.path.basename(audio_path))
        return transcript_text
