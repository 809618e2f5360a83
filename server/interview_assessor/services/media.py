import asyncio
import logging
import os
import tempfile
from contextlib import contextmanager
from typing import Iterator, Optional

from .errors import MediaProcessingError

logger = logging.getLogger(__name__)

AUDIO_SUFFIX = ".mp3"
AUDIO_MIME_TYPE = "audio/mpeg"


@contextmanager
def temporary_path(suffix: str = "", directory: Optional[str] = None) -> Iterator[str]:
    """Reserve a temp file path and always delete the file afterwards."""
    with tempfile.NamedTemporaryFile(suffix=suffix, dir=directory, delete=False) as tmp:
        tmp_path = tmp.name

    try:
        yield tmp_path
    finally:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)


def format_duration(seconds: Optional[float]) -> str:
    """Render seconds as MM:SS (H:MM:SS past an hour), or N/A when unknown."""
    if seconds is None or seconds < 0:
        return "N/A"
    total = int(round(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


async def _run(cmd: list[str]) -> tuple[int, bytes, bytes]:
    """Run a command, killing it if the awaiting task is cancelled."""
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await proc.communicate()
    except asyncio.CancelledError:
        proc.kill()
        await proc.wait()
        raise
    return proc.returncode, stdout, stderr


class AudioExtractor:
    """Extracts the audio track of an uploaded video using the ffmpeg binaries."""

    def __init__(self, ffmpeg_path: str = "ffmpeg", ffprobe_path: str = "ffprobe"):
        self.ffmpeg_path = ffmpeg_path
        self.ffprobe_path = ffprobe_path

    async def extract_audio(self, video_path: str, output_path: str) -> str:
        """Write a mono 16 kHz MP3 of the video's audio track to output_path."""
        cmd = [
            self.ffmpeg_path,
            "-y",                 # Overwrite the reserved temp file
            "-i", video_path,
            "-vn",                # Drop the video stream
            "-ac", "1",
            "-ar", "16000",
            "-b:a", "64k",
            "-v", "error",
            output_path,
        ]
        try:
            returncode, _, stderr = await _run(cmd)
        except FileNotFoundError as e:
            raise MediaProcessingError(f"ffmpeg not found at '{self.ffmpeg_path}'") from e

        if returncode != 0:
            message = stderr.decode(errors="replace").strip()[:500]
            logger.error("ffmpeg exited with %s: %s", returncode, message)
            raise MediaProcessingError(f"Audio extraction failed: {message or 'ffmpeg error'}")

        logger.info("Extracted audio from %s", os.path.basename(video_path))
        return output_path

    async def probe_duration(self, media_path: str) -> Optional[float]:
        """Media duration in seconds, or None when ffprobe cannot tell."""
        cmd = [
            self.ffprobe_path,
            "-v", "error",
            "-show_entries", "format=duration",
            "-of", "default=noprint_wrappers=1:nokey=1",
            media_path,
        ]
        try:
            returncode, stdout, _ = await _run(cmd)
        except FileNotFoundError:
            logger.warning("ffprobe not found at '%s'; duration unknown", self.ffprobe_path)
            return None

        if returncode != 0:
            return None
        try:
            return float(stdout.decode().strip())
        except ValueError:
            return None
