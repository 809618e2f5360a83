import asyncio
import base64
import binascii
import json
import logging
import os
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from ..config import Settings, get_settings
from ..dependencies import get_orchestrator
from ..models import AnalysisReport, AnalyzeRequest, AnalyzeResponse
from ..services import AnalysisOrchestrator, MediaInput
from ..services.errors import InputError, MethodError, UploadTooLargeError
from ..services.media import temporary_path

logger = logging.getLogger(__name__)

router = APIRouter()

NO_DATA_ERROR = "No data provided. Please provide either transcript or video data."
UPLOAD_CHUNK_SIZE = 1024 * 1024
DISCONNECT_POLL_SECONDS = 0.5
CLIENT_CLOSED_REQUEST = 499


def _success(report: AnalysisReport) -> JSONResponse:
    payload = AnalyzeResponse(data=report).model_dump(mode="json", by_alias=True, exclude_none=True)
    return JSONResponse(status_code=200, content=payload)


def _decode_video_data(video_data: Any) -> tuple[bytes, Optional[str]]:
    """Decode base64 videoData, optionally wrapped as a data: URL."""
    if not isinstance(video_data, str):
        raise InputError("videoData must be a base64-encoded string")

    content_type = None
    payload = video_data.strip()
    if payload.startswith("data:"):
        header, _, payload = payload.partition(",")
        content_type = header[5:].split(";")[0] or None

    try:
        return base64.b64decode(payload, validate=True), content_type
    except (binascii.Error, ValueError) as e:
        raise InputError(f"videoData is not valid base64: {e}") from e


async def _spool_upload(upload: UploadFile, destination: str, max_bytes: int) -> int:
    """Copy an uploaded file to disk in chunks, enforcing the size cap."""
    written = 0
    with open(destination, "wb") as out:
        while True:
            chunk = await upload.read(UPLOAD_CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > max_bytes:
                raise UploadTooLargeError(
                    f"Video exceeds the maximum upload size of {max_bytes // (1024 * 1024)}MB"
                )
            out.write(chunk)
    return written


async def _run_until_disconnect(request: Request, coro) -> Optional[AnalysisReport]:
    """Await the analysis, cancelling it if the client goes away. Returns None on disconnect."""
    task = asyncio.ensure_future(coro)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
            if task in done:
                return task.result()
            if await request.is_disconnected():
                logger.info("Client disconnected; cancelling analysis")
                task.cancel()
                await asyncio.wait({task})
                return None
    except asyncio.CancelledError:
        task.cancel()
        raise


async def _analyze_json(
    request: Request,
    orchestrator: AnalysisOrchestrator,
    settings: Settings,
) -> Optional[AnalysisReport]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InputError(f"Invalid JSON body: {e}") from e
    if not isinstance(body, dict):
        raise InputError("Request body must be a JSON object")

    try:
        payload = AnalyzeRequest.model_validate(body)
    except ValidationError as e:
        raise InputError(f"Invalid request body: {e.errors()[0]['msg']}") from e

    if not payload.transcript and not payload.video_data:
        raise InputError(NO_DATA_ERROR)

    # A usable transcript wins over media; a blank one with no media is rejected by the orchestrator.
    if (payload.transcript and payload.transcript.strip()) or not payload.video_data:
        return await _run_until_disconnect(
            request,
            orchestrator.run(transcript=payload.transcript, file_name=payload.file_name),
        )

    data, content_type = _decode_video_data(payload.video_data)
    if len(data) > settings.max_upload_bytes:
        raise UploadTooLargeError(
            f"Video exceeds the maximum upload size of {settings.max_upload_bytes // (1024 * 1024)}MB"
        )

    suffix = os.path.splitext(payload.file_name or "")[1].lower()
    with temporary_path(suffix=suffix, directory=settings.upload_tmp_dir) as video_path:
        with open(video_path, "wb") as f:
            f.write(data)
        media = MediaInput(path=video_path, content_type=content_type, file_name=payload.file_name)
        return await _run_until_disconnect(
            request,
            orchestrator.run(media=media, file_name=payload.file_name),
        )


async def _analyze_multipart(
    request: Request,
    orchestrator: AnalysisOrchestrator,
    settings: Settings,
) -> Optional[AnalysisReport]:
    async with request.form() as form:
        video = form.get("video")
        transcript = form.get("transcript")
        file_name = form.get("fileName")

        if not isinstance(video, UploadFile):
            video = None
        if not isinstance(transcript, str):
            transcript = None
        if not isinstance(file_name, str) or not file_name:
            file_name = video.filename if video else None

        if not transcript and video is None:
            raise InputError(NO_DATA_ERROR)

        if video is None or (transcript and transcript.strip()):
            return await _run_until_disconnect(
                request,
                orchestrator.run(transcript=transcript, file_name=file_name),
            )

        if video.size is not None and video.size > settings.max_upload_bytes:
            raise UploadTooLargeError(
                f"Video exceeds the maximum upload size of {settings.max_upload_bytes // (1024 * 1024)}MB"
            )

        suffix = os.path.splitext(video.filename or "")[1].lower()
        with temporary_path(suffix=suffix, directory=settings.upload_tmp_dir) as video_path:
            size = await _spool_upload(video, video_path, settings.max_upload_bytes)
            logger.info("Received upload %s (%d bytes)", video.filename, size)
            media = MediaInput(path=video_path, content_type=video.content_type, file_name=file_name)
            return await _run_until_disconnect(
                request,
                orchestrator.run(media=media, file_name=file_name),
            )


@router.post("/analyze")
async def analyze_interview(
    request: Request,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
):
    """
    Analyze an interview from a transcript or a recording.

    JSON body:
    ```json
    {"transcript": "...", "videoData": "<base64>", "fileName": "interview.mp4"}
    ```

    Multipart form: a `video` file field, with optional `transcript` and `fileName` fields.
    """
    content_type = request.headers.get("content-type", "")

    try:
        if content_type.startswith("multipart/form-data"):
            report = await _analyze_multipart(request, orchestrator, settings)
        else:
            report = await _analyze_json(request, orchestrator, settings)
    except UploadTooLargeError as e:
        return JSONResponse(status_code=413, content={"error": str(e)})
    except InputError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except Exception as e:
        logger.exception("Analysis error: %s", e)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Failed to analyze interview",
                "details": str(e),
            },
        )

    if report is None:
        return Response(status_code=CLIENT_CLOSED_REQUEST)
    return _success(report)


@router.options("/analyze")
async def analyze_preflight():
    return Response(status_code=200)


@router.api_route("/analyze", methods=["GET", "PUT", "PATCH", "DELETE"])
async def analyze_method_not_allowed(request: Request):
    raise MethodError(f"{request.method} is not supported")
