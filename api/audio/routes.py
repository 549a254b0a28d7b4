"""
Meeting API Routes

FastAPI routes for audio upload, transcription, and meeting minutes generation.

Author: AI Assistant
Date: 2025-11-18
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool

from api.audio.models import (
    GenerateMinutesRequest,
    HealthResponse,
    MeetingProcessingResponse,
    MinutesResponse,
    TranscriptionResponse,
)
from api.audio.shared_models import MeetingMetadata
from api.config import Config
from api.errors import MeetingServiceError
from pipelines.meeting_pipeline import MeetingPipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["meeting"])


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_config(request: Request) -> Config:
    return request.app.state.config


def get_meeting_pipeline(request: Request) -> MeetingPipeline:
    return request.app.state.meeting_pipeline


def _annotate(exc: Exception, summary: str) -> MeetingServiceError:
    """Attach the operation summary; unknown exceptions are wrapped."""
    if isinstance(exc, MeetingServiceError):
        if exc.summary is None:
            exc.summary = exc.message if exc.status_code == 400 else summary
        return exc
    return MeetingServiceError(str(exc), summary=summary)


# =============================================================================
# API ENDPOINTS
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check(config: Config = Depends(get_config)):
    """Health check endpoint."""
    return HealthResponse(
        status="ok",
        openai="connected" if config.openai_api_key else "not configured",
    )


@router.post("/transcribe", response_model=TranscriptionResponse)
async def transcribe_audio(
    audio: Optional[UploadFile] = File(None, description="Audio file to transcribe (max 50MB)"),
    pipeline: MeetingPipeline = Depends(get_meeting_pipeline),
):
    """
    Transcribe an audio file with word-level timestamps.

    The uploaded file is deleted before the response is sent.
    """
    try:
        output = await run_in_threadpool(pipeline.transcribe_upload, audio)
    except Exception as e:
        logger.error(f"❌ Erro na transcrição: {e}")
        raise _annotate(e, "Erro ao transcrever áudio")

    return TranscriptionResponse.from_output(output)


@router.post("/generate-minutes", response_model=MinutesResponse)
async def generate_minutes(
    body: GenerateMinutesRequest,
    pipeline: MeetingPipeline = Depends(get_meeting_pipeline),
):
    """Generate structured meeting minutes from a transcript."""
    try:
        output = await run_in_threadpool(
            pipeline.generate_minutes, body.transcription, body.to_metadata()
        )
    except Exception as e:
        logger.error(f"❌ Erro ao gerar ata: {e}")
        raise _annotate(e, "Erro ao gerar ata")

    return MinutesResponse.from_output(output)


@router.post("/process-meeting", response_model=MeetingProcessingResponse)
async def process_meeting(
    audio: Optional[UploadFile] = File(None, description="Meeting audio file (max 50MB)"),
    meeting_date: Optional[str] = Form(None, alias="meetingDate"),
    start_time: Optional[str] = Form(None, alias="startTime"),
    end_time: Optional[str] = Form(None, alias="endTime"),
    pipeline: MeetingPipeline = Depends(get_meeting_pipeline),
):
    """
    Transcribe an audio file and generate meeting minutes in one call.

    If minutes generation fails the transcript is not returned.
    """
    metadata = MeetingMetadata(meeting_date=meeting_date, start_time=start_time, end_time=end_time)
    try:
        output = await run_in_threadpool(pipeline.process_meeting, audio, metadata)
    except Exception as e:
        logger.error(f"❌ Erro ao processar reunião: {e}")
        raise _annotate(e, "Erro ao processar reunião")

    return MeetingProcessingResponse.from_output(output)
