"""
Meeting Processing Pipeline

Chains upload staging, transcription and meeting minutes generation.

Author: AI Assistant
Date: 2025-11-18
"""

import time
import logging
from pathlib import Path
from typing import Optional

from fastapi import UploadFile
from openai import OpenAI

from api.audio.models import (
    MeetingProcessingOutput,
    MinutesOutput,
    ProcessingStats,
    TranscriptionOutput,
)
from api.audio.shared_models import MeetingMetadata
from api.config import Config
from pipelines.meeting_minutes_service import MeetingMinutesService
from pipelines.transcription_service import TranscriptionService
from pipelines.upload_staging import staged_upload

logger = logging.getLogger(__name__)


class MeetingPipeline:
    """
    Meeting processing pipeline.

    Workflow:
    1. Stage the uploaded audio under the upload directory
    2. Transcribe audio with word timestamps
    3. Generate meeting minutes from the transcript
    4. Delete the staged file, whatever happened in 2 or 3
    """

    def __init__(
        self,
        transcription_service: TranscriptionService,
        minutes_service: MeetingMinutesService,
        upload_dir: Path,
        max_upload_size: int,
    ):
        self.transcription_service = transcription_service
        self.minutes_service = minutes_service
        self.upload_dir = upload_dir
        self.max_upload_size = max_upload_size

    @classmethod
    def from_config(cls, config: Config, client: OpenAI) -> "MeetingPipeline":
        """Build a pipeline whose services share one provider client."""
        return cls(
            transcription_service=TranscriptionService(
                client,
                model_name=config.transcription_model,
                language=config.transcription_language,
            ),
            minutes_service=MeetingMinutesService(
                client,
                model_name=config.minutes_model,
                temperature=config.minutes_temperature,
            ),
            upload_dir=config.upload_dir,
            max_upload_size=config.max_upload_size,
        )

    def transcribe_upload(self, upload_file: Optional[UploadFile]) -> TranscriptionOutput:
        """Stage and transcribe an uploaded audio file."""
        pipeline_start = time.time()

        with staged_upload(upload_file, self.upload_dir, self.max_upload_size) as staged:
            transcript = self.transcription_service.transcribe(staged.path)

        total_time = time.time() - pipeline_start
        logger.info(f"⏱️ Tempo de processamento: {total_time:.1f}s")

        return TranscriptionOutput(
            transcript=transcript,
            processing_stats=ProcessingStats(
                total_time=round(total_time, 2),
                transcription_time=round(total_time, 2),
            ),
        )

    def generate_minutes(
        self,
        transcription: Optional[str],
        metadata: Optional[MeetingMetadata] = None,
    ) -> MinutesOutput:
        """Generate minutes from an existing transcript."""
        llm_start = time.time()
        minutes = self.minutes_service.generate_minutes(transcription, metadata)
        llm_time = time.time() - llm_start

        logger.info(f"⏱️ Tempo de processamento: {llm_time:.1f}s")
        return MinutesOutput(
            minutes=minutes,
            processing_stats=ProcessingStats(
                total_time=round(llm_time, 2),
                llm_time=round(llm_time, 2),
            ),
        )

    def process_meeting(
        self,
        upload_file: Optional[UploadFile],
        metadata: Optional[MeetingMetadata] = None,
    ) -> MeetingProcessingOutput:
        """
        Main processing pipeline: stage -> transcribe -> generate minutes.

        No partial result is returned: if minutes generation fails the
        transcript is discarded along with the staged file.
        """
        pipeline_start = time.time()
        metadata = metadata or MeetingMetadata()

        with staged_upload(upload_file, self.upload_dir, self.max_upload_size) as staged:
            logger.info("📋 PROCESSANDO REUNIÃO COMPLETA")

            logger.info("[1/2] 🎤 Transcrevendo...")
            transcription_start = time.time()
            transcript = self.transcription_service.transcribe(staged.path)
            transcription_time = time.time() - transcription_start

            logger.info("[2/2] 🤖 Gerando ata...")
            llm_start = time.time()
            minutes = self.minutes_service.summarize(
                transcript.text,
                metadata.model_copy(update={"duration_seconds": transcript.duration}),
            )
            llm_time = time.time() - llm_start

        total_time = time.time() - pipeline_start
        logger.info(f"⏱️ Tempo total: {total_time:.1f}s")

        return MeetingProcessingOutput(
            transcript=transcript,
            minutes=minutes,
            processing_stats=ProcessingStats(
                total_time=round(total_time, 2),
                transcription_time=round(transcription_time, 2),
                llm_time=round(llm_time, 2),
            ),
        )
