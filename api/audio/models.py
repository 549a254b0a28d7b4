"""
Meeting API Models

Data models for transcription and meeting minutes endpoints.

Author: AI Assistant
Date: 2025-11-18
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from api.audio.shared_models import MeetingMetadata, MeetingMinutes, Transcript, WordTimestamp


# =============================================================================
# PIPELINE OUTPUTS
# =============================================================================

class ProcessingStats(BaseModel):
    """Processing statistics"""
    total_time: float = Field(description="Total processing time in seconds")
    transcription_time: float = Field(default=0.0, description="ASR processing time in seconds")
    llm_time: float = Field(default=0.0, description="LLM generation time in seconds")


class TranscriptionOutput(BaseModel):
    """Standalone transcription output"""
    transcript: Transcript
    processing_stats: ProcessingStats


class MinutesOutput(BaseModel):
    """Standalone minutes output"""
    minutes: MeetingMinutes
    processing_stats: ProcessingStats


class MeetingProcessingOutput(BaseModel):
    """Complete meeting processing output"""
    transcript: Transcript
    minutes: MeetingMinutes
    processing_stats: ProcessingStats


# =============================================================================
# REQUEST MODELS
# =============================================================================

class GenerateMinutesRequest(BaseModel):
    """Request body for minutes generation"""
    model_config = ConfigDict(populate_by_name=True)

    transcription: Optional[str] = Field(default=None, description="Meeting transcription text")
    meeting_date: Optional[str] = Field(default=None, alias="meetingDate", description="Meeting date")
    start_time: Optional[str] = Field(default=None, alias="startTime", description="Meeting start time")
    end_time: Optional[str] = Field(default=None, alias="endTime", description="Meeting end time")

    def to_metadata(self) -> MeetingMetadata:
        return MeetingMetadata(
            meeting_date=self.meeting_date,
            start_time=self.start_time,
            end_time=self.end_time,
        )


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class _CamelResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=True, description="Whether the request was successful")
    processing_time: float = Field(alias="processingTime", description="Processing time in seconds")


class TranscriptionResponse(_CamelResponse):
    """API response for audio transcription"""
    transcription: str = Field(description="Full transcription text")
    words: List[WordTimestamp] = Field(description="Word-level timestamps")
    duration: float = Field(description="Audio duration in seconds")

    @classmethod
    def from_output(cls, output: TranscriptionOutput) -> "TranscriptionResponse":
        return cls(
            transcription=output.transcript.text,
            words=output.transcript.words,
            duration=output.transcript.duration,
            processing_time=round(output.processing_stats.total_time, 1),
        )


class MinutesResponse(_CamelResponse):
    """API response for meeting minutes generation"""
    minutes: Dict[str, Any] = Field(description="Structured meeting minutes")

    @classmethod
    def from_output(cls, output: MinutesOutput) -> "MinutesResponse":
        return cls(
            minutes=output.minutes.to_response(),
            processing_time=round(output.processing_stats.total_time, 1),
        )


class MeetingProcessingResponse(_CamelResponse):
    """API response for combined transcription and minutes generation"""
    transcription: str = Field(description="Full transcription text")
    words: List[WordTimestamp] = Field(description="Word-level timestamps")
    duration: float = Field(description="Audio duration in seconds")
    minutes: Dict[str, Any] = Field(description="Structured meeting minutes")

    @classmethod
    def from_output(cls, output: MeetingProcessingOutput) -> "MeetingProcessingResponse":
        return cls(
            transcription=output.transcript.text,
            words=output.transcript.words,
            duration=output.transcript.duration,
            minutes=output.minutes.to_response(),
            processing_time=round(output.processing_stats.total_time, 1),
        )


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = Field(description="Service status")
    openai: str = Field(description="'connected' or 'not configured'")


class ErrorResponse(BaseModel):
    """Error response body"""
    error: str = Field(description="Human readable summary")
    details: str = Field(description="Underlying error message")
    code: str = Field(description="Error class code")
