"""
Shared Meeting Models

Transcript and meeting minutes models shared by the pipelines and the routes.

Author: AI Assistant
Date: 2025-11-18
"""

from typing import Any, List, Optional
from dataclasses import dataclass
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# UPLOADS
# =============================================================================

@dataclass(frozen=True)
class UploadedAudio:
    """Audio file staged on disk for the lifetime of one request"""
    path: Path
    original_name: str
    size_bytes: int
    content_type: Optional[str] = None

    @property
    def size_mb(self) -> float:
        return self.size_bytes / (1024 * 1024)


# =============================================================================
# TRANSCRIPTION
# =============================================================================

class WordTimestamp(BaseModel):
    """Single recognized word with its position in the audio"""
    model_config = ConfigDict(frozen=True)

    word: str = Field(description="Recognized word")
    start: float = Field(description="Start time in seconds")
    end: float = Field(description="End time in seconds")


class Transcript(BaseModel):
    """Speech-to-text result"""
    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Full transcription text")
    words: List[WordTimestamp] = Field(default_factory=list, description="Word-level timestamps")
    duration: float = Field(default=0.0, description="Audio duration in seconds")

    @property
    def word_count(self) -> int:
        return len(self.text.split())


class MeetingMetadata(BaseModel):
    """Optional meeting information supplied by the caller"""
    meeting_date: Optional[str] = Field(default=None, description="Meeting date")
    start_time: Optional[str] = Field(default=None, description="Meeting start time")
    end_time: Optional[str] = Field(default=None, description="Meeting end time")
    duration_seconds: Optional[float] = Field(default=None, description="Audio duration in seconds")


# =============================================================================
# MEETING MINUTES
# =============================================================================

class _MinutesModel(BaseModel):
    """Base for minutes records: null values from the model become empty defaults"""
    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    @field_validator("*", mode="before")
    @classmethod
    def _null_to_default(cls, value: Any, info) -> Any:
        if value is not None:
            return value
        field = cls.model_fields[info.field_name]
        return field.get_default(call_default_factory=True)


class Topic(_MinutesModel):
    """Discussed topic"""
    title: str = Field(default="", alias="titulo")
    description: str = Field(default="", alias="descricao")


class Decision(_MinutesModel):
    """Decision taken during the meeting"""
    decision: str = Field(default="", alias="decisao")
    owner: str = Field(default="", alias="responsavel")
    deadline: str = Field(default="", alias="prazo")


class ActionItem(_MinutesModel):
    """Follow-up task"""
    task: str = Field(default="", alias="tarefa")
    owner: str = Field(default="", alias="responsavel")
    deadline: str = Field(default="", alias="prazo")


class MeetingMinutes(_MinutesModel):
    """Structured meeting minutes"""
    executive_summary: str = Field(default="", alias="resumo_executivo")
    participants: List[str] = Field(default_factory=list, alias="participantes")
    topics: List[Topic] = Field(default_factory=list, alias="topicos_discutidos")
    decisions: List[Decision] = Field(default_factory=list, alias="decisoes_tomadas")
    action_items: List[ActionItem] = Field(default_factory=list, alias="encaminhamentos")
    notes: str = Field(default="", alias="observacoes")

    @field_validator("participants")
    @classmethod
    def _unique_participants(cls, value: List[str]) -> List[str]:
        # Keep first mention order
        return list(dict.fromkeys(value))

    def to_response(self) -> dict:
        """Serialize with the provider's field names"""
        return self.model_dump(by_alias=True)
