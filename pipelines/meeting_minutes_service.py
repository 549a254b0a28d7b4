"""Reusable meeting minutes generation utilities."""

import json
import time
import logging
from pathlib import Path
from typing import Optional

from openai import OpenAI, OpenAIError
from pydantic import ValidationError as SchemaValidationError

from api.audio.shared_models import MeetingMetadata, MeetingMinutes
from api.errors import ParseError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)

PROMPT_PATH = Path(__file__).parent / "prompts" / "meeting_minutes.txt"
MINUTES_PROMPT_TEMPLATE = PROMPT_PATH.read_text(encoding="utf-8")
SYSTEM_PROMPT = "Você é um assistente especializado em gerar atas de reunião estruturadas."
MISSING_TRANSCRIPTION_MESSAGE = "Transcrição não fornecida"


def build_minutes_prompt(transcription: str, metadata: Optional[MeetingMetadata] = None) -> str:
    """Render the minutes prompt; the same input always yields the same text."""
    metadata = metadata or MeetingMetadata()

    duration_line = ""
    if metadata.duration_seconds is not None:
        duration_line = f"\n- Duração do áudio: {metadata.duration_seconds:.0f} segundos"

    return MINUTES_PROMPT_TEMPLATE.format(
        transcription_text=transcription,
        meeting_date=metadata.meeting_date or "Não informada",
        start_time=metadata.start_time or "Não informado",
        end_time=metadata.end_time or "Não informado",
        duration_line=duration_line,
    )


class MeetingMinutesService:
    """Generate structured meeting minutes from transcription text."""

    def __init__(self, client: OpenAI, model_name: str = "gpt-4o", temperature: float = 0.3):
        self.client = client
        self.model_name = model_name
        self.temperature = temperature
        logger.info("MeetingMinutesService initialized with model: %s", self.model_name)

    def generate_minutes(
        self,
        transcription: Optional[str],
        metadata: Optional[MeetingMetadata] = None,
    ) -> MeetingMinutes:
        """
        Generate structured meeting minutes via LLM.

        Raises:
            ValidationError: If no transcription text is given
            UpstreamError: If the completion call fails
            ParseError: If the completion is not a JSON object of the expected shape
        """
        if not transcription or not transcription.strip():
            raise ValidationError(MISSING_TRANSCRIPTION_MESSAGE)
        return self.summarize(transcription, metadata)

    def summarize(self, transcription: str, metadata: Optional[MeetingMetadata] = None) -> MeetingMinutes:
        """Run the completion for a transcript that may be empty (silent audio)."""
        logger.info("🤖 Gerando ata com %s...", self.model_name)
        start_time = time.time()

        prompt = build_minutes_prompt(transcription, metadata)
        try:
            completion = self.client.chat.completions.create(
                model=self.model_name,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
        except OpenAIError as exc:
            logger.error("LLM meeting minutes call failed: %s", exc)
            raise UpstreamError(str(exc)) from exc

        content = completion.choices[0].message.content if completion.choices else None
        minutes = self._parse_meeting_minutes(content)

        logger.info("✅ Ata gerada com sucesso em %.2fs", time.time() - start_time)
        return minutes

    def _parse_meeting_minutes(self, content: Optional[str]) -> MeetingMinutes:
        """Parse the model's JSON output into a MeetingMinutes object."""
        if not content:
            raise ParseError("Resposta do modelo vazia")

        try:
            payload = json.loads(content)
        except json.JSONDecodeError as exc:
            logger.error("LLM returned invalid JSON: %s", exc)
            raise ParseError(f"Resposta do modelo não é um JSON válido: {exc}") from exc

        if not isinstance(payload, dict):
            raise ParseError(f"Resposta do modelo deveria ser um objeto JSON, recebido {type(payload).__name__}")

        try:
            return MeetingMinutes.model_validate(payload)
        except SchemaValidationError as exc:
            logger.error("LLM JSON does not match minutes shape: %s", exc)
            raise ParseError(f"Resposta do modelo fora do formato esperado: {exc}") from exc
