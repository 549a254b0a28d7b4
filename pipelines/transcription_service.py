"""
Transcription Service

Speech-to-text through the OpenAI audio transcription endpoint.

Author: AI Assistant
Date: 2025-11-18
"""

import time
import logging
from pathlib import Path

from openai import OpenAI, OpenAIError

from api.audio.shared_models import Transcript, WordTimestamp
from api.errors import UpstreamError

logger = logging.getLogger(__name__)


class TranscriptionService:
    """Transcribe staged audio files with word-level timestamps."""

    def __init__(self, client: OpenAI, model_name: str = "whisper-1", language: str = "pt"):
        """
        Initialize TranscriptionService.

        Args:
            client: Configured OpenAI client
            model_name: Transcription model name
            language: Audio language code sent with every request
        """
        self.client = client
        self.model_name = model_name
        self.language = language
        logger.info(f"TranscriptionService initialized with model: {self.model_name}")

    def transcribe(self, file_path: Path) -> Transcript:
        """
        Transcribe an audio file.

        The file is open only while the provider call is in flight.

        Args:
            file_path: Path to a staged audio file

        Returns:
            Transcript with text, word timestamps and duration

        Raises:
            UpstreamError: If the provider is unreachable or rejects the audio
        """
        logger.info(f"🎤 Iniciando transcrição com {self.model_name}...")
        start_time = time.time()

        try:
            with open(file_path, "rb") as audio_file:
                response = self.client.audio.transcriptions.create(
                    file=audio_file,
                    model=self.model_name,
                    language=self.language,
                    response_format="verbose_json",
                    timestamp_granularities=["word"],
                )
        except OpenAIError as exc:
            logger.error(f"Transcription failed: {exc}")
            raise UpstreamError(str(exc)) from exc

        transcript = Transcript(
            text=response.text or "",
            words=[
                WordTimestamp(word=w.word, start=w.start, end=w.end)
                for w in (getattr(response, "words", None) or [])
            ],
            duration=float(getattr(response, "duration", None) or 0.0),
        )

        elapsed = time.time() - start_time
        logger.info(f"✅ Transcrição concluída ({transcript.word_count} palavras) em {elapsed:.2f}s")
        return transcript
