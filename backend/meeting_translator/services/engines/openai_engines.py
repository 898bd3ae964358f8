"""
OpenAI Engines

Transcription (Whisper) and translation (chat completions) adapters
implementing the engine protocols. Every SDK failure is wrapped in
EngineError; the caller decides how to degrade.
"""

import io
import logging
from typing import Optional

from openai import AsyncOpenAI

from meeting_translator.config.settings import settings
from meeting_translator.services.exceptions import EngineError

logger = logging.getLogger(__name__)

TRANSLATION_PROMPT = """
You are a translation assistant. Translate all text from {source_language} to {target_language}.
Use these glossary rules: {glossary_instruction}.
Always preserve technical terms exactly as specified.
Translate the following text:
"{text}"
"""

_WRAPPING_QUOTES = ("\"", "'", "“", "”")


def _build_client(api_key: Optional[str] = None) -> AsyncOpenAI:
    api_key = api_key or settings.OPENAI_API_KEY
    if not api_key:
        raise RuntimeError(
            "OPENAI_API_KEY is not set. Please update backend/.env accordingly."
        )
    return AsyncOpenAI(
        api_key=api_key,
        timeout=settings.ENGINE_TIMEOUT_SEC,
        max_retries=settings.ENGINE_MAX_RETRIES,
    )


def strip_wrapping_quotes(text: str) -> str:
    """Drop quote marks the model sometimes wraps around its answer."""
    cleaned = text.strip()
    while len(cleaned) >= 2 and cleaned[0] in _WRAPPING_QUOTES and cleaned[-1] in _WRAPPING_QUOTES:
        cleaned = cleaned[1:-1].strip()
    return cleaned


class OpenAITranscriptionEngine:
    """Whisper speech-to-text over the canonical 16 kHz WAV."""

    name = "openai-transcription"

    def __init__(self, client: Optional[AsyncOpenAI] = None, model: Optional[str] = None):
        self._client = client or _build_client()
        self.model = model or settings.TRANSCRIPTION_MODEL

    async def transcribe(self, waveform: bytes) -> str:
        audio_file = io.BytesIO(waveform)
        audio_file.name = "chunk.wav"

        try:
            response = await self._client.audio.transcriptions.create(
                model=self.model,
                file=audio_file,
                response_format="text",
            )
        except Exception as e:
            raise EngineError(self.name, f"Transcription failed: {e}") from e

        text = response if isinstance(response, str) else getattr(response, "text", "")
        return (text or "").strip()


class OpenAITranslationEngine:
    """Chat-completion translation with glossary rules in the prompt."""

    name = "openai-translation"

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        model: Optional[str] = None,
        source_language: Optional[str] = None,
    ):
        self._client = client or _build_client()
        self.model = model or settings.TRANSLATION_MODEL
        self.source_language = source_language or settings.SOURCE_LANGUAGE

    def build_prompt(self, text: str, glossary_instruction: str, target_language: str) -> str:
        return TRANSLATION_PROMPT.format(
            source_language=self.source_language,
            target_language=target_language,
            glossary_instruction=glossary_instruction,
            text=text,
        )

    async def translate(
        self,
        text: str,
        glossary_instruction: str,
        target_language: str,
        *,
        deterministic: bool = True,
    ) -> str:
        if not text.strip():
            return ""

        request = {
            "model": self.model,
            "messages": [
                {"role": "user", "content": self.build_prompt(text, glossary_instruction, target_language)}
            ],
        }
        if deterministic:
            request["temperature"] = 0

        try:
            response = await self._client.chat.completions.create(**request)
        except Exception as e:
            raise EngineError(self.name, f"Translation failed: {e}") from e

        if not response.choices:
            return ""
        content = response.choices[0].message.content or ""
        return strip_wrapping_quotes(content)
