"""
Engine Adapters

Exports the OpenAI-backed transcription and translation engines.
"""

from meeting_translator.services.engines.openai_engines import (
    OpenAITranscriptionEngine,
    OpenAITranslationEngine,
    strip_wrapping_quotes,
)

__all__ = [
    "OpenAITranscriptionEngine",
    "OpenAITranslationEngine",
    "strip_wrapping_quotes",
]
