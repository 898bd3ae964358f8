"""
Protocol definitions for the external capabilities of the pipeline.

This module defines interfaces (Python Protocols) that allow:
- Swapping implementations (e.g., ffmpeg -> in-process resampler)
- Testing without real API credentials
- Clear contracts between the controller and its collaborators

Usage:
    from meeting_translator.services.protocols import TranscriptionEngine

    async def caption(engine: TranscriptionEngine, waveform: bytes) -> str:
        return await engine.transcribe(waveform)
"""

from typing import Protocol


class Transcoder(Protocol):
    """
    Interface for the resampling step in front of transcription.

    Implementations must be deterministic: the same PCM input always
    produces the same canonical waveform.
    """

    async def transcode(self, pcm: bytes, source_rate: int) -> bytes:
        """
        Convert capture-rate PCM to the canonical transcription waveform.

        Args:
            pcm: Raw little-endian signed 16-bit mono PCM
            source_rate: Sample rate of ``pcm`` in Hz (typically 48000)

        Returns:
            WAV container bytes, 16 kHz mono 16-bit

        Raises:
            ProcessError: If the conversion fails
        """
        ...


class TranscriptionEngine(Protocol):
    """Interface for speech-to-text services."""

    async def transcribe(self, waveform: bytes) -> str:
        """
        Transcribe a canonical waveform to text.

        Raises:
            EngineError: If the service call fails
        """
        ...


class TranslationEngine(Protocol):
    """
    Interface for translation services.

    The glossary instruction is injected into the engine's prompt or
    context; an empty instruction means no glossary is active.
    """

    async def translate(
        self,
        text: str,
        glossary_instruction: str,
        target_language: str,
        *,
        deterministic: bool = True,
    ) -> str:
        """
        Translate text into ``target_language``.

        Raises:
            EngineError: If the service call fails
        """
        ...
