import asyncio
from typing import Dict, List, Optional

import numpy as np

from meeting_translator.services.exceptions import EngineError
from meeting_translator.services.pipeline.models import AudioChunk


def make_chunk(sequence: int, samples: int = 160, sample_rate: int = 16000, captured_at: float = 1000.0) -> AudioChunk:
    pcm = np.full(samples, sequence, dtype=np.int16)
    pcm.setflags(write=False)
    return AudioChunk(
        samples=pcm,
        sample_rate=sample_rate,
        captured_at=captured_at + sequence,
        sequence=sequence,
    )


class FakeTranscoder:
    """Returns the PCM unchanged; the 'waveform' stays identifiable per chunk."""

    def __init__(self):
        self.calls: List[int] = []

    async def transcode(self, pcm: bytes, source_rate: int) -> bytes:
        self.calls.append(source_rate)
        return pcm


class FakeTranscriptionEngine:
    """
    Maps the first PCM sample (the chunk sequence from make_chunk) to a
    scripted transcript. Sequences listed in ``failures`` raise EngineError,
    ``delays`` holds per-sequence sleep times.
    """

    name = "fake-transcription"

    def __init__(
        self,
        transcripts: Optional[Dict[int, str]] = None,
        default: str = "The weather today is sunny",
        failures: Optional[set] = None,
        delays: Optional[Dict[int, float]] = None,
    ):
        self.transcripts = transcripts or {}
        self.default = default
        self.failures = failures or set()
        self.delays = delays or {}
        self.calls: List[int] = []

    async def transcribe(self, waveform: bytes) -> str:
        sequence = int(np.frombuffer(waveform[:2], dtype="<i2")[0]) if waveform else -1
        self.calls.append(sequence)

        delay = self.delays.get(sequence)
        if delay:
            await asyncio.sleep(delay)
        if sequence in self.failures:
            raise EngineError(self.name, f"scripted failure for chunk {sequence}")
        return self.transcripts.get(sequence, self.default)


class FakeTranslationEngine:
    name = "fake-translation"

    def __init__(self, fail: bool = False, prefix: str = "vi:"):
        self.fail = fail
        self.prefix = prefix
        self.calls: List[dict] = []

    async def translate(self, text, glossary_instruction, target_language, *, deterministic=True):
        self.calls.append({
            "text": text,
            "glossary_instruction": glossary_instruction,
            "target_language": target_language,
            "deterministic": deterministic,
        })
        if self.fail:
            raise EngineError(self.name, "scripted translation failure")
        return f"{self.prefix}{text}"


class FakeWebSocket:
    """Minimal stand-in for fastapi.WebSocket used by ConnectionManager."""

    def __init__(self, fail: bool = False):
        self.sent: List[dict] = []
        self.fail = fail

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)

    def events(self, event_type: str) -> List[dict]:
        return [m for m in self.sent if m.get("type") == event_type]


def fake_pipeline_factory(transcription_engine=None, translation_engine=None, chunk_duration_ms=10, ordered=False):
    """Pipeline factory for SessionDirectory wired to fakes instead of OpenAI."""
    from meeting_translator.services.pipeline.runtime import MeetingPipeline

    created = []

    def factory(room_id, sample_rate, glossary, broadcast):
        pipeline = MeetingPipeline(
            room_id,
            transcoder=FakeTranscoder(),
            transcription_engine=transcription_engine or FakeTranscriptionEngine(),
            translation_engine=translation_engine or FakeTranslationEngine(),
            glossary=glossary,
            broadcast=broadcast,
            sample_rate=sample_rate,
            chunk_duration_ms=chunk_duration_ms,
            target_language="Vietnamese",
            ordered=ordered,
        )
        created.append(pipeline)
        return pipeline

    factory.created = created
    return factory
