"""
Pipeline Models

Immutable records that flow through the caption pipeline. The chunk
sequence number is assigned once by the accumulator and carried by every
derived record so out-of-order completions stay attributable.
"""
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, eq=False)
class AudioChunk:
    """
    A fixed-duration slice of captured audio.

    Attributes:
        samples: Read-only int16 array at ``sample_rate``
        sample_rate: Capture rate in Hz
        captured_at: Wall-clock emission time (epoch seconds)
        sequence: Monotonic chunk number assigned at accumulation time
    """
    samples: np.ndarray
    sample_rate: int
    captured_at: float
    sequence: int

    @property
    def timestamp_ms(self) -> int:
        return int(self.captured_at * 1000)

    @property
    def duration_seconds(self) -> float:
        return len(self.samples) / self.sample_rate

    def to_bytes(self) -> bytes:
        """Little-endian s16le bytes of the original capture-rate samples."""
        return self.samples.astype("<i2", copy=False).tobytes()


@dataclass(frozen=True)
class TranscriptResult:
    chunk_sequence: int
    text: str
    is_admissible: bool


@dataclass(frozen=True)
class TranslationResult:
    """Terminal translation artifact for one chunk."""
    chunk_sequence: int
    source_text: str
    translated_text: str
    timestamp: float


@dataclass(frozen=True, eq=False)
class PipelineResult:
    """
    Everything fan-out needs for one chunk.

    ``chunk`` keeps the original capture-rate audio for playback; the
    resampled waveform never leaves the transcode/transcribe stages.
    """
    chunk: AudioChunk
    transcript: TranscriptResult
    translation: TranslationResult

    @property
    def sequence(self) -> int:
        return self.chunk.sequence
