"""
Chunk Accumulator - Fixed-duration audio segmentation.

This module buffers raw float audio frames from the host and emits
fixed-length PCM16 chunks for the caption pipeline.

Chunk length trades latency against overhead: a longer chunk delays the
caption by its own duration, a shorter one multiplies engine calls and
makes replayed audio choppy. The accumulator does not adapt the size.

Usage:
    from meeting_translator.services.audio.chunker import ChunkAccumulator

    accumulator = ChunkAccumulator(
        sample_rate=48000,
        chunk_duration_ms=5000,
        on_chunk_ready=chunk_queue.put_nowait,
    )

    for frame in frames:
        accumulator.submit_audio_frame(frame)

    accumulator.drain()  # Only when the caller decides to keep the tail
"""

import time
import logging
from typing import Callable, List, Optional

import numpy as np

from meeting_translator.config.constants import (
    DEFAULT_CAPTURE_SAMPLE_RATE,
    DEFAULT_CHUNK_DURATION_MS,
)
from meeting_translator.services.audio.pcm import float_to_pcm16
from meeting_translator.services.metrics import chunks_emitted
from meeting_translator.services.pipeline.models import AudioChunk

logger = logging.getLogger(__name__)


class ChunkAccumulator:
    """
    Threshold-based audio accumulator.

    Collects mono float frames until the buffered sample count reaches
    the threshold derived from the chunk duration, then emits exactly
    ``threshold_samples`` samples as one AudioChunk. Samples past the
    threshold carry over into the next chunk.

    A trailing partial buffer is never emitted automatically; call
    :meth:`drain` to flush it.

    Attributes:
        sample_rate: Capture rate of incoming frames in Hz
        threshold_samples: Samples per emitted chunk
        on_chunk_ready: Optional callback invoked with each emitted chunk
    """

    def __init__(
        self,
        sample_rate: int = DEFAULT_CAPTURE_SAMPLE_RATE,
        chunk_duration_ms: int = DEFAULT_CHUNK_DURATION_MS,
        on_chunk_ready: Optional[Callable[[AudioChunk], None]] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the accumulator.

        Args:
            sample_rate: Capture rate in Hz
            chunk_duration_ms: Target chunk duration in milliseconds
            on_chunk_ready: Callback for each emitted chunk
            clock: Wall-clock source for capture timestamps
        """
        threshold = int(sample_rate * chunk_duration_ms / 1000)
        if sample_rate <= 0 or threshold <= 0:
            raise ValueError(
                f"Chunk threshold must be positive (sample_rate={sample_rate}, "
                f"chunk_duration_ms={chunk_duration_ms})"
            )

        self.sample_rate = sample_rate
        self.threshold_samples = threshold
        self.on_chunk_ready = on_chunk_ready
        self._clock = clock

        # State
        self._frames: List[np.ndarray] = []
        self._buffered = 0
        self._next_sequence = 0

    @property
    def buffered_samples(self) -> int:
        return self._buffered

    def submit_audio_frame(self, frame) -> List[AudioChunk]:
        """
        Feed one frame of float samples in [-1, 1].

        Args:
            frame: Sequence or array of mono float samples

        Returns:
            Chunks emitted by this frame (usually zero or one)
        """
        samples = np.asarray(frame, dtype=np.float32).reshape(-1)
        if samples.size == 0:
            return []

        self._frames.append(samples)
        self._buffered += samples.size

        emitted = []
        while self._buffered >= self.threshold_samples:
            merged = np.concatenate(self._frames)
            head = merged[:self.threshold_samples]
            tail = merged[self.threshold_samples:]

            self._frames = [tail] if tail.size else []
            self._buffered = int(tail.size)

            emitted.append(self._emit(head, "threshold"))

        return emitted

    def drain(self) -> Optional[AudioChunk]:
        """
        Emit whatever is buffered as a final, shorter chunk.

        Returns:
            The partial chunk, or None when the buffer is empty
        """
        if not self._buffered:
            return None

        merged = np.concatenate(self._frames)
        self._frames = []
        self._buffered = 0
        return self._emit(merged, "drain")

    def discard(self) -> int:
        """Drop the buffered tail. Returns the number of samples dropped."""
        dropped = self._buffered
        self._frames = []
        self._buffered = 0
        if dropped:
            logger.info(f"[ChunkAccumulator] Dropped {dropped} trailing samples")
        return dropped

    def _emit(self, samples: np.ndarray, trigger: str) -> AudioChunk:
        pcm = float_to_pcm16(samples)
        pcm.setflags(write=False)

        chunk = AudioChunk(
            samples=pcm,
            sample_rate=self.sample_rate,
            captured_at=self._clock(),
            sequence=self._next_sequence,
        )
        self._next_sequence += 1
        chunks_emitted.labels(trigger=trigger).inc()

        logger.info(
            f"[ChunkAccumulator] Emitted chunk #{chunk.sequence} "
            f"({len(pcm)} samples, {chunk.duration_seconds:.2f}s, {trigger})"
        )

        if self.on_chunk_ready is not None:
            self.on_chunk_ready(chunk)

        return chunk

