"""
Transcoder - Capture-rate PCM to the canonical transcription waveform.

The transcription engine expects 16 kHz mono 16-bit WAV, while the host
captures at the browser rate (typically 48 kHz). Two implementations:

- FFmpegTranscoder: pipes PCM through an ``ffmpeg`` subprocess
- NumpyTranscoder: resamples in-process with linear interpolation

Usage:
    from meeting_translator.services.audio.transcoder import build_transcoder

    transcoder = build_transcoder(settings)
    waveform = await transcoder.transcode(chunk.to_bytes(), chunk.sample_rate)
"""

import asyncio
import logging
from typing import Optional

import numpy as np

from meeting_translator.config.constants import TRANSCRIPTION_SAMPLE_RATE
from meeting_translator.services.audio.pcm import encode_wav, pcm16_from_bytes
from meeting_translator.services.exceptions import ProcessError

logger = logging.getLogger(__name__)


class FFmpegTranscoder:
    """Resamples via an external ffmpeg process. Stateless per call."""

    def __init__(
        self,
        binary: str = "ffmpeg",
        target_rate: int = TRANSCRIPTION_SAMPLE_RATE,
        timeout: Optional[float] = None,
    ):
        self.binary = binary
        self.target_rate = target_rate
        self.timeout = timeout

    def _build_args(self, source_rate: int) -> list[str]:
        return [
            self.binary,
            "-hide_banner",
            "-loglevel", "error",
            "-f", "s16le",
            "-ar", str(source_rate),
            "-ac", "1",
            "-i", "pipe:0",
            "-ar", str(self.target_rate),
            "-ac", "1",
            "-acodec", "pcm_s16le",
            "-f", "s16le",
            "pipe:1",
        ]

    async def transcode(self, pcm: bytes, source_rate: int) -> bytes:
        """
        Run ffmpeg over the chunk and wrap its output in WAV.

        Raises:
            ProcessError: If ffmpeg cannot be started, exits non-zero or
                outlives ``timeout``
        """
        try:
            process = await asyncio.create_subprocess_exec(
                *self._build_args(source_rate),
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ProcessError(f"Could not start {self.binary}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(pcm), timeout=self.timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise ProcessError(f"{self.binary} timed out after {self.timeout}s")

        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise ProcessError(
                f"{self.binary} exited with code {process.returncode}",
                returncode=process.returncode,
                stderr=message,
            )

        samples = pcm16_from_bytes(stdout[:len(stdout) - len(stdout) % 2])
        logger.debug(
            f"[FFmpegTranscoder] {len(pcm)} bytes @ {source_rate}Hz -> "
            f"{len(samples)} samples @ {self.target_rate}Hz"
        )
        return encode_wav(samples, self.target_rate)


class NumpyTranscoder:
    """In-process resampler. Identity when the rates already match."""

    def __init__(self, target_rate: int = TRANSCRIPTION_SAMPLE_RATE):
        self.target_rate = target_rate

    def resample(self, samples: np.ndarray, source_rate: int) -> np.ndarray:
        if source_rate <= 0:
            raise ProcessError(f"Invalid source sample rate: {source_rate}")
        if source_rate == self.target_rate or samples.size == 0:
            return samples.astype(np.int16, copy=True)

        out_length = int(round(samples.size * self.target_rate / source_rate))
        positions = np.arange(out_length) * (source_rate / self.target_rate)
        resampled = np.interp(positions, np.arange(samples.size), samples.astype(np.float64))
        return np.clip(np.rint(resampled), -32768, 32767).astype(np.int16)

    async def transcode(self, pcm: bytes, source_rate: int) -> bytes:
        try:
            samples = pcm16_from_bytes(pcm)
        except ValueError as e:
            raise ProcessError(str(e)) from e
        return encode_wav(self.resample(samples, source_rate), self.target_rate)


def build_transcoder(settings):
    """Pick the transcoder named by ``settings.TRANSCODER``."""
    name = settings.TRANSCODER.lower()
    if name == "ffmpeg":
        return FFmpegTranscoder(binary=settings.FFMPEG_BINARY, timeout=settings.TRANSCODE_TIMEOUT_SEC)
    if name == "numpy":
        return NumpyTranscoder()
    raise ValueError(f"Unknown transcoder: {settings.TRANSCODER}")
