"""
PCM Conversion Helpers

Conversions between float samples in [-1, 1], signed 16-bit PCM and the
byte layouts used on the wire (float32 host frames, s16le chunks, WAV).
"""

import io
import wave

import numpy as np

from meeting_translator.config.constants import (
    AUDIO_BYTES_PER_SAMPLE,
    FLOAT32_BYTES_PER_SAMPLE,
    PCM16_NEGATIVE_SCALE,
    PCM16_POSITIVE_SCALE,
)


def float_to_pcm16(samples) -> np.ndarray:
    """
    Encode float samples as signed 16-bit PCM.

    NaN becomes silence and infinities saturate. Values are clamped to
    [-1, 1]; negatives scale by 32768 and positives by 32767, then round
    to nearest.
    """
    values = np.nan_to_num(np.asarray(samples, dtype=np.float64), nan=0.0, posinf=1.0, neginf=-1.0)
    clipped = np.clip(values, -1.0, 1.0)
    scaled = np.where(
        clipped < 0,
        clipped * PCM16_NEGATIVE_SCALE,
        clipped * PCM16_POSITIVE_SCALE,
    )
    return np.rint(scaled).astype(np.int16)


def pcm16_to_float(pcm) -> np.ndarray:
    """Inverse of :func:`float_to_pcm16`."""
    values = np.asarray(pcm, dtype=np.float64)
    return np.where(
        values < 0,
        values / PCM16_NEGATIVE_SCALE,
        values / PCM16_POSITIVE_SCALE,
    )


def pcm16_from_bytes(data: bytes) -> np.ndarray:
    if len(data) % AUDIO_BYTES_PER_SAMPLE:
        raise ValueError(f"PCM16 payload length {len(data)} is not a multiple of 2")
    return np.frombuffer(data, dtype="<i2").astype(np.int16)


def decode_float32_frame(data: bytes) -> np.ndarray:
    """Decode a binary host frame of little-endian float32 mono samples."""
    if len(data) % FLOAT32_BYTES_PER_SAMPLE:
        raise ValueError(f"Audio frame length {len(data)} is not a multiple of 4")
    return np.frombuffer(data, dtype="<f4").astype(np.float32)


def encode_wav(pcm: np.ndarray, sample_rate: int) -> bytes:
    """Wrap mono int16 samples in a WAV container."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(AUDIO_BYTES_PER_SAMPLE)
        wav.setframerate(sample_rate)
        wav.writeframes(np.asarray(pcm, dtype="<i2").tobytes())
    return buffer.getvalue()


def decode_wav(data: bytes) -> tuple[np.ndarray, int]:
    """Read a mono 16-bit WAV container back into (samples, sample_rate)."""
    with wave.open(io.BytesIO(data), "rb") as wav:
        if wav.getnchannels() != 1 or wav.getsampwidth() != AUDIO_BYTES_PER_SAMPLE:
            raise ValueError("Expected mono 16-bit WAV")
        frames = wav.readframes(wav.getnframes())
        return pcm16_from_bytes(frames), wav.getframerate()
