"""
Audio Processing Module

This module contains the audio-side services of the caption pipeline:
- ChunkAccumulator: fixed-duration chunking of host frames
- PCM helpers: float <-> PCM16 <-> WAV conversions
- Transcoders: capture-rate PCM to 16 kHz transcription WAV

Usage:
    from meeting_translator.services.audio import ChunkAccumulator, build_transcoder
"""

from meeting_translator.services.audio.pcm import (
    float_to_pcm16,
    pcm16_to_float,
    decode_float32_frame,
    encode_wav,
    decode_wav,
)
from meeting_translator.services.audio.chunker import ChunkAccumulator
from meeting_translator.services.audio.transcoder import (
    FFmpegTranscoder,
    NumpyTranscoder,
    build_transcoder,
)

__all__ = [
    # Classes
    "ChunkAccumulator",
    "FFmpegTranscoder",
    "NumpyTranscoder",
    # Functions
    "float_to_pcm16",
    "pcm16_to_float",
    "decode_float32_frame",
    "encode_wav",
    "decode_wav",
    "build_transcoder",
]
