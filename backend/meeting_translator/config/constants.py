"""
Application-wide constants for audio handling and pipeline tuning.

This file centralizes the values that define the audio contract and
operational limits of the translation pipeline.

Note: Environment-dependent settings (API keys, models, languages, chunk
duration) belong in settings.py. This file is for parameters that rarely
change between environments.
"""

# ==============================================================================
# AUDIO FORMAT
# ==============================================================================

# Sample rate the transcription engine expects (Hz)
TRANSCRIPTION_SAMPLE_RATE: int = 16000

# Default browser capture rate (Hz)
DEFAULT_CAPTURE_SAMPLE_RATE: int = 48000

# Bytes per sample (16-bit PCM = 2 bytes)
AUDIO_BYTES_PER_SAMPLE: int = 2

# Bytes per float32 sample in host frames
FLOAT32_BYTES_PER_SAMPLE: int = 4

# PCM16 scale factors (asymmetric: full negative range, full positive range)
PCM16_NEGATIVE_SCALE: float = 32768.0
PCM16_POSITIVE_SCALE: float = 32767.0

# ==============================================================================
# CHUNKING
# ==============================================================================

# Default chunk length (ms). Larger chunks raise caption latency,
# smaller chunks raise per-chunk overhead and make playback choppy.
DEFAULT_CHUNK_DURATION_MS: int = 5000

# ==============================================================================
# TRANSCRIPT FILTERING
# ==============================================================================

# Transcripts shorter than this (after trimming) are never translated
MIN_ADMISSIBLE_TEXT_LENGTH: int = 3

# ==============================================================================
# SESSIONS
# ==============================================================================

# Length of generated room ids
ROOM_ID_LENGTH: int = 6

# Room id alphabet
ROOM_ID_ALPHABET: str = "abcdefghijklmnopqrstuvwxyz0123456789"

# ==============================================================================
# TIMING & SHUTDOWN
# ==============================================================================

# Time allowed for in-flight chunks to finish when a pipeline stops (seconds)
PIPELINE_SHUTDOWN_TIMEOUT_SEC: float = 60.0

# WebSocket event names
EVENT_AUDIO_STREAM: str = "audio-stream"
EVENT_TRANSLATED_CAPTION: str = "translated-caption"
EVENT_ROOM_CLOSED: str = "room-closed"
