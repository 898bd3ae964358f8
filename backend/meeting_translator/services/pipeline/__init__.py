"""
Caption Pipeline Module

- Models: AudioChunk, TranscriptResult, TranslationResult, PipelineResult
- PipelineController: per-chunk transcode/transcribe/filter/translate
- SequenceReorderBuffer: optional in-order fan-out
- MeetingPipeline (runtime.py): queue wiring for one hosted room

Usage:
    from meeting_translator.services.pipeline import PipelineController
    from meeting_translator.services.pipeline.runtime import MeetingPipeline
"""

from meeting_translator.services.pipeline.models import (
    AudioChunk,
    TranscriptResult,
    TranslationResult,
    PipelineResult,
)
from meeting_translator.services.pipeline.reorder import SequenceReorderBuffer
from meeting_translator.services.pipeline.controller import PipelineController

__all__ = [
    "AudioChunk",
    "TranscriptResult",
    "TranslationResult",
    "PipelineResult",
    "SequenceReorderBuffer",
    "PipelineController",
]
