"""
Meeting Pipeline - Wiring for one hosted room.

Connects the pieces with explicit queues instead of callbacks:

    host frames -> ChunkAccumulator -> chunk queue -> PipelineController
                -> result queue -> fan-out loop -> broadcast(room, event, payload)

The broadcast function is supplied by the session directory; nothing in
here touches a socket.
"""

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from meeting_translator.config.constants import (
    EVENT_AUDIO_STREAM,
    EVENT_TRANSLATED_CAPTION,
    PIPELINE_SHUTDOWN_TIMEOUT_SEC,
)
from meeting_translator.config.settings import settings
from meeting_translator.schemas.websocket_events import AudioStreamPayload, CaptionPayload
from meeting_translator.services.audio.chunker import ChunkAccumulator
from meeting_translator.services.audio.transcoder import build_transcoder
from meeting_translator.services.engines.openai_engines import (
    OpenAITranscriptionEngine,
    OpenAITranslationEngine,
)
from meeting_translator.services.glossary.store import GlossaryStore
from meeting_translator.services.pipeline.controller import PipelineController
from meeting_translator.services.pipeline.models import AudioChunk, PipelineResult
from meeting_translator.services.pipeline.reorder import SequenceReorderBuffer
from meeting_translator.services.protocols import Transcoder, TranscriptionEngine, TranslationEngine

logger = logging.getLogger(__name__)

BroadcastFn = Callable[[str, str, Dict[str, Any]], Awaitable[int]]


class MeetingPipeline:
    """
    Accumulator, controller and fan-out for a single room.

    Lifecycle: ``start()`` once, feed frames with ``submit_audio_frame``,
    optionally ``end_stream()``, then ``stop()``.
    """

    def __init__(
        self,
        room_id: str,
        *,
        transcoder: Transcoder,
        transcription_engine: TranscriptionEngine,
        translation_engine: TranslationEngine,
        glossary: GlossaryStore,
        broadcast: BroadcastFn,
        sample_rate: int,
        chunk_duration_ms: int,
        target_language: str,
        ordered: bool = False,
    ):
        self.room_id = room_id
        self._broadcast = broadcast

        self.chunk_queue: "asyncio.Queue[Optional[AudioChunk]]" = asyncio.Queue()
        self.result_queue: "asyncio.Queue[Optional[PipelineResult]]" = asyncio.Queue()

        self.accumulator = ChunkAccumulator(
            sample_rate=sample_rate,
            chunk_duration_ms=chunk_duration_ms,
            on_chunk_ready=self.chunk_queue.put_nowait,
        )
        self.controller = PipelineController(
            transcoder=transcoder,
            transcription_engine=transcription_engine,
            translation_engine=translation_engine,
            glossary=glossary,
            chunk_queue=self.chunk_queue,
            result_queue=self.result_queue,
            target_language=target_language,
            reorder_buffer=SequenceReorderBuffer() if ordered else None,
        )

        self._controller_task: Optional[asyncio.Task] = None
        self._fanout_task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._controller_task is not None and not self._controller_task.done()

    async def start(self) -> None:
        if self._controller_task is not None:
            logger.warning(f"MeetingPipeline {self.room_id} already running")
            return

        self._controller_task = asyncio.create_task(self.controller.run())
        self._fanout_task = asyncio.create_task(self._fanout_loop())
        logger.info(
            f"Started MeetingPipeline for room {self.room_id} "
            f"({self.accumulator.sample_rate}Hz, {self.accumulator.threshold_samples} samples/chunk)"
        )

    def submit_audio_frame(self, frame) -> int:
        """Feed one host frame. Returns the number of chunks it completed."""
        return len(self.accumulator.submit_audio_frame(frame))

    def end_stream(self, flush: bool) -> Optional[AudioChunk]:
        """
        Mark the end of the host's audio stream.

        Args:
            flush: Emit the trailing partial chunk instead of dropping it
        """
        if flush:
            return self.accumulator.drain()
        self.accumulator.discard()
        return None

    async def stop(self, timeout: float = PIPELINE_SHUTDOWN_TIMEOUT_SEC) -> None:
        """
        Let in-flight chunks finish and fan out, then stop both tasks.

        Chunks still running after ``timeout`` are cancelled and their
        captions are not delivered.
        """
        if self._controller_task is None:
            return

        await self.chunk_queue.put(None)
        done, _ = await asyncio.wait({self._controller_task}, timeout=timeout)
        if not done:
            cancelled = await self.controller.cancel_in_flight()
            logger.warning(
                f"MeetingPipeline {self.room_id} stop timed out, "
                f"dropped {cancelled} unfinished chunk(s)"
            )
            # join() still releases results held back for ordering
            await self._controller_task

        await self.result_queue.put(None)
        if self._fanout_task is not None:
            await self._fanout_task

        logger.info(f"MeetingPipeline {self.room_id} stopped")

    async def _fanout_loop(self) -> None:
        while True:
            result = await self.result_queue.get()
            if result is None:
                return
            try:
                await self.fan_out(result)
            except Exception:
                logger.exception(f"[FanOut] Failed to broadcast chunk #{result.sequence}")

    async def fan_out(self, result: PipelineResult) -> None:
        """Send the audio and caption events for one chunk to the room."""
        audio = AudioStreamPayload.from_result(result)
        caption = CaptionPayload.from_result(result)

        await self._broadcast(self.room_id, EVENT_AUDIO_STREAM, audio.model_dump())
        sent = await self._broadcast(self.room_id, EVENT_TRANSLATED_CAPTION, caption.model_dump())
        logger.debug(f"[FanOut] Chunk #{result.sequence} delivered to {sent} member(s)")


@functools.lru_cache(maxsize=1)
def _get_engines() -> Tuple[OpenAITranscriptionEngine, OpenAITranslationEngine]:
    return OpenAITranscriptionEngine(), OpenAITranslationEngine()


def build_meeting_pipeline(
    room_id: str,
    sample_rate: int,
    glossary: GlossaryStore,
    broadcast: BroadcastFn,
) -> MeetingPipeline:
    """Build a room pipeline from application settings."""
    transcription_engine, translation_engine = _get_engines()
    return MeetingPipeline(
        room_id,
        transcoder=build_transcoder(settings),
        transcription_engine=transcription_engine,
        translation_engine=translation_engine,
        glossary=glossary,
        broadcast=broadcast,
        sample_rate=sample_rate,
        chunk_duration_ms=settings.CHUNK_DURATION_MS,
        target_language=settings.TARGET_LANGUAGE,
        ordered=settings.ORDERED_FANOUT,
    )
