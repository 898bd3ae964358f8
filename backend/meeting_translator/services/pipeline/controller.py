"""
Pipeline Controller - Per-chunk transcription and translation.

Consumes AudioChunks from a queue and runs, for each chunk, an
independent asyncio task:

    transcode -> transcribe -> filter -> translate

then hands a PipelineResult to the result queue for fan-out. Chunks run
concurrently; a failure or a hung engine call affects only its own
chunk. Each failed stage degrades to an empty string and is logged.

Usage:
    from meeting_translator.services.pipeline.controller import PipelineController

    controller = PipelineController(
        transcoder=transcoder,
        transcription_engine=stt,
        translation_engine=translator,
        glossary=glossary_store,
        chunk_queue=chunk_queue,
        result_queue=result_queue,
        target_language="Vietnamese",
    )
    task = asyncio.create_task(controller.run())
    ...
    await chunk_queue.put(None)  # Stop after in-flight chunks finish
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, Set, TypeVar

from meeting_translator.services.exceptions import EngineError, ProcessError
from meeting_translator.services.filtering.admissibility import AdmissibilityVerdict, evaluate
from meeting_translator.services.glossary.store import GlossaryStore
from meeting_translator.services.metrics import chunks_in_flight, chunks_processed, stage_latency
from meeting_translator.services.pipeline.models import (
    AudioChunk,
    PipelineResult,
    TranscriptResult,
    TranslationResult,
)
from meeting_translator.services.pipeline.reorder import SequenceReorderBuffer
from meeting_translator.services.protocols import Transcoder, TranscriptionEngine, TranslationEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PipelineController:
    """
    Drives the caption pipeline for every emitted chunk.

    The controller holds no transport reference: input arrives on
    ``chunk_queue`` and results leave on ``result_queue``. The only
    shared state it reads is the glossary store, sampled once per
    translate stage.

    Attributes:
        target_language: Language passed to the translation engine
        reorder_buffer: When set, results are released in sequence order
    """

    def __init__(
        self,
        transcoder: Transcoder,
        transcription_engine: TranscriptionEngine,
        translation_engine: TranslationEngine,
        glossary: GlossaryStore,
        chunk_queue: "asyncio.Queue[Optional[AudioChunk]]",
        result_queue: "asyncio.Queue[Optional[PipelineResult]]",
        target_language: str,
        admissibility: Callable[[str], AdmissibilityVerdict] = evaluate,
        reorder_buffer: Optional[SequenceReorderBuffer] = None,
    ):
        self._transcoder = transcoder
        self._transcription_engine = transcription_engine
        self._translation_engine = translation_engine
        self._glossary = glossary
        self._chunk_queue = chunk_queue
        self._result_queue = result_queue
        self._admissibility = admissibility
        self.target_language = target_language
        self.reorder_buffer = reorder_buffer

        self._in_flight: Set[asyncio.Task] = set()

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)

    # === Queue consumption ===

    async def run(self) -> None:
        """
        Consume the chunk queue until a ``None`` sentinel arrives, then
        wait for in-flight chunks to finish.
        """
        logger.info(f"[PipelineController] Started (target: {self.target_language})")
        try:
            while True:
                chunk = await self._chunk_queue.get()
                if chunk is None:
                    break
                self.submit(chunk)
            await self.join()
        finally:
            logger.info("[PipelineController] Stopped")

    def submit(self, chunk: AudioChunk) -> asyncio.Task:
        """Start an independent pipeline task for ``chunk``."""
        task = asyncio.create_task(
            self._run_chunk(chunk), name=f"pipeline-chunk-{chunk.sequence}"
        )
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def join(self) -> None:
        """Wait for every in-flight chunk, then release any held results."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

        if self.reorder_buffer is not None:
            for result in self.reorder_buffer.flush():
                await self._result_queue.put(result)

    async def cancel_in_flight(self) -> int:
        """Cancel running chunk tasks and wait for them to unwind. Returns how many were cancelled."""
        pending = [task for task in self._in_flight if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        return len(pending)

    async def _run_chunk(self, chunk: AudioChunk) -> None:
        chunks_in_flight.inc()
        try:
            result = await self.process_chunk(chunk)
        finally:
            chunks_in_flight.dec()
        await self._publish(result)

    async def _publish(self, result: PipelineResult) -> None:
        if self.reorder_buffer is None:
            await self._result_queue.put(result)
            return

        for ready in self.reorder_buffer.push(result):
            await self._result_queue.put(ready)

    # === Pipeline ===

    async def process_chunk(self, chunk: AudioChunk) -> PipelineResult:
        """
        Run all four stages for one chunk. Never raises for stage failures.

        Returns:
            PipelineResult carrying the original chunk, the raw transcript
            (forwarded even when filtered) and the translation ("" when
            filtered or failed)
        """
        started = time.perf_counter()
        sequence = chunk.sequence
        failed = False

        # 1. Transcode
        waveform = await self._run_stage(
            "transcode", sequence,
            lambda: self._transcoder.transcode(chunk.to_bytes(), chunk.sample_rate),
        )

        # 2. Transcribe
        text: Optional[str] = None
        if waveform is not None:
            text = await self._run_stage(
                "transcribe", sequence,
                lambda: self._transcription_engine.transcribe(waveform),
            )
        if text is None:
            failed = True
            text = ""
        text = text.strip()

        # 3. Filter
        verdict = self._admissibility(text)
        transcript = TranscriptResult(
            chunk_sequence=sequence,
            text=text,
            is_admissible=verdict.admissible,
        )

        # 4. Translate
        translated = ""
        if verdict.admissible:
            glossary = self._glossary.snapshot()
            translated = await self._run_stage(
                "translate", sequence,
                lambda: self._translation_engine.translate(
                    text,
                    glossary.instruction,
                    self.target_language,
                    deterministic=True,
                ),
            )
            if translated is None:
                failed = True
                translated = ""
        elif not failed:
            logger.warning(
                f"[PipelineController] Chunk #{sequence} filtered inadmissible "
                f"transcription ({verdict.rule}): {text!r}"
            )

        translation = TranslationResult(
            chunk_sequence=sequence,
            source_text=text,
            translated_text=translated,
            timestamp=chunk.captured_at,
        )

        elapsed = time.perf_counter() - started
        stage_latency.labels(component="total").observe(elapsed)
        if failed:
            status = "failed"
        elif verdict.admissible:
            status = "translated"
        else:
            status = "filtered"
        chunks_processed.labels(status=status).inc()

        logger.info(
            f"[PipelineController] Chunk #{sequence} {status} in {elapsed:.2f}s: "
            f"{text!r} -> {translated!r}"
        )

        return PipelineResult(chunk=chunk, transcript=transcript, translation=translation)

    async def _run_stage(
        self,
        component: str,
        sequence: int,
        call: Callable[[], Awaitable[T]],
    ) -> Optional[T]:
        """Await one stage; on failure log it and return None."""
        started = time.perf_counter()
        try:
            return await call()
        except ProcessError as e:
            logger.error(
                f"[PipelineController] Chunk #{sequence} {component} process failed "
                f"(code {e.returncode}): {e.stderr or e}"
            )
        except EngineError as e:
            logger.error(f"[PipelineController] Chunk #{sequence} {component} engine error: {e}")
        except Exception:
            logger.exception(f"[PipelineController] Chunk #{sequence} {component} crashed")
        finally:
            stage_latency.labels(component=component).observe(time.perf_counter() - started)
        return None
