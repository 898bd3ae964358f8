"""
Sequence Reorder Buffer

Optional fan-out stage that releases pipeline results strictly in chunk
sequence order. Without it, results fan out in completion order and a
slow chunk can be overtaken by the next one.

With it, one slow chunk holds back every later caption until it
completes, and held results accumulate meanwhile. The hold is bounded
by the stage deadlines: the engine client timeout and the ffmpeg
transcode timeout. A hung chunk that outlives them degrades to an empty
caption and releases the queue. Pipeline shutdown flushes whatever is
still held.
"""

import logging
from typing import Dict, List

from meeting_translator.services.pipeline.models import PipelineResult

logger = logging.getLogger(__name__)


class SequenceReorderBuffer:
    """Holds early results until every lower sequence has been released."""

    def __init__(self, first_sequence: int = 0):
        self._next_sequence = first_sequence
        self._pending: Dict[int, PipelineResult] = {}

    @property
    def next_sequence(self) -> int:
        return self._next_sequence

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def push(self, result: PipelineResult) -> List[PipelineResult]:
        """
        Accept one completed result.

        Returns:
            Results now releasable, in sequence order (possibly empty)
        """
        sequence = result.sequence
        if sequence < self._next_sequence:
            logger.warning(
                f"[ReorderBuffer] Chunk #{sequence} arrived after #{self._next_sequence - 1} "
                f"was released; passing it through"
            )
            return [result]

        self._pending[sequence] = result

        ready = []
        while self._next_sequence in self._pending:
            ready.append(self._pending.pop(self._next_sequence))
            self._next_sequence += 1
        return ready

    def flush(self) -> List[PipelineResult]:
        """Release everything still held, lowest sequence first."""
        ready = [self._pending[seq] for seq in sorted(self._pending)]
        self._pending.clear()
        if ready:
            self._next_sequence = ready[-1].sequence + 1
        return ready
