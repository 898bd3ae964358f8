"""
Glossary Store - Single-slot versioned glossary table.

Holds at most one glossary table. Each upload replaces the slot
wholesale; readers get an immutable snapshot.

There is no synchronization between writers and in-flight translations:
a translate stage running while a new table is uploaded may use either
the old or the new snapshot. Read-your-writes is not guaranteed.
"""

import logging
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from meeting_translator.services.glossary.resolver import parse_glossary_csv, render_instruction
from meeting_translator.services.metrics import glossary_uploads

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GlossarySnapshot:
    """
    Immutable view of one uploaded glossary table.

    Attributes:
        version: 0 for the empty initial table, then 1, 2, ...
        entries: Read-only term -> translation mapping
        instruction: Rendered engine instruction ("" when empty)
        raw_csv: The uploaded text, or None before any upload
    """
    version: int
    entries: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    instruction: str = ""
    raw_csv: Optional[str] = None
    uploaded_at: Optional[float] = None

    def __len__(self) -> int:
        return len(self.entries)


class GlossaryStore:
    """Versioned cell holding the active glossary snapshot."""

    def __init__(self):
        self._snapshot = GlossarySnapshot(version=0)

    def snapshot(self) -> GlossarySnapshot:
        return self._snapshot

    @property
    def has_upload(self) -> bool:
        return self._snapshot.raw_csv is not None

    def replace(self, raw_csv: str) -> GlossarySnapshot:
        """
        Parse ``raw_csv`` and swap it in as the active table.

        No merge with the previous table is performed.
        """
        entries = parse_glossary_csv(raw_csv)
        snapshot = GlossarySnapshot(
            version=self._snapshot.version + 1,
            entries=MappingProxyType(dict(entries)),
            instruction=render_instruction(entries),
            raw_csv=raw_csv,
            uploaded_at=time.time(),
        )
        self._snapshot = snapshot
        glossary_uploads.inc()

        logger.info(
            f"[GlossaryStore] Glossary v{snapshot.version} active "
            f"({len(snapshot)} entries)"
        )
        return snapshot
