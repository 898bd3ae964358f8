"""
Transcript Filtering Module

- Admissibility filter: rejects silence artifacts and engine hallucinations
"""

from meeting_translator.services.filtering.admissibility import (
    INADMISSIBLE_PATTERNS,
    AdmissibilityVerdict,
    evaluate,
    is_admissible,
)

__all__ = [
    "INADMISSIBLE_PATTERNS",
    "AdmissibilityVerdict",
    "evaluate",
    "is_admissible",
]
