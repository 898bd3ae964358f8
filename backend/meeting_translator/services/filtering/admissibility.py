"""
Admissibility Filter - Rejects low-value transcription text.

The transcription engine hallucinates boilerplate (sign-offs, outros,
URLs) and nonverbal tags when a chunk holds silence or noise. Text that
matches any rule below is not translated. Over-rejection is accepted:
a missed caption is less harmful than a garbage caption.

Usage:
    from meeting_translator.services.filtering import is_admissible

    if is_admissible(transcript):
        translation = await engine.translate(...)
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from meeting_translator.config.constants import MIN_ADMISSIBLE_TEXT_LENGTH

_I = re.IGNORECASE

_NONVERBAL = r"(music|applause|laughter|laughing|noise|static|crowd)"

# Emoticons, pictographs, transport, flags, supplemental symbols,
# misc symbols & dingbats, arrows/stars, variation selector
_EMOJI = (
    "["
    "\U0001F000-\U0001FAFF"
    "\u2600-\u27BF"
    "\u2B00-\u2BFF"
    "\u231A-\u231B"
    "\u23E9-\u23FA"
    "\uFE0F"
    "]"
)

# (rule name, pattern); any single match rejects the text
INADMISSIBLE_PATTERNS: List[Tuple[str, re.Pattern]] = [
    ("empty", re.compile(r"^\s*$")),

    ("filler", re.compile(r"^(you|okay|ok|yes|no|um+|hmm+|hi)[.!?]*$", _I)),

    ("sign_off", re.compile(r"^thank you[.!?]*$", _I)),
    ("sign_off", re.compile(
        r"^thank you for (joining us|watching|having me|listening)[.!?]*$", _I)),
    ("sign_off", re.compile(
        r"^thank you for joining us[.!?]* we'll see you next time[.!?]*$", _I)),
    ("sign_off", re.compile(r"^(excited!? )?thanks for watching[.!?]*$", _I)),
    ("sign_off", re.compile(r"^(bye|bye[-\s]?bye|goodbye)[.!?]*$", _I)),
    ("sign_off", re.compile(r"^see you( later| next time| soon)?[.!?]*$", _I)),

    ("outro", re.compile(r"^let me know in the comments what you think[.!?]*$", _I)),
    ("outro", re.compile(r"^transcribed by https?://\S+", _I)),
    ("outro", re.compile(r"subscribe", _I)),
    ("outro", re.compile(r"this podcast", _I)),
    ("outro", re.compile(r"visit our website", _I)),

    ("nonverbal", re.compile(r"[\[(<*♪][^\])>]*\b" + _NONVERBAL + r"\b", _I)),
    ("nonverbal", re.compile(r"^" + _NONVERBAL + r"[.!?]*$", _I)),

    ("url", re.compile(r"\bwww\.\S+", _I)),
    ("url", re.compile(r"\bhttps?://\S+", _I)),

    ("placeholder", re.compile(r"^\[.*\]$")),
    ("placeholder", re.compile(r"^\(.*\)$")),
    ("placeholder", re.compile(r"^<.*>$")),

    ("non_ascii_run", re.compile(r"[^\x00-\x7F]{3,}")),

    ("repetition", re.compile(r"\b(\w+)\b(?:\s+\1\b){2,}", _I)),

    ("single_letter", re.compile(r"^\s*[a-zA-Z]\s*$")),

    ("hallucination", re.compile(r"\b(and so on|etc)\b", _I)),
    ("hallucination", re.compile(r"(and then)\b.*\1", _I)),

    ("emoji", re.compile(_EMOJI)),
]


@dataclass(frozen=True)
class AdmissibilityVerdict:
    admissible: bool
    rule: Optional[str] = None


def evaluate(text: str) -> AdmissibilityVerdict:
    """
    Judge a transcript.

    Args:
        text: Raw transcript as returned by the engine

    Returns:
        Verdict with the first matching rule name when rejected
    """
    candidate = (text or "").strip()

    for rule, pattern in INADMISSIBLE_PATTERNS:
        if pattern.search(candidate):
            return AdmissibilityVerdict(admissible=False, rule=rule)

    if len(candidate) < MIN_ADMISSIBLE_TEXT_LENGTH:
        return AdmissibilityVerdict(admissible=False, rule="too_short")

    return AdmissibilityVerdict(admissible=True)


def is_admissible(text: str) -> bool:
    return evaluate(text).admissible
