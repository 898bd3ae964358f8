"""
Glossary Resolver - CSV term tables to translation-engine instructions.

The host uploads a two-column CSV (header row, then source,target rows).
Rows missing either term are skipped; duplicate source terms keep the
last translation seen.

Usage:
    from meeting_translator.services.glossary.resolver import parse_glossary_csv, render_instruction

    mapping = parse_glossary_csv("en,vn\\nhello,xin chao")
    render_instruction(mapping)  # '"hello" → "xin chao"'
"""

import csv
import io
import logging
from typing import Dict, List, Mapping, Optional

from meeting_translator.services.exceptions import MalformedInputError

logger = logging.getLogger(__name__)


def _parse_row(row: List[str], line_number: int) -> tuple[str, str]:
    if len(row) < 2:
        raise MalformedInputError(f"Line {line_number}: expected 2 columns, got {len(row)}")

    source, target = row[0].strip(), row[1].strip()
    if not source or not target:
        raise MalformedInputError(f"Line {line_number}: empty source or target term")

    return source, target


def parse_glossary_csv(raw_csv: Optional[str]) -> Dict[str, str]:
    """
    Parse raw CSV text into a term -> translation mapping.

    The first row is a header and is ignored. Blank and malformed rows
    are skipped silently.
    """
    if not raw_csv or not raw_csv.strip():
        return {}

    # Excel for Mac exports CR-only line endings
    normalized = raw_csv.replace("\r\n", "\n").replace("\r", "\n").strip()
    reader = csv.reader(io.StringIO(normalized, newline=""))
    glossary: Dict[str, str] = {}
    skipped = 0
    line_number = 0

    while True:
        line_number += 1
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as e:
            skipped += 1
            logger.debug(f"[GlossaryResolver] Skipping unreadable line {line_number}: {e}")
            continue

        if line_number == 1:
            continue
        try:
            source, target = _parse_row(row, line_number)
        except MalformedInputError as e:
            skipped += 1
            logger.debug(f"[GlossaryResolver] Skipping row: {e}")
            continue
        glossary[source] = target

    if skipped:
        logger.info(f"[GlossaryResolver] Skipped {skipped} malformed row(s)")

    return glossary


def render_instruction(glossary: Mapping[str, str]) -> str:
    """Render the mapping as comma-joined ``"source" → "target"`` pairs."""
    return ", ".join(f'"{source}" → "{target}"' for source, target in glossary.items())
