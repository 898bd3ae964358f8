"""
Glossary Module

- Resolver: CSV parsing and engine instruction rendering
- Store: the single active glossary table
"""

from meeting_translator.services.glossary.resolver import parse_glossary_csv, render_instruction
from meeting_translator.services.glossary.store import GlossarySnapshot, GlossaryStore

__all__ = [
    "parse_glossary_csv",
    "render_instruction",
    "GlossarySnapshot",
    "GlossaryStore",
]
