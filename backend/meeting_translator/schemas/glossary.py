"""
Glossary Schemas

Request/response models for glossary upload.
"""

from typing import Optional

from pydantic import BaseModel


class GlossaryUploadRequest(BaseModel):
    csv: Optional[str] = None


class GlossaryUploadResponse(BaseModel):
    message: str
    version: int
    entries: int
