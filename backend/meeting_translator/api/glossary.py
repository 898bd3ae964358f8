"""
Glossary API - Host-supplied term substitutions

Endpoints for:
- Uploading a glossary CSV (replaces the active table)
- Fetching the stored CSV
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse

from meeting_translator.api.deps import get_session_directory
from meeting_translator.schemas.glossary import GlossaryUploadRequest, GlossaryUploadResponse
from meeting_translator.services.session import SessionDirectory

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload-glossary", response_model=GlossaryUploadResponse)
async def upload_glossary(
    request: GlossaryUploadRequest,
    directory: SessionDirectory = Depends(get_session_directory),
):
    """Replace the active glossary with the uploaded CSV."""
    if not request.csv or not request.csv.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No CSV provided")

    snapshot = directory.glossary.replace(request.csv)
    return GlossaryUploadResponse(
        message="Glossary uploaded",
        version=snapshot.version,
        entries=len(snapshot),
    )


@router.get("/glossary", response_class=PlainTextResponse)
async def get_glossary(directory: SessionDirectory = Depends(get_session_directory)):
    """Return the stored glossary CSV as uploaded."""
    snapshot = directory.glossary.snapshot()
    if snapshot.raw_csv is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No glossary uploaded")
    return PlainTextResponse(snapshot.raw_csv, media_type="text/csv")
