from fastapi import APIRouter

from meeting_translator.api import glossary

router = APIRouter()

router.include_router(glossary.router)
