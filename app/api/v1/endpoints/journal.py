"""
Journal endpoints.

Every handler here depends on get_current_identity. Reads and writes are
scoped to the subject id from the verified token; no endpoint accepts a
user id from the client.
"""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse

from app.auth.dependencies import get_current_identity, get_journal_store
from app.auth.jwt import SessionClaims
from app.core.exceptions import StoreError
from app.core.store import SqlJournalStore
from app.schemas.auth import MessageResponse
from app.schemas.journal import JournalEntryResponse

logger = logging.getLogger(__name__)

router = APIRouter()

JOURNAL_PAGE = "/journal.html"
PROTECTED_PAGE = "entry2.html"


@router.api_route("/entry2.html", methods=["GET", "HEAD"], include_in_schema=False)
async def entry_page(
    request: Request,
    identity: SessionClaims = Depends(get_current_identity),
):
    """Serve the protected entry page."""
    page = request.app.state.settings.static_dir / PROTECTED_PAGE
    if not page.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return FileResponse(page)


@router.get("/get-entries", response_model=List[JournalEntryResponse])
async def get_entries(
    identity: SessionClaims = Depends(get_current_identity),
    store: SqlJournalStore = Depends(get_journal_store),
):
    """List the caller's journal entries, newest first."""
    try:
        entries = await store.list_entries(identity.user_id)
    except StoreError as e:
        logger.error("Error fetching journal entries: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching journal entries.",
        )
    return [JournalEntryResponse.model_validate(e) for e in entries]


@router.post("/submit-entry")
async def submit_entry(
    title: Annotated[Optional[str], Form()] = None,
    entry: Annotated[Optional[str], Form()] = None,
    score: Annotated[Optional[int], Form()] = None,
    mood: Annotated[Optional[str], Form()] = None,
    identity: SessionClaims = Depends(get_current_identity),
    store: SqlJournalStore = Depends(get_journal_store),
):
    """Save a journal entry for the caller and redirect to the journal page."""
    if not title or not entry or score is None or not mood:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=MessageResponse(message="All fields are required.").model_dump(),
        )

    try:
        saved = await store.add_entry(
            user_id=identity.user_id,
            title=title,
            entry=entry,
            score=score,
            mood=mood,
        )
    except StoreError as e:
        logger.error("Error saving journal entry: %s", e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=MessageResponse(message="Error saving journal entry.").model_dump(),
        )

    logger.info("Journal entry %s saved for user %s", saved.id, identity.user_id)
    return RedirectResponse(JOURNAL_PAGE, status_code=status.HTTP_303_SEE_OTHER)
