"""Bookmarks API router, mounted under /notes."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from notehub.api.deps import require_user_id
from notehub.db import get_session
from notehub.schemas.note import BookmarkToggleResponse, NoteSummary
from notehub.services.bookmarks import BookmarkService

router = APIRouter()


@router.get("/bookmarks/me")
def list_bookmarks(
    user_id: uuid.UUID = Depends(require_user_id),
    db: Session = Depends(get_session),
) -> dict[str, list[NoteSummary]]:
    notes = BookmarkService().list_for_user(user_id, db)
    return {"notes": [NoteSummary.model_validate(n) for n in notes]}


@router.post("/{note_id}/bookmark")
def toggle_bookmark(
    note_id: uuid.UUID,
    user_id: uuid.UUID = Depends(require_user_id),
    db: Session = Depends(get_session),
) -> BookmarkToggleResponse:
    bookmarked = BookmarkService().toggle(user_id, note_id, db)
    return BookmarkToggleResponse(bookmarked=bookmarked)
