"""Note ingestion: daily upload quota and persistence of new notes."""

import logging
import os
import uuid
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from notehub.models.note import Note
from notehub.schemas.note import NoteCreateRequest
from notehub.services.errors import InvalidInputError, QuotaExceededError

logger = logging.getLogger(__name__)

DEFAULT_DAILY_LIMIT = 20


def daily_limit() -> int:
    return int(os.environ.get("NOTES_DAILY_UPLOAD_LIMIT", DEFAULT_DAILY_LIMIT))


def quota_window(now: datetime) -> tuple[datetime, datetime]:
    """Return the half-open calendar day ``[midnight, next midnight)`` containing *now*."""
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def _required(value: str, field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise InvalidInputError(f"{field} is required")
    return cleaned


class IngestionService:
    def __init__(self, limit: int | None = None) -> None:
        self._limit = limit if limit is not None else daily_limit()

    @property
    def limit(self) -> int:
        return self._limit

    def admit(self, owner_id: uuid.UUID, now: datetime, db: Session) -> None:
        """Raise QuotaExceededError if *owner_id* already uploaded the daily limit.

        Best-effort: the count and the later insert are separate statements,
        so concurrent uploads may overrun the limit slightly.
        """
        start, end = quota_window(now)
        count: int = (
            db.query(Note)
            .filter(Note.owner_id == owner_id, Note.created_at >= start, Note.created_at < end)
            .count()
        )
        if count >= self._limit:
            logger.info("Upload quota reached for user %s (%d/%d)", owner_id, count, self._limit)
            raise QuotaExceededError(self._limit)

    def ingest(
        self,
        request: NoteCreateRequest,
        owner_id: uuid.UUID,
        db: Session,
        now: datetime | None = None,
    ) -> Note:
        """Create a note owned by *owner_id*.

        Raises InvalidInputError for blank required fields and
        QuotaExceededError when the daily limit is hit (nothing is written).
        """
        title = _required(request.title, "title")
        subject = _required(request.subject, "subject")
        university = _required(request.university, "university")
        content_ref = _required(request.content_ref, "content_ref")

        now = now or datetime.now()
        self.admit(owner_id, now, db)

        note = Note(
            title=title,
            subject=subject,
            university=university,
            content_ref=content_ref,
            tags=list(request.tags),
            owner_id=owner_id,
            visibility=request.visibility,
            comments_enabled=request.comments_enabled,
            upvote_count=0,
            downvote_count=0,
            created_at=now,
            updated_at=now,
        )
        db.add(note)
        db.commit()
        db.refresh(note)
        logger.info("Note %s created by %s", note.id, owner_id)
        return note
