"""Notes service: fetch, edit and delete individual notes."""

import logging
import uuid
from datetime import datetime

from sqlalchemy.orm import Session

from notehub.models.comment import Comment
from notehub.models.note import Note
from notehub.models.vote import NoteVote
from notehub.schemas.note import NoteUpdateRequest
from notehub.services.errors import ForbiddenError, InvalidInputError, NotFoundError
from notehub.services.policy import can_read, is_note_owner

logger = logging.getLogger(__name__)

_REQUIRED_TEXT_FIELDS = ("title", "subject", "university", "content_ref")


class NotesService:
    def _find(self, note_id: uuid.UUID, db: Session) -> Note:
        note = db.query(Note).filter(Note.id == note_id).first()
        if note is None:
            raise NotFoundError(f"Note {note_id} not found")
        return note

    def _owned(self, note_id: uuid.UUID, requester_id: uuid.UUID, db: Session, action: str) -> Note:
        note = self._find(note_id, db)
        if not is_note_owner(note, requester_id):
            raise ForbiddenError(f"You cannot {action} this note")
        return note

    def get(self, note_id: uuid.UUID, viewer_id: uuid.UUID | None, db: Session) -> Note:
        """Return the note if *viewer_id* may read it.

        Raises NotFoundError for an unknown id and ForbiddenError for a private
        note the viewer does not own.
        """
        note = self._find(note_id, db)
        if not can_read(note, viewer_id):
            raise ForbiddenError("This note is private")
        return note

    def update(
        self, note_id: uuid.UUID, requester_id: uuid.UUID, changes: NoteUpdateRequest, db: Session
    ) -> Note:
        """Apply the non-null fields of *changes*; only the owner may edit."""
        note = self._owned(note_id, requester_id, db, "edit")

        for field in _REQUIRED_TEXT_FIELDS:
            value = getattr(changes, field)
            if value is None:
                continue
            cleaned = value.strip()
            if not cleaned:
                raise InvalidInputError(f"{field} cannot be blank")
            setattr(note, field, cleaned)
        if changes.tags is not None:
            note.tags = list(changes.tags)
        if changes.visibility is not None:
            note.visibility = changes.visibility
        if changes.comments_enabled is not None:
            note.comments_enabled = changes.comments_enabled

        note.updated_at = datetime.now()
        db.commit()
        db.refresh(note)
        return note

    def delete(self, note_id: uuid.UUID, requester_id: uuid.UUID, db: Session) -> None:
        """Delete the note with its votes and comments. Bookmarks are left stale."""
        note = self._owned(note_id, requester_id, db, "delete")
        db.query(NoteVote).filter(NoteVote.note_id == note.id).delete()
        db.query(Comment).filter(Comment.note_id == note.id).delete()
        db.delete(note)
        db.commit()
        logger.info("Note %s deleted by %s", note_id, requester_id)

    def list_owned(self, owner_id: uuid.UUID, db: Session) -> list[Note]:
        """All of the owner's notes, public and private, newest first."""
        return (
            db.query(Note)
            .filter(Note.owner_id == owner_id)
            .order_by(Note.created_at.desc())
            .all()
        )
