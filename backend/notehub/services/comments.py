"""Comments service: add, list and remove comments on a note."""

import logging
import uuid

from sqlalchemy.orm import Session

from notehub.models.comment import Comment
from notehub.models.note import Note
from notehub.services.errors import ForbiddenError, InvalidInputError, NotFoundError
from notehub.services.policy import can_delete_comment, can_read

logger = logging.getLogger(__name__)


class CommentService:
    def _readable_note(self, note_id: uuid.UUID, viewer_id: uuid.UUID | None, db: Session) -> Note:
        note = db.query(Note).filter(Note.id == note_id).first()
        if note is None:
            raise NotFoundError(f"Note {note_id} not found")
        if not can_read(note, viewer_id):
            raise ForbiddenError("This note is private")
        return note

    def add(self, note_id: uuid.UUID, author_id: uuid.UUID, text: str, db: Session) -> Comment:
        """Append a comment; raise ForbiddenError when comments are disabled."""
        note = self._readable_note(note_id, author_id, db)
        if not note.comments_enabled:
            raise ForbiddenError("Comments are disabled for this note")
        body = (text or "").strip()
        if not body:
            raise InvalidInputError("Comment text required")

        comment = Comment(note_id=note_id, author_id=author_id, text=body)
        db.add(comment)
        db.commit()
        db.refresh(comment)
        return comment

    def list_for_note(
        self, note_id: uuid.UUID, viewer_id: uuid.UUID | None, db: Session
    ) -> list[Comment]:
        """Return the note's comments, newest first.

        Disabling comments only blocks new ones; existing comments stay listed.
        """
        self._readable_note(note_id, viewer_id, db)
        return (
            db.query(Comment)
            .filter(Comment.note_id == note_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .all()
        )

    def remove(
        self, note_id: uuid.UUID, comment_id: uuid.UUID, requester_id: uuid.UUID, db: Session
    ) -> None:
        """Delete a comment if *requester_id* wrote it or owns the note."""
        comment = (
            db.query(Comment)
            .filter(Comment.id == comment_id, Comment.note_id == note_id)
            .first()
        )
        if comment is None:
            raise NotFoundError(f"Comment {comment_id} not found")
        note = db.query(Note).filter(Note.id == note_id).first()
        if note is None:
            raise NotFoundError(f"Note {note_id} not found")
        if not can_delete_comment(comment, note, requester_id):
            raise ForbiddenError("You cannot delete this comment")

        db.delete(comment)
        db.commit()
        logger.info("Comment %s on note %s deleted by %s", comment_id, note_id, requester_id)
