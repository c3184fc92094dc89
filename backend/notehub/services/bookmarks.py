"""Bookmarks service: a per-user saved set of notes, exposed as a toggle."""

import uuid

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from notehub.models.bookmark import Bookmark
from notehub.models.note import Note
from notehub.services.policy import visible_to


class BookmarkService:
    def toggle(self, user_id: uuid.UUID, note_id: uuid.UUID, db: Session) -> bool:
        """Flip membership of *note_id* in the user's bookmarks.

        Returns True when the note is bookmarked afterwards. The note is not
        required to exist.
        """
        removed: int = (
            db.query(Bookmark)
            .filter(Bookmark.user_id == user_id, Bookmark.note_id == note_id)
            .delete(synchronize_session=False)
        )
        if removed:
            db.commit()
            return False

        inserted = db.execute(
            insert(Bookmark)
            .values(user_id=user_id, note_id=note_id)
            .on_conflict_do_nothing(index_elements=["user_id", "note_id"])
            .returning(Bookmark.note_id)
        ).first()
        if inserted is None:
            # A concurrent toggle added the row between our delete and insert;
            # this toggle takes it back out.
            db.query(Bookmark).filter(
                Bookmark.user_id == user_id, Bookmark.note_id == note_id
            ).delete(synchronize_session=False)
            db.commit()
            return False
        db.commit()
        return True

    def list_for_user(self, user_id: uuid.UUID, db: Session) -> list[Note]:
        """Return the user's bookmarked notes, most recently saved first.

        The inner join drops bookmarks whose note has since been deleted, and
        notes that turned private under another owner are filtered out.
        """
        return (
            db.query(Note)
            .join(Bookmark, Bookmark.note_id == Note.id)
            .filter(Bookmark.user_id == user_id, visible_to(user_id))
            .order_by(Bookmark.created_at.desc())
            .all()
        )
