"""Visibility and ownership rules for notes and comments.

Everything here is a pure predicate: no database access, no side effects.
``visible_to`` is the SQL form of ``can_read`` and is embedded into every
listing query so that no combination of filters can surface a note the
viewer is not allowed to read.
"""

import uuid

from sqlalchemy import ColumnElement, or_

from notehub.models.comment import Comment
from notehub.models.note import Note


def can_read(note: Note, viewer_id: uuid.UUID | None) -> bool:
    """Public notes are readable by anyone; private ones only by their owner."""
    if note.visibility == "public":
        return True
    return viewer_id is not None and note.owner_id == viewer_id


def visible_to(viewer_id: uuid.UUID | None) -> ColumnElement[bool]:
    if viewer_id is None:
        return Note.visibility == "public"
    return or_(Note.visibility == "public", Note.owner_id == viewer_id)


def is_note_owner(note: Note, user_id: uuid.UUID | None) -> bool:
    return user_id is not None and note.owner_id == user_id


def is_comment_author(comment: Comment, user_id: uuid.UUID | None) -> bool:
    return user_id is not None and comment.author_id == user_id


def can_delete_comment(comment: Comment, note: Note, user_id: uuid.UUID | None) -> bool:
    # Either the comment's author or the owner of the note it sits on.
    return is_comment_author(comment, user_id) or is_note_owner(note, user_id)
