"""Unit tests for CommentService."""

import uuid
from unittest.mock import MagicMock

import pytest
from conftest import make_comment, make_note

from notehub.models.comment import Comment
from notehub.services.comments import CommentService
from notehub.services.errors import ForbiddenError, InvalidInputError, NotFoundError


def _db_with_first(*results: object) -> MagicMock:
    db = MagicMock()
    db.query.return_value.filter.return_value.first.side_effect = list(results)
    return db


class TestCommentServiceAdd:
    def test_persists_trimmed_comment(self) -> None:
        note = make_note()
        author = uuid.uuid4()
        db = _db_with_first(note)

        comment = CommentService().add(note.id, author, "  nice work  ", db)

        assert isinstance(comment, Comment)
        assert comment.text == "nice work"
        assert comment.author_id == author
        assert comment.note_id == note.id
        db.add.assert_called_once_with(comment)
        db.commit.assert_called_once()

    def test_forbidden_when_comments_disabled_even_for_owner(self) -> None:
        owner = uuid.uuid4()
        note = make_note(owner_id=owner, comments_enabled=False)
        db = _db_with_first(note)

        with pytest.raises(ForbiddenError):
            CommentService().add(note.id, owner, "hello", db)
        db.add.assert_not_called()

    def test_rejects_blank_text(self) -> None:
        note = make_note()
        db = _db_with_first(note)

        with pytest.raises(InvalidInputError):
            CommentService().add(note.id, uuid.uuid4(), "   ", db)
        db.commit.assert_not_called()

    def test_not_found_for_missing_note(self) -> None:
        db = _db_with_first(None)
        with pytest.raises(NotFoundError):
            CommentService().add(uuid.uuid4(), uuid.uuid4(), "hello", db)

    def test_forbidden_on_someone_elses_private_note(self) -> None:
        db = _db_with_first(make_note(visibility="private"))
        with pytest.raises(ForbiddenError):
            CommentService().add(uuid.uuid4(), uuid.uuid4(), "hello", db)


class TestCommentServiceList:
    def test_lists_even_when_comments_disabled(self) -> None:
        note = make_note(comments_enabled=False)
        comments = [make_comment(note_id=note.id), make_comment(note_id=note.id)]
        db = _db_with_first(note)
        db.query.return_value.filter.return_value.order_by.return_value.all.return_value = comments

        result = CommentService().list_for_note(note.id, None, db)

        assert result == comments

    def test_orders_newest_first(self) -> None:
        note = make_note()
        db = _db_with_first(note)

        CommentService().list_for_note(note.id, None, db)

        order_args = db.query.return_value.filter.return_value.order_by.call_args.args
        assert str(order_args[0]) == "comments.created_at DESC"

    def test_guest_cannot_list_private_note_comments(self) -> None:
        db = _db_with_first(make_note(visibility="private"))
        with pytest.raises(ForbiddenError):
            CommentService().list_for_note(uuid.uuid4(), None, db)


class TestCommentServiceRemove:
    def test_author_can_delete(self) -> None:
        author = uuid.uuid4()
        note = make_note()
        comment = make_comment(note_id=note.id, author_id=author)
        db = _db_with_first(comment, note)

        CommentService().remove(note.id, comment.id, author, db)

        db.delete.assert_called_once_with(comment)
        db.commit.assert_called_once()

    def test_note_owner_can_delete(self) -> None:
        owner = uuid.uuid4()
        note = make_note(owner_id=owner)
        comment = make_comment(note_id=note.id)
        db = _db_with_first(comment, note)

        CommentService().remove(note.id, comment.id, owner, db)

        db.delete.assert_called_once_with(comment)

    def test_third_party_is_forbidden(self) -> None:
        note = make_note()
        comment = make_comment(note_id=note.id)
        db = _db_with_first(comment, note)

        with pytest.raises(ForbiddenError):
            CommentService().remove(note.id, comment.id, uuid.uuid4(), db)
        db.delete.assert_not_called()

    def test_missing_comment_is_not_found(self) -> None:
        db = _db_with_first(None)
        with pytest.raises(NotFoundError):
            CommentService().remove(uuid.uuid4(), uuid.uuid4(), uuid.uuid4(), db)

    def test_missing_note_is_not_found(self) -> None:
        db = _db_with_first(make_comment(), None)
        with pytest.raises(NotFoundError):
            CommentService().remove(uuid.uuid4(), uuid.uuid4(), uuid.uuid4(), db)
