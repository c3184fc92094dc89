"""Shared pytest fixtures."""

import uuid
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest


def make_note(**overrides: object) -> SimpleNamespace:
    """A stand-in for a Note row with every field the schemas read."""
    fields: dict[str, object] = {
        "id": uuid.uuid4(),
        "title": "Linear Algebra Notes",
        "subject": "Mathematics",
        "university": "MIT",
        "tags": ["matrices", "eigenvalues"],
        "content_ref": "https://files.example.com/notes/la.pdf",
        "owner_id": uuid.uuid4(),
        "visibility": "public",
        "comments_enabled": True,
        "upvote_count": 0,
        "downvote_count": 0,
        "created_at": datetime(2026, 1, 1, 12, 0, 0),
        "updated_at": datetime(2026, 1, 1, 12, 0, 0),
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_comment(**overrides: object) -> SimpleNamespace:
    fields: dict[str, object] = {
        "id": uuid.uuid4(),
        "note_id": uuid.uuid4(),
        "author_id": uuid.uuid4(),
        "text": "Great summary",
        "created_at": datetime(2026, 1, 2, 9, 30, 0),
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


@pytest.fixture()
def db_session() -> MagicMock:
    """Mock database session for unit tests."""
    return MagicMock()
