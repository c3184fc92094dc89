"""Pydantic schemas for comment endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel


class CommentCreateRequest(BaseModel):
    text: str


class CommentResponse(BaseModel):
    id: uuid.UUID
    note_id: uuid.UUID
    author_id: uuid.UUID
    text: str
    created_at: datetime

    model_config = {"from_attributes": True}
