"""Pydantic schemas for Note endpoints."""

import uuid
from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, field_validator

from notehub.services.types import Visibility, VoteChoice


def split_tags(value: object) -> list[str]:
    """Accept a list or a comma-separated string; trim and drop empty tags."""
    if value is None or value == "":
        return []
    if isinstance(value, str):
        items: list[object] = list(value.split(","))
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        raise ValueError("tags must be a list or a comma-separated string")
    return [str(t).strip() for t in items if str(t).strip()]


class NoteCreateRequest(BaseModel):
    title: str
    subject: str
    university: str
    content_ref: str = Field(..., description="URL or storage key of the uploaded document")
    tags: list[str] = Field(default_factory=list)
    visibility: Visibility = "public"
    comments_enabled: bool = True

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, v: object) -> list[str]:
        return split_tags(v)


class NoteUpdateRequest(BaseModel):
    """Partial update; fields left as None are unchanged."""

    title: str | None = None
    subject: str | None = None
    university: str | None = None
    content_ref: str | None = None
    tags: list[str] | None = None
    visibility: Visibility | None = None
    comments_enabled: bool | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, v: object) -> list[str] | None:
        if v is None:
            return None
        return split_tags(v)


class NoteSummary(BaseModel):
    id: uuid.UUID
    title: str
    subject: str
    university: str
    tags: list[str]
    owner_id: uuid.UUID
    visibility: Visibility
    comments_enabled: bool
    upvotes: int = Field(validation_alias=AliasChoices("upvote_count", "upvotes"))
    downvotes: int = Field(validation_alias=AliasChoices("downvote_count", "downvotes"))
    created_at: datetime

    model_config = {"from_attributes": True}


class NoteDetail(NoteSummary):
    content_ref: str
    updated_at: datetime
    viewer_vote: VoteChoice | None = None


class NoteListResponse(BaseModel):
    items: list[NoteSummary]
    total: int
    page: int
    page_size: int
    page_count: int


class VoteRequest(BaseModel):
    choice: VoteChoice


class VoteResponse(BaseModel):
    upvotes: int
    downvotes: int


class BookmarkToggleResponse(BaseModel):
    bookmarked: bool


class FacetsResponse(BaseModel):
    subjects: list[str]
    universities: list[str]
    tags: list[str]

