"""Note ORM model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, FetchedValue, Index, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY, TSVECTOR, UUID
from sqlalchemy.orm import Mapped, mapped_column

from notehub.db import Base


class Note(Base):
    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    subject: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    university: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    tags: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, server_default="{}")
    content_ref: Mapped[str] = mapped_column(Text, nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    # visibility: public | private
    visibility: Mapped[str] = mapped_column(Text, nullable=False, server_default="public")
    comments_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="true")
    upvote_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    downvote_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    created_at: Mapped[datetime] = mapped_column(nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(nullable=False, server_default=func.now())
    # search_vector is owned by a trigger installed in create_tables();
    # never include in INSERT/UPDATE.
    search_vector: Mapped[str | None] = mapped_column(
        TSVECTOR, nullable=True, server_default=FetchedValue()
    )

    __table_args__ = (
        CheckConstraint("upvote_count >= 0", name="ck_notes_upvote_count_non_negative"),
        CheckConstraint("downvote_count >= 0", name="ck_notes_downvote_count_non_negative"),
        CheckConstraint("visibility IN ('public', 'private')", name="ck_notes_visibility"),
        Index("idx_notes_search", "search_vector", postgresql_using="gin"),
        Index("idx_notes_owner_created", "owner_id", "created_at"),
    )
