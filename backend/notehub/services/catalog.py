"""Catalog service: the filtered, sorted and paginated note listing."""

import math
import os
import uuid

from sqlalchemy import ColumnElement, func, or_
from sqlalchemy.orm import Session

from notehub.db import full_text_ready
from notehub.models.note import Note
from notehub.services.policy import visible_to
from notehub.services.types import CatalogPage, SortMode, Visibility

PAGE_SIZE = 12
MAX_PAGE_SIZE = 100
# Keeps OFFSET well inside bigint range.
MAX_PAGE = 1_000_000

# Ties fall back to newest first, then id, so pages are stable.
_ORDERINGS = {
    "latest": (Note.created_at.desc(), Note.id.desc()),
    "top": (Note.upvote_count.desc(), Note.created_at.desc(), Note.id.desc()),
    "bottom": (Note.downvote_count.desc(), Note.created_at.desc(), Note.id.desc()),
}


def full_text_enabled() -> bool:
    return os.environ.get("NOTES_FULL_TEXT_SEARCH", "1").lower() not in ("0", "false", "no")


def normalise_paging(page: int | None, page_size: int | None) -> tuple[int, int]:
    """Clamp *page* to 1..MAX_PAGE and *page_size* to 1..MAX_PAGE_SIZE (default PAGE_SIZE)."""
    page = min(page, MAX_PAGE) if page and page >= 1 else 1
    page_size = page_size if page_size and page_size >= 1 else PAGE_SIZE
    return page, min(page_size, MAX_PAGE_SIZE)


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def substring_match(query: str) -> ColumnElement[bool]:
    """Case-insensitive substring match over title, subject, university and tags."""
    pattern = _like_pattern(query)
    return or_(
        Note.title.ilike(pattern, escape="\\"),
        Note.subject.ilike(pattern, escape="\\"),
        Note.university.ilike(pattern, escape="\\"),
        func.array_to_string(Note.tags, " ").ilike(pattern, escape="\\"),
    )


def full_text_match(query: str) -> ColumnElement[bool]:
    return Note.search_vector.op("@@")(func.plainto_tsquery("simple", query))


class CatalogService:
    def __init__(self, full_text: bool | None = None) -> None:
        if full_text is None:
            full_text = full_text_enabled() and full_text_ready()
        self._full_text = full_text

    def list_notes(
        self,
        viewer_id: uuid.UUID | None,
        db: Session,
        q: str | None = None,
        subject: str | None = None,
        university: str | None = None,
        tags: list[str] | None = None,
        visibility: Visibility | None = None,
        sort: SortMode = "latest",
        page: int = 1,
        page_size: int = PAGE_SIZE,
    ) -> CatalogPage:
        """Return one page of notes visible to *viewer_id*.

        All filters combine conjunctively on top of the visibility rule, so
        *visibility* can only narrow what the viewer may already read.
        ``total`` and ``page_count`` describe the filtered, unpaginated set.
        """
        page, page_size = normalise_paging(page, page_size)

        base = db.query(Note).filter(visible_to(viewer_id))
        query = (q or "").strip()
        if query:
            base = base.filter(full_text_match(query) if self._full_text else substring_match(query))
        if subject:
            base = base.filter(Note.subject == subject)
        if university:
            base = base.filter(Note.university == university)
        if visibility:
            base = base.filter(Note.visibility == visibility)
        wanted_tags = [t for t in (tags or []) if t]
        if wanted_tags:
            base = base.filter(Note.tags.overlap(wanted_tags))

        total: int = base.count()
        ordering = _ORDERINGS.get(sort, _ORDERINGS["latest"])
        items = base.order_by(*ordering).offset((page - 1) * page_size).limit(page_size).all()
        return CatalogPage(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            page_count=math.ceil(total / page_size),
        )
