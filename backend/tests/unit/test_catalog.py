"""Unit tests for CatalogService."""

import uuid
from unittest.mock import MagicMock

import pytest
from conftest import make_note
from sqlalchemy.dialects import postgresql

from notehub.services.catalog import (
    MAX_PAGE,
    MAX_PAGE_SIZE,
    PAGE_SIZE,
    CatalogService,
    _like_pattern,
    normalise_paging,
)


def _make_db(items: list[object] | None = None, total: int = 0) -> tuple[MagicMock, MagicMock]:
    """Mock db whose query chain returns itself for every builder call."""
    query = MagicMock()
    query.filter.return_value = query
    query.order_by.return_value = query
    query.offset.return_value = query
    query.limit.return_value = query
    query.all.return_value = items or []
    query.count.return_value = total
    db = MagicMock()
    db.query.return_value = query
    return db, query


def _filter_sql(query: MagicMock) -> list[str]:
    return [
        str(call.args[0].compile(dialect=postgresql.dialect()))
        for call in query.filter.call_args_list
    ]


class TestNormalisePaging:
    def test_defaults(self) -> None:
        assert normalise_paging(None, None) == (1, PAGE_SIZE)

    def test_non_positive_values_fall_back(self) -> None:
        assert normalise_paging(0, 0) == (1, PAGE_SIZE)
        assert normalise_paging(-3, -1) == (1, PAGE_SIZE)

    def test_page_size_is_capped(self) -> None:
        assert normalise_paging(2, 500) == (2, MAX_PAGE_SIZE)

    def test_huge_page_is_clamped(self) -> None:
        page, size = normalise_paging(2**62, 100)

        assert page == MAX_PAGE
        assert (page - 1) * size < 2**63


class TestLikePattern:
    def test_escapes_wildcards(self) -> None:
        assert _like_pattern("50%_off") == "%50\\%\\_off%"

    def test_escapes_backslash(self) -> None:
        assert _like_pattern("a\\b") == "%a\\\\b%"


class TestCatalogServiceListNotes:
    def test_guest_sees_only_public_notes(self) -> None:
        db, query = _make_db()

        CatalogService(full_text=False).list_notes(None, db)

        sql = _filter_sql(query)
        assert len(sql) == 1
        assert "notes.visibility" in sql[0]
        assert "owner_id" not in sql[0]

    def test_viewer_also_sees_own_notes(self) -> None:
        db, query = _make_db()

        CatalogService(full_text=False).list_notes(uuid.uuid4(), db)

        assert "notes.owner_id" in _filter_sql(query)[0]

    def test_visibility_is_applied_first_and_filters_combine(self) -> None:
        db, query = _make_db()

        CatalogService(full_text=False).list_notes(
            None,
            db,
            q="algebra",
            subject="Mathematics",
            university="MIT",
            tags=["matrices"],
        )

        sql = _filter_sql(query)
        assert len(sql) == 5
        assert "notes.visibility" in sql[0]
        assert "ILIKE" in sql[1]
        assert "notes.subject =" in sql[2]
        assert "notes.university =" in sql[3]
        assert "&&" in sql[4]

    def test_full_text_search_uses_search_vector(self) -> None:
        db, query = _make_db()

        CatalogService(full_text=True).list_notes(None, db, q="eigenvalues")

        sql = _filter_sql(query)
        assert "notes.search_vector @@ plainto_tsquery" in sql[1]

    def test_blank_query_and_empty_tags_add_no_filters(self) -> None:
        db, query = _make_db()

        CatalogService(full_text=False).list_notes(None, db, q="   ", tags=["", ""])

        assert query.filter.call_count == 1

    @pytest.mark.parametrize(
        ("sort", "leading"),
        [
            ("latest", "notes.created_at DESC"),
            ("top", "notes.upvote_count DESC"),
            ("bottom", "notes.downvote_count DESC"),
        ],
    )
    def test_sort_modes(self, sort: str, leading: str) -> None:
        db, query = _make_db()

        CatalogService(full_text=False).list_notes(None, db, sort=sort)  # type: ignore[arg-type]

        assert str(query.order_by.call_args.args[0]) == leading

    def test_pagination_and_totals(self) -> None:
        db, query = _make_db(items=[make_note()], total=25)

        result = CatalogService(full_text=False).list_notes(None, db, page=3, page_size=10)

        query.offset.assert_called_once_with(20)
        query.limit.assert_called_once_with(10)
        assert result["total"] == 25
        assert result["page"] == 3
        assert result["page_size"] == 10
        assert result["page_count"] == 3

    def test_empty_result(self) -> None:
        db, _ = _make_db(items=[], total=0)

        result = CatalogService(full_text=False).list_notes(None, db)

        assert result["items"] == []
        assert result["page_count"] == 0

    def test_oversized_page_is_capped(self) -> None:
        db, query = _make_db()

        result = CatalogService(full_text=False).list_notes(None, db, page_size=1000)

        query.limit.assert_called_once_with(MAX_PAGE_SIZE)
        assert result["page_size"] == MAX_PAGE_SIZE

    def test_full_text_flag_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NOTES_FULL_TEXT_SEARCH", "0")
        db, query = _make_db()

        CatalogService().list_notes(None, db, q="algebra")

        assert "ILIKE" in _filter_sql(query)[1]

    def test_huge_page_keeps_offset_in_range(self) -> None:
        db, query = _make_db()

        result = CatalogService(full_text=False).list_notes(None, db, page=2**62, page_size=MAX_PAGE_SIZE)

        offset = query.offset.call_args.args[0]
        assert offset == (MAX_PAGE - 1) * MAX_PAGE_SIZE
        assert offset < 2**63
        assert result["page"] == MAX_PAGE

    def test_falls_back_to_substring_when_search_index_is_missing(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("notehub.services.catalog.full_text_ready", lambda: False)
        db, query = _make_db()

        CatalogService().list_notes(None, db, q="algebra")

        assert "ILIKE" in _filter_sql(query)[1]

    def test_visibility_filter_narrows_within_readable_notes(self) -> None:
        db, query = _make_db()

        CatalogService(full_text=False).list_notes(uuid.uuid4(), db, visibility="private")

        sql = _filter_sql(query)
        assert len(sql) == 2
        assert "notes.owner_id" in sql[0]
        assert "notes.visibility =" in sql[1]
