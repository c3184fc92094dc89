"""Notes API router."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from notehub.api.deps import get_viewer_id, require_user_id
from notehub.db import get_session
from notehub.models.note import Note
from notehub.schemas.note import (
    NoteCreateRequest,
    NoteDetail,
    NoteListResponse,
    NoteSummary,
    NoteUpdateRequest,
    VoteRequest,
    VoteResponse,
    split_tags,
)
from notehub.services.catalog import PAGE_SIZE, CatalogService
from notehub.services.ingestion import IngestionService
from notehub.services.notes import NotesService
from notehub.services.types import SortMode, Visibility, VoteChoice
from notehub.services.votes import VoteService

router = APIRouter()


def _to_note_detail(note: Note, viewer_vote: VoteChoice | None = None) -> NoteDetail:
    detail = NoteDetail.model_validate(note)
    return detail.model_copy(update={"viewer_vote": viewer_vote})


@router.get("")
def list_notes(
    q: str | None = Query(default=None),
    subject: str | None = Query(default=None),
    university: str | None = Query(default=None),
    tags: str | None = Query(default=None, description="Comma-separated tag names"),
    visibility: Visibility | None = Query(default=None),
    sort: SortMode = Query(default="latest"),
    page: int = Query(default=1),
    page_size: int | None = Query(default=None),
    limit: int | None = Query(default=None, description="Alias of page_size"),
    viewer_id: uuid.UUID | None = Depends(get_viewer_id),
    db: Session = Depends(get_session),
) -> NoteListResponse:
    result = CatalogService().list_notes(
        viewer_id,
        db,
        q=q,
        subject=subject,
        university=university,
        tags=split_tags(tags),
        visibility=visibility,
        sort=sort,
        page=page,
        page_size=page_size or limit or PAGE_SIZE,
    )
    return NoteListResponse(
        items=[NoteSummary.model_validate(n) for n in result["items"]],
        total=result["total"],
        page=result["page"],
        page_size=result["page_size"],
        page_count=result["page_count"],
    )


@router.get("/mine")
def list_my_notes(
    user_id: uuid.UUID = Depends(require_user_id),
    db: Session = Depends(get_session),
) -> dict[str, list[NoteSummary]]:
    notes = NotesService().list_owned(user_id, db)
    return {"notes": [NoteSummary.model_validate(n) for n in notes]}


@router.post("", status_code=201)
def create_note(
    body: NoteCreateRequest,
    user_id: uuid.UUID = Depends(require_user_id),
    db: Session = Depends(get_session),
) -> dict[str, NoteDetail]:
    note = IngestionService().ingest(body, user_id, db)
    return {"note": _to_note_detail(note)}


@router.get("/{note_id}")
def get_note(
    note_id: uuid.UUID,
    viewer_id: uuid.UUID | None = Depends(get_viewer_id),
    db: Session = Depends(get_session),
) -> dict[str, NoteDetail]:
    note = NotesService().get(note_id, viewer_id, db)
    viewer_vote = VoteService().viewer_vote(note_id, viewer_id, db)
    return {"note": _to_note_detail(note, viewer_vote)}


@router.patch("/{note_id}")
def update_note(
    note_id: uuid.UUID,
    body: NoteUpdateRequest,
    user_id: uuid.UUID = Depends(require_user_id),
    db: Session = Depends(get_session),
) -> dict[str, NoteDetail]:
    note = NotesService().update(note_id, user_id, body, db)
    return {"note": _to_note_detail(note)}


@router.delete("/{note_id}", status_code=204)
def delete_note(
    note_id: uuid.UUID,
    user_id: uuid.UUID = Depends(require_user_id),
    db: Session = Depends(get_session),
) -> None:
    NotesService().delete(note_id, user_id, db)


@router.post("/{note_id}/vote")
def vote(
    note_id: uuid.UUID,
    body: VoteRequest,
    user_id: uuid.UUID = Depends(require_user_id),
    db: Session = Depends(get_session),
) -> VoteResponse:
    tally = VoteService().apply_vote(note_id, user_id, body.choice, db)
    return VoteResponse(**tally)


@router.post("/{note_id}/upvote")
def upvote(
    note_id: uuid.UUID,
    user_id: uuid.UUID = Depends(require_user_id),
    db: Session = Depends(get_session),
) -> VoteResponse:
    return VoteResponse(**VoteService().apply_vote(note_id, user_id, "upvote", db))


@router.post("/{note_id}/downvote")
def downvote(
    note_id: uuid.UUID,
    user_id: uuid.UUID = Depends(require_user_id),
    db: Session = Depends(get_session),
) -> VoteResponse:
    return VoteResponse(**VoteService().apply_vote(note_id, user_id, "downvote", db))
