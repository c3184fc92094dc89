"""Comments API router, mounted under /notes."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from notehub.api.deps import get_viewer_id, require_user_id
from notehub.db import get_session
from notehub.schemas.comment import CommentCreateRequest, CommentResponse
from notehub.services.comments import CommentService

router = APIRouter()


@router.get("/{note_id}/comments")
def list_comments(
    note_id: uuid.UUID,
    viewer_id: uuid.UUID | None = Depends(get_viewer_id),
    db: Session = Depends(get_session),
) -> dict[str, list[CommentResponse]]:
    comments = CommentService().list_for_note(note_id, viewer_id, db)
    return {"comments": [CommentResponse.model_validate(c) for c in comments]}


@router.post("/{note_id}/comments", status_code=201)
def add_comment(
    note_id: uuid.UUID,
    body: CommentCreateRequest,
    user_id: uuid.UUID = Depends(require_user_id),
    db: Session = Depends(get_session),
) -> dict[str, CommentResponse]:
    comment = CommentService().add(note_id, user_id, body.text, db)
    return {"comment": CommentResponse.model_validate(comment)}


@router.delete("/{note_id}/comments/{comment_id}", status_code=204)
def delete_comment(
    note_id: uuid.UUID,
    comment_id: uuid.UUID,
    user_id: uuid.UUID = Depends(require_user_id),
    db: Session = Depends(get_session),
) -> None:
    CommentService().remove(note_id, comment_id, user_id, db)
