"""Facets API router: filter values for the catalog, most used first."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy import ColumnElement, func
from sqlalchemy.orm import Session

from notehub.api.deps import get_viewer_id
from notehub.db import get_session
from notehub.models.note import Note
from notehub.schemas.note import FacetsResponse
from notehub.services.policy import visible_to

router = APIRouter()


def _ranked_values(db: Session, column: ColumnElement[str], visible: ColumnElement[bool]) -> list[str]:
    value = column.label("value")
    rows = (
        db.query(value, func.count().label("n"))
        .filter(visible)
        .group_by("value")
        .order_by(func.count().desc(), value.asc())
        .all()
    )
    return [row.value for row in rows]


@router.get("")
def list_facets(
    viewer_id: uuid.UUID | None = Depends(get_viewer_id),
    db: Session = Depends(get_session),
) -> FacetsResponse:
    visible = visible_to(viewer_id)
    return FacetsResponse(
        subjects=_ranked_values(db, Note.subject, visible),
        universities=_ranked_values(db, Note.university, visible),
        tags=_ranked_values(db, func.unnest(Note.tags), visible),
    )
