"""Error body returned by every rejected request."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    detail: str | None = None
    limit: int | None = None
