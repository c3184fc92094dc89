"""FastAPI application entry point."""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="%H:%M:%S")

# Apply the same format to Uvicorn's loggers so they also show timestamps.
for _uvicorn_logger in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    _log = logging.getLogger(_uvicorn_logger)
    _log.handlers.clear()
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="%H:%M:%S"))
    _log.addHandler(_handler)
    _log.propagate = False

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from notehub.db import create_tables
from notehub.schemas.error import ErrorResponse
from notehub.services.errors import NotesError, QuotaExceededError

logger = logging.getLogger(__name__)

_STATUS_BY_KIND = {
    "not_found": 404,
    "forbidden": 403,
    "validation_error": 422,
    "quota_exceeded": 429,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    create_tables()
    yield


app = FastAPI(title="NoteHub", lifespan=lifespan)

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[os.environ.get("NOTES_RATE_LIMIT", "200 per 15 minutes")],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.environ.get("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotesError)
async def _notes_error_handler(request: Request, exc: NotesError) -> JSONResponse:
    limit = exc.limit if isinstance(exc, QuotaExceededError) else None
    return JSONResponse(
        status_code=_STATUS_BY_KIND.get(exc.kind, 400),
        content=ErrorResponse(error=exc.kind, detail=str(exc), limit=limit).model_dump(exclude_none=True),
    )


@app.exception_handler(Exception)
async def _global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error="internal_error", detail=str(exc)).model_dump(exclude_none=True),
    )


# Import and register routers after app is defined to avoid circular imports.
from notehub.api import bookmarks, comments, facets, notes  # noqa: E402

app.include_router(notes.router, prefix="/notes", tags=["notes"])
app.include_router(comments.router, prefix="/notes", tags=["comments"])
app.include_router(bookmarks.router, prefix="/notes", tags=["bookmarks"])
app.include_router(facets.router, prefix="/facets", tags=["facets"])
