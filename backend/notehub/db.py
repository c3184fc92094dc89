"""SQLAlchemy engine and session factory."""

import logging
import os
from collections.abc import Generator

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def _get_database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL environment variable is not set")
    return url


def make_engine(database_url: str | None = None) -> Engine:
    url = database_url or _get_database_url()
    return create_engine(url, pool_pre_ping=True)


# Module-level singletons, created lazily on first access via _get_engine().
_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None
# Cleared by create_tables() when the search trigger or index cannot be installed.
_full_text_ready = True


def _get_engine() -> Engine:
    global _engine, _session_factory
    if _engine is None:
        _engine = make_engine()
        _session_factory = sessionmaker(bind=_engine, autocommit=False, autoflush=False)
    return _engine


def full_text_ready() -> bool:
    """Whether notes.search_vector can serve full-text queries."""
    return _full_text_ready


def get_session() -> Generator[Session, None, None]:
    """Yield a database session and close it when the request is done."""
    _get_engine()
    assert _session_factory is not None
    session = _session_factory()
    try:
        yield session
    finally:
        session.close()


def create_tables() -> None:
    """Create all tables and install the notes search_vector trigger."""
    # Import models so Base.metadata includes them before create_all().
    import notehub.models.bookmark  # noqa: F401
    import notehub.models.comment  # noqa: F401
    import notehub.models.note  # noqa: F401
    import notehub.models.vote  # noqa: F401

    global _full_text_ready
    engine = _get_engine()
    Base.metadata.create_all(bind=engine)

    # search_vector is maintained by a trigger (GENERATED ALWAYS AS cannot use
    # array_to_string, which is STABLE not IMMUTABLE). Idempotent: safe to run
    # on every startup.
    _search_vector_sql = """
    DO $$
    BEGIN
        IF NOT EXISTS (
            SELECT 1 FROM information_schema.columns
            WHERE table_name = 'notes' AND column_name = 'search_vector'
        ) THEN
            ALTER TABLE notes ADD COLUMN search_vector tsvector;
        END IF;

        IF NOT EXISTS (
            SELECT 1 FROM pg_indexes
            WHERE tablename = 'notes' AND indexname = 'idx_notes_search'
        ) THEN
            CREATE INDEX idx_notes_search ON notes USING gin(search_vector);
        END IF;

        CREATE OR REPLACE FUNCTION notes_search_vector_update() RETURNS trigger AS $func$
        BEGIN
            NEW.search_vector :=
                setweight(to_tsvector('simple',  coalesce(NEW.title, '')), 'A') ||
                setweight(to_tsvector('simple',  coalesce(NEW.subject, '')), 'B') ||
                setweight(to_tsvector('simple',  coalesce(NEW.university, '')), 'B') ||
                setweight(to_tsvector('simple',  coalesce(array_to_string(NEW.tags, ' '), '')), 'C');
            RETURN NEW;
        END;
        $func$ LANGUAGE plpgsql;

        IF NOT EXISTS (
            SELECT 1 FROM pg_trigger
            WHERE tgname = 'notes_search_vector_trigger'
        ) THEN
            CREATE TRIGGER notes_search_vector_trigger
                BEFORE INSERT OR UPDATE ON notes
                FOR EACH ROW EXECUTE FUNCTION notes_search_vector_update();
        END IF;
    END $$;

    -- Backfill rows written before the trigger existed.
    UPDATE notes
       SET search_vector =
               setweight(to_tsvector('simple',  coalesce(title, '')), 'A') ||
               setweight(to_tsvector('simple',  coalesce(subject, '')), 'B') ||
               setweight(to_tsvector('simple',  coalesce(university, '')), 'B') ||
               setweight(to_tsvector('simple',  coalesce(array_to_string(tags, ' '), '')), 'C')
     WHERE search_vector IS NULL;
    """
    try:
        with engine.connect() as conn:
            conn.execute(text(_search_vector_sql))
            conn.commit()
    except DBAPIError:
        logger.warning("Could not install the notes search index; text queries will use substring matching", exc_info=True)
        _full_text_ready = False
    else:
        _full_text_ready = True
