"""Database engine, session factory and schema bootstrap."""

from pathlib import Path
from typing import Generator
import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from chatkeep.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def _is_memory_url(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


def create_sqlite_engine(url: str = settings.DATABASE_URL):
    """Create the single engine owning the database file."""
    engine_kwargs = {
        "connect_args": {"check_same_thread": False, "timeout": 15},
    }

    if _is_memory_url(url):
        # One shared connection, otherwise every checkout sees an empty database
        engine_kwargs["poolclass"] = StaticPool
    elif url.startswith("sqlite:///"):
        Path(url.replace("sqlite:///", "", 1)).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, **engine_kwargs)

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        if settings.DB_ENABLE_WAL and not _is_memory_url(url):
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA temp_store=MEMORY")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        logger.debug("SQLite pragmas set")

    return engine


engine = create_sqlite_engine()
sessionlocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = sessionlocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables."""
    # Import models to register them
    import chatkeep.models.user  # noqa: F401
    import chatkeep.models.project  # noqa: F401
    import chatkeep.models.conversation  # noqa: F401
    import chatkeep.models.message  # noqa: F401
    import chatkeep.models.artifact  # noqa: F401
    import chatkeep.models.folder  # noqa: F401
    import chatkeep.models.share  # noqa: F401
    import chatkeep.models.prompt  # noqa: F401
    import chatkeep.models.template  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized")


def check_db() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database check failed: {e}")
        return False
