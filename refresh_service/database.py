"""Database engine and session management."""

import logging
from typing import Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from tenacity import before_sleep_log, retry, stop_after_attempt, wait_exponential

from refresh_service.config import settings
from refresh_service.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

Base = declarative_base()

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_engine() -> Engine:
    """Create the engine on first use so the app can start without a database."""
    global _engine, _session_factory
    if _engine is None:
        if not settings.DATABASE_URL:
            raise ConfigurationError("DATABASE_URL is not configured")
        _engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)
        _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
    return _engine


def SessionLocal() -> Session:
    """Open a new session bound to the configured database."""
    get_engine()
    return _session_factory()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a session that is always closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@retry(
    stop=stop_after_attempt(settings.DB_READY_ATTEMPTS),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    before_sleep=before_sleep_log(logger, logging.INFO),
    reraise=True,
)
def wait_for_database() -> None:
    """Block until the database accepts connections."""
    with get_engine().connect() as conn:
        conn.execute(text("SELECT 1"))
