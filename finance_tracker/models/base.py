"""
Database engine, session management, and base model.

Every model inherits from Base. Every request gets a session
from get_db(). Services write through persist() so that a
failing flush surfaces as a StoreError.
"""

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session

from finance_tracker.config import get_settings
from finance_tracker.errors import StoreError

settings = get_settings()

# --- Engine ---
# SQLite connections may be handed between threads by the
# FastAPI threadpool, so the same-thread check is disabled there.
connect_args = (
    {"check_same_thread": False}
    if settings.DATABASE_URL.startswith("sqlite")
    else {}
)

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args,
)

# --- Session Factory ---
# autocommit=False: the API layer commits once per request,
# so a transaction write and its balance write land together.
# autoflush=False: SQL is only sent on an explicit flush.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


def persist(db: Session) -> None:
    """Flush pending changes, translating driver failures to StoreError."""
    try:
        db.flush()
    except SQLAlchemyError as e:
        raise StoreError("Could not write to the database") from e


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The session is always closed when the request finishes,
    which also discards anything that was not committed.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
