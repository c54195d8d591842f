"""
Database engine, session management, and base model.

Every model inherits from Base. Every request gets its own
session from get_db(); services receive that session and
never open one of their own.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from fine_ledger.config import get_settings

settings = get_settings()

# pool_pre_ping=True tests connections before using them, which
# handles a restarted database or a stale pooled connection.
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
)

# autocommit=False: the unit of work decides when to commit.
# autoflush=False: SQL is only sent on an explicit flush or commit,
# so a rejected payment never reaches the database.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally guarantees the session is closed on every
    exit path, including errors, so pooled connections are
    never leaked.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
