"""
VCFolio Database Configuration

Sets up the SQLAlchemy engine, session factory, and declarative base.
Uses SQLite locally with a file-based database (vcfolio.db) unless
DATABASE_URL points elsewhere.

Architecture:
    - SQLAlchemy 2.0 style with mapped_column and type annotations
    - All models inherit from Base (defined here)
    - Session management via get_db() dependency for FastAPI

Key Design Decisions:
    - check_same_thread=False for SQLite so FastAPI's threadpool can share the engine
    - PRAGMA foreign_keys=ON so ON DELETE CASCADE and CHECK constraints hold on SQLite
"""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from .config import get_settings

DATABASE_URL = get_settings().DATABASE_URL

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in DATABASE_URL else {},
    pool_pre_ping=True,
    echo=get_settings().SQLALCHEMY_ECHO,
)


def enable_sqlite_foreign_keys(target_engine) -> None:
    """Turn on FK enforcement for every new SQLite connection of an engine."""
    if target_engine.dialect.name != "sqlite":
        return

    @event.listens_for(target_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


enable_sqlite_foreign_keys(engine)

# Session factory — each request gets its own session
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Declarative base class for all VCFolio ORM models."""
    pass


def get_db():
    """
    FastAPI dependency that provides a database session.
    Yields a session and ensures it's closed after the request.

    Usage in FastAPI endpoints:
        @router.get("/items")
        def get_items(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Create all database tables from ORM model definitions.
    Called during application startup and by seed_data.py.
    """
    from . import models  # noqa: F401 — side-effect import to register models
    Base.metadata.create_all(bind=engine)
