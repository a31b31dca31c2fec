# jurispanel/db/database.py
"""
Database Configuration

SQLAlchemy engine, session factory, and base class configuration.
"""
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from jurispanel.core.config import settings
from jurispanel.core.logger import logger


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # The reviewer's requests are served from FastAPI's threadpool.
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_recycle": 3600,
    }


engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    **_engine_kwargs(settings.DATABASE_URL),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database sessions.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error("Database session error: %s", e)
        db.rollback()
        raise
    finally:
        db.close()


def init_db(bind=None) -> None:
    """
    Create all tables. There are no migrations; existing tables are left as-is.
    """
    from jurispanel.db import models  # noqa: F401  (registers tables)

    logger.info("Initializing database...")
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database initialized successfully")

