"""Relational question backend setup.

The backend is optional: without ``QUESTIONS_DATABASE_URL`` there is no
engine and questions are served from the local JSON bank.
"""
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from quiz_api.config import QUESTIONS_DATABASE_URL


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def make_engine(url: str) -> Engine:
    return create_engine(
        url,
        connect_args={"check_same_thread": False} if url.startswith("sqlite") else {},
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


engine = make_engine(QUESTIONS_DATABASE_URL) if QUESTIONS_DATABASE_URL else None
SessionLocal = make_session_factory(engine) if engine is not None else None


def init_db(bind: Engine | None = None) -> None:
    """Create question tables on the given (or configured) engine."""
    # table classes register on Base.metadata at import
    import quiz_api.models.db  # noqa: F401

    target = bind if bind is not None else engine
    if target is None:
        return
    Base.metadata.create_all(bind=target)
