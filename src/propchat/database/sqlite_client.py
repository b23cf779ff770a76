from contextlib import contextmanager
from typing import Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .schema import create_all

# One engine (and connection pool) per database file for the process
_engines: Dict[str, Engine] = {}


def get_engine(sqlite_path: str) -> Engine:
    engine = _engines.get(sqlite_path)
    if engine is None:
        engine = create_engine(f"sqlite:///{sqlite_path}", future=True)
        create_all(engine)
        _engines[sqlite_path] = engine
    return engine


def dispose_engines() -> None:
    """Dispose every cached engine; the next get_engine call starts fresh."""
    for engine in _engines.values():
        engine.dispose()
    _engines.clear()


def get_session(sqlite_path: str) -> Session:
    """Get a SQLAlchemy session (caller must close it)."""
    engine = get_engine(sqlite_path)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)()


@contextmanager
def session_context(sqlite_path: str) -> Generator[Session, None, None]:
    """
    Context manager for a request-scoped SQLAlchemy session.

    The session is new per call; the engine behind it is shared per path.
    Rolls back on error and always closes. Commits are left to the caller;
    the query paths are read-only and never commit.

    Usage:
        with session_context(sqlite_path) as session:
            result = resolve(session, filters, offset=0, limit=5)
    """
    session = get_session(sqlite_path)
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
