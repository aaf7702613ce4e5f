import time
from contextvars import ContextVar
from dataclasses import dataclass

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from app.dashtact.core.config import settings


@dataclass
class QueryStats:
    """SQL statements issued while serving one request."""

    count: int = 0
    elapsed_ms: float = 0.0


_query_stats: ContextVar[QueryStats | None] = ContextVar("query_stats", default=None)


def begin_query_stats():
    return _query_stats.set(QueryStats())


def end_query_stats(token) -> None:
    _query_stats.reset(token)


def current_query_stats() -> QueryStats | None:
    return _query_stats.get()


connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.DATABASE_URL, echo=False, future=True, connect_args=connect_args)


@event.listens_for(engine, "before_cursor_execute")
def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    if _query_stats.get() is not None:
        conn.info["query_started_at"] = time.perf_counter()


@event.listens_for(engine, "after_cursor_execute")
def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    stats = _query_stats.get()
    started_at = conn.info.pop("query_started_at", None)
    if stats is None or started_at is None:
        return
    # Mutated in place: the request's context holds the same object.
    stats.count += 1
    stats.elapsed_ms += (time.perf_counter() - started_at) * 1000


SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
