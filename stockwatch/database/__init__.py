from stockwatch.database.base import Base
from stockwatch.database.engine import build_engine, engine, ensure_sqlite_schema
from stockwatch.database.session import SessionLocal, build_session_factory

__all__ = [
    "Base",
    "SessionLocal",
    "build_engine",
    "build_session_factory",
    "engine",
    "ensure_sqlite_schema",
]
