import logging
import sqlite3
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from stockwatch.config import Settings, get_settings


app_settings: Settings = get_settings()
logger = logging.getLogger(__name__)


def _is_sqlite_memory(url) -> bool:
    sqlite_db = url.database
    if sqlite_db in (None, "", ":memory:"):
        return True
    return url.query.get("mode") == "memory"


def build_engine(database_url: str, *, timeout_seconds: int = 5) -> Engine:
    """Create an engine whose storage calls fail after ``timeout_seconds``
    instead of waiting on a locked or unreachable database."""
    db_url = make_url(database_url)
    is_sqlite = db_url.get_backend_name() == "sqlite"
    is_memory = is_sqlite and _is_sqlite_memory(db_url)

    connect_args: dict[str, object] = {}
    engine_kwargs: dict[str, object] = dict(pool_pre_ping=True)
    if is_sqlite:
        connect_args = {"check_same_thread": False, "timeout": timeout_seconds}
        if is_memory:
            engine_kwargs.update(poolclass=StaticPool)
    else:
        engine_kwargs.update(pool_timeout=timeout_seconds)

    new_engine = create_engine(database_url, connect_args=connect_args, **engine_kwargs)

    if is_sqlite:
        busy_timeout_ms = timeout_seconds * 1000

        @event.listens_for(new_engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            try:
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.execute(f"PRAGMA busy_timeout={busy_timeout_ms}")
                if not is_memory:
                    try:
                        cursor.execute("PRAGMA journal_mode=WAL")
                        cursor.execute("PRAGMA synchronous=NORMAL")
                    except sqlite3.DatabaseError:
                        pass
            finally:
                cursor.close()

    return new_engine


engine = build_engine(
    app_settings.DATABASE_URL,
    timeout_seconds=app_settings.DB_TIMEOUT_SECONDS,
)


# Columns added after the first release; older database files get them on startup.
_SQLITE_COLUMN_DEFAULTS = {
    "inventory": {
        "item_description": "TEXT NOT NULL DEFAULT ''",
        "item_category": "TEXT NOT NULL DEFAULT ''",
        "low_stock_threshold": "INTEGER NOT NULL DEFAULT 10",
        "barcode": "TEXT NOT NULL DEFAULT ''",
        "updated_at": "DATETIME NOT NULL DEFAULT '1970-01-01 00:00:00'",
    },
    "users": {
        "password_salt": "TEXT NOT NULL DEFAULT ''",
    },
}

_SQLITE_POST_ADD_UPDATES = {
    ("inventory", "updated_at"): (
        "UPDATE inventory SET updated_at = CURRENT_TIMESTAMP "
        "WHERE updated_at = '1970-01-01 00:00:00'"
    ),
}


def _escape_sqlite_identifier(value: str) -> str:
    return value.replace('"', '""')


def _get_sqlite_columns(conn, table_name: str):
    escaped_table = _escape_sqlite_identifier(table_name)
    # noinspection SqlNoDataSourceInspection
    result = conn.exec_driver_sql(
        f'PRAGMA table_info("{escaped_table}")'
    ).mappings()
    return {row["name"] for row in result}


def ensure_sqlite_schema(bind: Optional[Engine] = None) -> list[tuple[str, str]]:
    bind = bind if bind is not None else engine
    if bind.url.get_backend_name() != "sqlite":
        return []

    added_columns = []
    with bind.connect() as conn:
        with conn.begin():
            for table_name, columns in _SQLITE_COLUMN_DEFAULTS.items():
                existing = _get_sqlite_columns(conn, table_name)
                if not existing:
                    continue
                for column_name, ddl in columns.items():
                    if column_name in existing:
                        continue
                    escaped_table = _escape_sqlite_identifier(table_name)
                    escaped_column = _escape_sqlite_identifier(column_name)
                    # noinspection SqlNoDataSourceInspection
                    conn.exec_driver_sql(
                        f'ALTER TABLE "{escaped_table}" ADD COLUMN "{escaped_column}" {ddl}'
                    )
                    added_columns.append((table_name, column_name))
            for table_name, column_name in added_columns:
                update_stmt = _SQLITE_POST_ADD_UPDATES.get((table_name, column_name))
                if update_stmt:
                    # noinspection SqlNoDataSourceInspection
                    conn.exec_driver_sql(update_stmt)

    for table_name, column_name in added_columns:
        logger.info("Added missing column %s.%s", table_name, column_name)
    return added_columns
