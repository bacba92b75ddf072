import logging
import sqlite3

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool

from freezer.config import Settings, get_settings


app_settings: Settings = get_settings()
logger = logging.getLogger(__name__)


def build_engine(database_url: str, *, timeout_seconds: int):
    """Engine whose every round trip is bounded by ``timeout_seconds``."""
    db_url = make_url(database_url)
    backend = db_url.get_backend_name()
    is_sqlite = backend == "sqlite"
    is_sqlite_memory = False
    if is_sqlite:
        sqlite_db = db_url.database
        is_sqlite_memory = sqlite_db in (None, "", ":memory:")
        if not is_sqlite_memory and db_url.query.get("mode") == "memory":
            is_sqlite_memory = True

    connect_args = {}
    engine_kwargs: dict[str, object] = dict(pool_pre_ping=True)
    if is_sqlite:
        connect_args = {"check_same_thread": False, "timeout": timeout_seconds}
        if is_sqlite_memory:
            engine_kwargs.update(poolclass=StaticPool)
    else:
        engine_kwargs.update(pool_timeout=timeout_seconds)
        if backend == "postgresql":
            connect_args = {
                "connect_timeout": timeout_seconds,
                "options": "-c statement_timeout={}".format(timeout_seconds * 1000),
            }

    new_engine = create_engine(database_url, connect_args=connect_args, **engine_kwargs)

    if is_sqlite:
        busy_timeout_ms = timeout_seconds * 1000

        @event.listens_for(new_engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            try:
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.execute(f"PRAGMA busy_timeout={busy_timeout_ms}")
                if not is_sqlite_memory:
                    try:
                        cursor.execute("PRAGMA journal_mode=WAL")
                        cursor.execute("PRAGMA synchronous=NORMAL")
                    except sqlite3.DatabaseError:
                        logger.warning("Unable to enable WAL mode for %s", db_url.database)
            finally:
                cursor.close()

    return new_engine


engine = build_engine(
    app_settings.DATABASE_URL,
    timeout_seconds=app_settings.STORE_TIMEOUT_SECONDS,
)
