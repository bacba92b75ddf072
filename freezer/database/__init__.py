from freezer.database.base import Base
from freezer.database.engine import build_engine, engine
from freezer.database.session import SessionLocal, get_db, session_scope

__all__ = ["Base", "SessionLocal", "build_engine", "engine", "get_db", "session_scope"]
