"""Database engine configuration for Companion Chat."""
from sqlmodel import create_engine
from sqlalchemy import event
from sqlalchemy.engine import Engine


def build_engine(database_url: str) -> Engine:
    """Create a SQLModel engine for the given URL."""
    # Check if we're using PostgreSQL or SQLite
    if database_url.startswith("postgresql"):
        print("[DB CONFIG] Using PostgreSQL database")
    else:
        print(f"[DB CONFIG] Using SQLite database: {database_url}")

    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(database_url, echo=False, pool_pre_ping=True)
