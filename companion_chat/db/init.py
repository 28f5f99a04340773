"""Initialize database tables."""
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

# Imported for their side effect of registering tables on SQLModel.metadata
from companion_chat.models.user import User  # noqa: F401
from companion_chat.models.companion import Companion  # noqa: F401
from companion_chat.models.message import Message  # noqa: F401
from companion_chat.models.session import AuthSession  # noqa: F401


def init_db(engine: Engine) -> None:
    """Create all tables in the database."""
    print("[DB INIT] Creating all tables...")
    SQLModel.metadata.create_all(engine)
    print("[DB INIT] Tables created successfully.")
