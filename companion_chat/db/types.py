"""Column types shared by the table models."""
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

from companion_chat.utils.clock import as_utc


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes on every backend.

    SQLite keeps no offset, so values are normalized to UTC on write and
    tagged as UTC again on read.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return as_utc(value)

    def process_result_value(self, value, dialect):
        return as_utc(value)
