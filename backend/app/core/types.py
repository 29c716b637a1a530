"""Column types shared by all models"""
from sqlalchemy import TypeDecorator, String
import uuid


def generate_uuid() -> str:
    return str(uuid.uuid4())


class GUID(TypeDecorator):
    """
    UUID primary/foreign keys stored as VARCHAR(36) on every backend, so the
    SQLite test database and PostgreSQL hold identical values.
    """
    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else str(value)


def is_valid_uuid(value: str) -> bool:
    """True when value parses as a UUID (used to reject junk IDs early)"""
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
