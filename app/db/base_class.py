from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Timestamp default for created/updated columns."""
    return datetime.now(timezone.utc)
