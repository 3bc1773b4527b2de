from datetime import datetime, timezone
from typing import Optional


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 timestamp; naive values (SQLite) are read as UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()
