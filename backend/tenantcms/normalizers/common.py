from datetime import datetime, timezone
from typing import Optional


def serialize_datetime(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 in UTC; naive values (as returned by SQLite) are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()
