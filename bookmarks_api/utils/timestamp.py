"""
Timestamp helpers for audit fields
"""
from datetime import datetime, timezone
from typing import Any, Optional

# Format written by the first version of the service, e.g. "05-03-2024_14:07:09PM"
LEGACY_FORMAT = "%d-%m-%Y_%H:%M:%S"

# Sort key for records without a usable timestamp
EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def timestamp() -> str:
    """Current UTC time as an ISO-8601 string (sorts lexicographically)"""
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO or legacy audit timestamp into an aware datetime, or None"""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not isinstance(value, str) or not value:
        return None

    try:
        parsed = datetime.fromisoformat(value)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    except ValueError:
        pass

    # The legacy suffix is informational only: hours are already 24h
    if value[-2:] in ("AM", "PM"):
        try:
            return datetime.strptime(value[:-2], LEGACY_FORMAT).replace(tzinfo=timezone.utc)
        except ValueError:
            return None
    return None
