from datetime import datetime, timezone
from typing import Optional


def from_iso_string(value: str) -> datetime:
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        raise ValueError("Stored datetime must be timezone-aware")
    return dt.astimezone(timezone.utc)


def to_iso_string(value: datetime) -> str:
    if value.tzinfo is None:
        raise ValueError("Datetime must be timezone-aware")
    return value.astimezone(timezone.utc).isoformat()


def optional_from_iso(value: Optional[str]) -> Optional[datetime]:
    return from_iso_string(value) if value else None


def optional_to_iso(value: Optional[datetime]) -> Optional[str]:
    return to_iso_string(value) if value else None
