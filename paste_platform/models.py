"""
Entry record for Paste Platform.

Responsibilities:
    - Hold the single persisted entity (a paste) as a small dataclass
    - Convert to/from the persisted record layout shared by every backend:
      ``id, content, editCode, createdAt, updatedAt``
    - Produce the public projection (everything except the secret edit code)
    - Format timestamps identically regardless of backend

Timestamp format:
    ISO-8601, UTC, millisecond precision, ``Z`` suffix
    (e.g. ``2025-01-31T12:00:00.123Z``). The relational backend stores
    TIMESTAMPTZ values and normalizes them back through `to_iso`, so both
    backends hand the service byte-identical strings.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` (naive values are taken as UTC)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def from_iso(value: str) -> datetime:
    """Parse a timestamp produced by `to_iso` (or any ISO-8601 string) into an aware datetime."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def now_iso(clock: Optional[Clock] = None) -> str:
    return to_iso((clock or _utcnow)())


@dataclass
class Entry:
    """A stored paste."""

    id: str
    content: str
    edit_code: str
    created_at: str
    updated_at: str

    def to_record(self) -> Dict[str, Any]:
        """Return the persisted layout (camelCase keys)."""
        return {
            "id": self.id,
            "content": self.content,
            "editCode": self.edit_code,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def public_record(self) -> Dict[str, Any]:
        """Return the persisted layout without the secret edit code."""
        record = self.to_record()
        del record["editCode"]
        return record

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Entry":
        """
        Build an Entry from the persisted layout.

        Raises:
            KeyError: If a field is missing.
            TypeError: If a field is not a string.
        """
        values = {
            "id": record["id"],
            "content": record["content"],
            "edit_code": record["editCode"],
            "created_at": record["createdAt"],
            "updated_at": record["updatedAt"],
        }
        for name, value in values.items():
            if not isinstance(value, str):
                raise TypeError(f"Entry field {name!r} must be a string")
        return cls(**values)

    def copy(self, **changes: Any) -> "Entry":
        return replace(self, **changes)
