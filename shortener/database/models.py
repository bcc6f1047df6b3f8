"""Data models for URL shortener."""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_timestamp(value) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    return _as_utc(datetime.fromisoformat(value))


@dataclass
class URLMapping:
    """Represents a URL mapping in the store.
    
    Persisted under the document field names ``short_url``, ``long_url``,
    ``created``, ``visits`` and ``last_visited``.
    """
    
    short_code: str
    long_url: str
    created_at: datetime
    visit_count: int = 0
    last_visited_at: Optional[datetime] = None
    
    def with_visit(self, visited_at: datetime) -> "URLMapping":
        """Return a copy with one more visit recorded at ``visited_at``.
        
        The visit time is clamped so it is never earlier than ``created_at``.
        
        Args:
            visited_at: Time of the redirect
            
        Returns:
            New URLMapping; ``self`` is left untouched
        """
        visited_at = max(_as_utc(visited_at), _as_utc(self.created_at))
        if self.last_visited_at is not None:
            visited_at = max(visited_at, _as_utc(self.last_visited_at))
        return replace(
            self,
            visit_count=self.visit_count + 1,
            last_visited_at=visited_at,
        )
    
    def to_document(self) -> dict:
        """Convert to a storage document (native datetimes)."""
        doc = {
            "short_url": self.short_code,
            "long_url": self.long_url,
            "created": self.created_at,
            "visits": self.visit_count,
        }
        if self.last_visited_at is not None:
            doc["last_visited"] = self.last_visited_at
        return doc
    
    def to_dict(self) -> dict:
        """Convert to a JSON-safe dictionary (ISO-8601 timestamps)."""
        doc = self.to_document()
        doc["created"] = self.created_at.isoformat()
        if self.last_visited_at is not None:
            doc["last_visited"] = self.last_visited_at.isoformat()
        return doc
    
    @classmethod
    def from_document(cls, data: dict) -> "URLMapping":
        """Create from a storage document or its JSON form."""
        return cls(
            short_code=data["short_url"],
            long_url=data["long_url"],
            created_at=_parse_timestamp(data["created"]),
            visit_count=int(data.get("visits", 0)),
            last_visited_at=_parse_timestamp(data.get("last_visited")),
        )
