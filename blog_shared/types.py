from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Optional

REQUIRED_FIELDS = ("title", "content", "category")


@dataclass
class PostFields:
    """Writable fields of a post. ``None`` means "not supplied"."""

    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None

    def supplied(self) -> dict:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def missing(self) -> list[str]:
        """Names of required fields that are absent or blank."""
        return [name for name in REQUIRED_FIELDS if is_blank(getattr(self, name))]


@dataclass
class Post:
    """A stored blog post."""

    id: str
    title: str
    content: str
    category: str
    created_at: datetime

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "category": self.category,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "Post":
        return cls(
            id=payload["id"],
            title=payload["title"],
            content=payload["content"],
            category=payload["category"],
            created_at=parse_timestamp(payload["createdAt"]),
        )


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    # SQLite and naive drivers hand back timestamps without tzinfo.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        return ensure_utc(value)
    # fromisoformat only learned the "Z" suffix in 3.11.
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(value))
