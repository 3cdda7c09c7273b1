"""Domain models for the marketplace backend."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4


@dataclass
class Listing:
    user_name: str
    title: str
    description: str
    category: str
    price: str
    condition: str
    group_me_link: str | None = None
    image_url: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: datetime | None = None

    def is_active(self, now: datetime) -> bool:
        return self.expires_at is None or self.expires_at > now


@dataclass(frozen=True)
class ImageUpload:
    """An image attached to a listing submission."""

    data: bytes
    filename: str | None = None
    content_type: str | None = None

    @property
    def extension(self) -> str:
        if self.filename and "." in self.filename:
            return self.filename[self.filename.rindex(".") :]
        return ".jpg"
