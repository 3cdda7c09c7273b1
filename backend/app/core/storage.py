"""Interfaces for the listing store, image store and email sender.

The production implementations live outside this repository; the in-memory
variants mimic their behavior for tests and local runs.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Protocol
from uuid import uuid4

from ..models import Listing


class ListingStore(Protocol):
    async def save(self, listing: Listing) -> Listing:
        ...

    async def get(self, listing_id: str) -> Listing | None:
        ...

    async def list_active(self, now: datetime) -> list[Listing]:
        """Return listings that expire after ``now``, newest first."""
        ...

    async def find_by_category(self, category: str) -> list[Listing]:
        ...

    async def find_by_title(self, title: str) -> list[Listing]:
        ...

    async def delete(self, listing_id: str) -> None:
        ...


class ObjectStore(Protocol):
    async def upload(self, key: str, data: bytes, *, content_type: str | None = None) -> str:
        """Store ``data`` under ``key`` and return its public URL."""
        ...

    def public_url(self, key: str) -> str:
        ...

    async def presign_upload(self, key: str, *, content_type: str, expires_in: timedelta) -> str:
        ...


class EmailSender(Protocol):
    async def send(self, *, sender: str, to: str, subject: str, html: str) -> str:
        """Send an HTML message and return the provider's message id."""
        ...


class InMemoryListingStore:
    """Listing store that mimics the document database for tests."""

    def __init__(self) -> None:
        self._listings: dict[str, Listing] = {}

    async def save(self, listing: Listing) -> Listing:
        self._listings[listing.id] = listing
        return listing

    async def get(self, listing_id: str) -> Listing | None:
        return self._listings.get(listing_id)

    async def list_active(self, now: datetime) -> list[Listing]:
        active = [listing for listing in self._listings.values() if listing.is_active(now)]
        return sorted(active, key=lambda listing: listing.created_at, reverse=True)

    async def find_by_category(self, category: str) -> list[Listing]:
        return [listing for listing in self._listings.values() if listing.category == category]

    async def find_by_title(self, title: str) -> list[Listing]:
        return [listing for listing in self._listings.values() if listing.title == title]

    async def delete(self, listing_id: str) -> None:
        self._listings.pop(listing_id, None)


class InMemoryObjectStore:
    """Bucket stand-in producing the same URL shapes as the real store."""

    def __init__(self, bucket: str, region: str) -> None:
        self.bucket = bucket
        self.region = region
        self.objects: dict[str, tuple[bytes, str | None]] = {}

    async def upload(self, key: str, data: bytes, *, content_type: str | None = None) -> str:
        self.objects[key] = (data, content_type)
        return self.public_url(key)

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    async def presign_upload(self, key: str, *, content_type: str, expires_in: timedelta) -> str:
        expires = int((datetime.now(timezone.utc) + expires_in).timestamp())
        return f"{self.public_url(key)}?X-Amz-Expires={expires}&X-Amz-Signature={uuid4().hex}"


class InMemoryEmailSender:
    """Collects outgoing messages instead of delivering them."""

    def __init__(self) -> None:
        self.outbox: defaultdict[str, list[dict[str, str]]] = defaultdict(list)

    async def send(self, *, sender: str, to: str, subject: str, html: str) -> str:
        message_id = uuid4().hex
        self.outbox[to].append(
            {"id": message_id, "sender": sender, "subject": subject, "html": html}
        )
        return message_id
