"""Errors raised by the listing workflow."""
from __future__ import annotations


class ListingError(Exception):
    """Base class for listing workflow failures."""


class ListingRejectedError(ListingError):
    """Raised when moderation rejects the content of a new listing."""


class ListingNotFoundError(ListingError, LookupError):
    """Raised when a lookup matches no listing."""


class EmailDeliveryError(ListingError):
    """Raised when an outbound email cannot be sent."""
