"""Listing workflow: moderation gates every write to storage."""
from __future__ import annotations

import html
import logging
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from content_safety.app.services.moderation import ContentSafetyService

from ..core.config import AppSettings, get_settings
from ..core.errors import EmailDeliveryError, ListingNotFoundError, ListingRejectedError
from ..core.storage import EmailSender, ListingStore, ObjectStore
from ..models import ImageUpload, Listing

logger = logging.getLogger(__name__)

IMAGE_REJECTED = "Listing contains inappropriate image content and cannot be created."
TEXT_REJECTED = "Listing contains inappropriate text content and cannot be created."


async def create_listing(
    store: ListingStore,
    images: ObjectStore,
    moderation: ContentSafetyService,
    *,
    user_name: str,
    title: str,
    description: str,
    category: str,
    price: str,
    condition: str,
    group_me_link: str | None = None,
    image: ImageUpload | None = None,
    settings: AppSettings | None = None,
) -> Listing:
    """Moderate a listing's image and text, then upload and persist it.

    Nothing reaches the image store or the listing store unless moderation
    accepts both. ``ContentModerationError`` propagates to the caller: a
    listing whose safety cannot be determined is not created.
    """
    settings = settings or get_settings()

    has_image = image is not None and bool(image.data)
    if has_image and not await moderation.moderate_image_from_bytes(image.data):
        logger.info("Rejected listing image from %s", user_name)
        raise ListingRejectedError(IMAGE_REJECTED)

    text = f"{title or ''} {description or ''}"
    if text.strip() and not await moderation.moderate_text(text):
        logger.info("Rejected listing text from %s", user_name)
        raise ListingRejectedError(TEXT_REJECTED)

    image_url: str | None = None
    if has_image:
        key = f"{uuid4()}{image.extension}"
        image_url = await images.upload(key, image.data, content_type=image.content_type)

    now = datetime.now(timezone.utc)
    listing = Listing(
        user_name=user_name,
        title=title,
        description=description,
        category=category,
        price=price,
        condition=condition,
        group_me_link=group_me_link,
        image_url=image_url,
        created_at=now,
        expires_at=now + timedelta(days=settings.listing_ttl_days),
    )
    return await store.save(listing)


async def list_active_listings(store: ListingStore) -> list[Listing]:
    return await store.list_active(datetime.now(timezone.utc))


async def find_listings_by_category(store: ListingStore, category: str) -> list[Listing]:
    listings = await store.find_by_category(category)
    if not listings:
        raise ListingNotFoundError(f"No listings found for category: {category}")
    return listings


async def find_listings_by_title(store: ListingStore, title: str) -> list[Listing]:
    listings = await store.find_by_title(title)
    if not listings:
        raise ListingNotFoundError(f"No listings found for title: {title}")
    return listings


async def delete_listing(store: ListingStore, listing_id: str) -> None:
    await store.delete(listing_id)


async def generate_upload_url(
    images: ObjectStore, *, settings: AppSettings | None = None
) -> dict[str, str]:
    """Issue a pre-signed upload grant for a new listing image."""
    settings = settings or get_settings()
    key = f"{uuid4()}.jpg"
    upload_url = await images.presign_upload(
        key,
        content_type="image/jpeg",
        expires_in=timedelta(hours=settings.upload_url_ttl_hours),
    )
    return {"uploadUrl": upload_url or "", "fileUrl": images.public_url(key)}


async def contact_seller(
    store: ListingStore,
    email: EmailSender,
    *,
    listing_id: str,
    buyer: str,
    message: str,
    settings: AppSettings | None = None,
) -> str:
    settings = settings or get_settings()
    listing = await store.get(listing_id)
    if listing is None:
        raise ListingNotFoundError(f"Listing not found with id: {listing_id}")
    seller = listing.user_name
    if not seller or not seller.strip():
        raise EmailDeliveryError("Listing has no seller email")

    body = (
        f"<p><strong>{html.escape(buyer)}</strong> is interested in your listing: "
        f"<em>{html.escape(listing.title)}</em></p>"
        f"<p>Message:<br/>{html.escape(message)}</p>"
    )
    message_id = await _send(
        email,
        sender=settings.email_sender,
        to=seller,
        subject="Buyer request for your item",
        html_body=body,
    )
    return f"Message sent to seller. Email id: {message_id}"


async def send_contact_us_email(
    email: EmailSender,
    *,
    name: str | None,
    sender_email: str | None,
    message: str | None,
    settings: AppSettings | None = None,
) -> None:
    settings = settings or get_settings()
    if not settings.contact_us_recipient.strip():
        raise EmailDeliveryError("Contact Us recipient is not configured")
    parts: list[str] = []
    if name and name.strip():
        parts.append(f"<p><strong>From:</strong> {html.escape(name)}</p>")
    if sender_email and sender_email.strip():
        parts.append(f"<p><strong>Email:</strong> {html.escape(sender_email)}</p>")
    parts.append(f"<p><strong>Message:</strong></p><p>{html.escape(message or '')}</p>")

    await _send(
        email,
        sender=settings.email_sender,
        to=settings.contact_us_recipient,
        subject="Gus Marketplace - Contact Us",
        html_body="".join(parts),
    )


async def _send(email: EmailSender, *, sender: str, to: str, subject: str, html_body: str) -> str:
    try:
        return await email.send(sender=sender, to=to, subject=subject, html=html_body)
    except Exception as exc:
        logger.error("Failed to send email to %s: %s", to, exc)
        raise EmailDeliveryError(f"Failed to send email: {exc}") from exc
