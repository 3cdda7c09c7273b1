"""Moderation entry points used by the rest of the marketplace."""
from __future__ import annotations

import base64
import logging
from typing import Iterable, Mapping, Optional

import httpx

from ..clients.detector import DetectorClient
from ..core.config import SafetySettings, get_settings
from ..core.errors import ContentModerationError, DetectionError, InvalidArgumentError
from ..models import Category, Decision, MediaType
from ..policies.moderation import default_reject_thresholds, make_decision, validate_thresholds

logger = logging.getLogger(__name__)


class ContentSafetyService:
    """Reduce detector findings to a pass/fail verdict.

    Moderation is opt-in: while the endpoint or subscription key is missing
    every check passes without touching the network.
    """

    def __init__(
        self,
        settings: SafetySettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._client = client or httpx.AsyncClient(timeout=self.settings.request_timeout)
        self._owns_client = client is None
        self._detector = DetectorClient(
            self.settings.endpoint,
            self.settings.subscription_key.get_secret_value(),
            api_version=self.settings.api_version,
            client=self._client,
        )

    @property
    def detector(self) -> DetectorClient:
        return self._detector

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def is_enabled(self) -> bool:
        endpoint_configured = bool(self.settings.endpoint)
        key_configured = bool(self.settings.subscription_key.get_secret_value())
        enabled = endpoint_configured and key_configured
        if not enabled:
            logger.debug(
                "Content safety disabled (endpoint configured: %s, key configured: %s)",
                endpoint_configured,
                key_configured,
            )
        return enabled

    async def evaluate(
        self,
        media_type: MediaType,
        content: str,
        *,
        reject_thresholds: Optional[Mapping[Category, int]] = None,
        blocklist_names: Iterable[str] = (),
    ) -> Decision:
        """Run one detector round trip and decide on the findings.

        Errors are raised as-is (``InvalidArgumentError``, ``DetectionError``
        or ``httpx.HTTPError``); the ``moderate_*`` methods wrap them.
        """
        thresholds = (
            default_reject_thresholds()
            if reject_thresholds is None
            else validate_thresholds(reject_thresholds)
        )
        result = await self._detector.detect(media_type, content, blocklist_names)
        logger.debug(
            "Detection returned %d categories",
            len(result.categories_analysis or []),
        )
        decision = make_decision(result, thresholds)
        logger.debug("Per-category decisions: %s", decision.action_by_category)
        return decision

    async def moderate_text(self, text: str) -> bool:
        """Return ``True`` when ``text`` is acceptable.

        Text is checked against the configured ``blocklist_names``; with the
        default empty list no blocklists are sent. Configuring blocklists is
        an extension over the fixed empty list the marketplace originally used.
        """
        if not self.is_enabled():
            return True
        decision = await self._moderate(
            MediaType.TEXT, text, "text", blocklist_names=self.settings.blocklist_names
        )
        return decision.accepted

    async def moderate_image(self, base64_image: str) -> bool:
        """Return ``True`` when the base64-encoded image is acceptable."""
        logger.debug("Starting image moderation (base64 length: %d)", len(base64_image or ""))
        if not self.is_enabled():
            logger.debug("Image moderation skipped; accepting without moderation")
            return True
        decision = await self._moderate(MediaType.IMAGE, base64_image, "image")
        logger.info("Image moderation %s", "ACCEPTED" if decision.accepted else "REJECTED")
        return decision.accepted

    async def moderate_image_from_bytes(self, data: bytes | None) -> bool:
        if not self.is_enabled():
            return True
        if not data:
            logger.debug("Image bytes are empty; accepting without moderation")
            return True
        encoded = base64.b64encode(data).decode("ascii")
        return await self.moderate_image(encoded)

    async def moderate_image_from_url(self, url: str | None) -> bool:
        """Download the image at ``url`` and moderate its bytes."""
        if not self.is_enabled():
            return True
        if not url:
            logger.debug("Image URL is empty; accepting without moderation")
            return True

        logger.debug("Downloading image from %s", url)
        try:
            response = await self._client.get(url, follow_redirects=True)
        except httpx.HTTPError as exc:
            logger.error("Failed to download image from %s: %s", url, exc)
            raise ContentModerationError(
                f"Failed to download or moderate image from URL: {url}"
            ) from exc

        if not response.is_success or not response.content:
            logger.error(
                "Failed to download image from %s (status %s, empty body: %s)",
                url,
                response.status_code,
                not response.content,
            )
            raise ContentModerationError(f"Failed to download image from URL: {url}")

        logger.debug("Downloaded image from %s (%d bytes)", url, len(response.content))
        return await self.moderate_image_from_bytes(response.content)

    async def _moderate(
        self,
        media_type: MediaType,
        content: str,
        label: str,
        *,
        blocklist_names: Iterable[str] = (),
    ) -> Decision:
        try:
            return await self.evaluate(media_type, content, blocklist_names=blocklist_names)
        except (DetectionError, InvalidArgumentError) as exc:
            logger.error("Failed to moderate %s content: %s", label, exc)
            raise ContentModerationError(f"Failed to moderate {label} content: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error("Transport failure while moderating %s content: %s", label, exc)
            raise ContentModerationError(f"Failed to moderate {label} content") from exc


_service: ContentSafetyService | None = None


def get_content_safety_service() -> ContentSafetyService:
    global _service  # noqa: PLW0603
    if _service is None:
        _service = ContentSafetyService()
    return _service


async def reset_content_safety_service() -> None:
    """Close the process-wide service and forget it so the next call builds a fresh one."""
    global _service  # noqa: PLW0603
    if _service is not None:
        service, _service = _service, None
        await service.aclose()
