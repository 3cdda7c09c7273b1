"""HTTP client for the external content analysis API."""
from __future__ import annotations

import json
import logging
from typing import Any, Iterable

import httpx
from pydantic import ValidationError

from ..core.config import DEFAULT_API_VERSION
from ..core.errors import DetectionError, InvalidArgumentError
from ..models import MediaType
from ..schemas.detection import (
    DetectionErrorResponse,
    DetectionResult,
    ImageContent,
    ImageDetectionRequest,
    ImageDetectionResult,
    TextDetectionRequest,
    TextDetectionResult,
)

logger = logging.getLogger(__name__)

SUBSCRIPTION_KEY_HEADER = "Ocp-Apim-Subscription-Key"

_ANALYZE_PATHS: dict[MediaType, str] = {
    MediaType.TEXT: "contentsafety/text:analyze",
    MediaType.IMAGE: "contentsafety/image:analyze",
}

_RESULT_SCHEMAS: dict[MediaType, type[ImageDetectionResult]] = {
    MediaType.TEXT: TextDetectionResult,
    MediaType.IMAGE: ImageDetectionResult,
}


def coerce_media_type(value: Any) -> MediaType:
    if isinstance(value, MediaType):
        return value
    try:
        return MediaType(value)
    except ValueError:
        raise InvalidArgumentError(f"Invalid Media Type {value}") from None


class DetectorClient:
    """Sends analysis requests and turns responses into typed results.

    The client keeps no per-call state, so one instance (and the
    ``httpx.AsyncClient`` behind it) can serve concurrent requests.
    """

    def __init__(
        self,
        endpoint: str,
        subscription_key: str,
        *,
        api_version: str = DEFAULT_API_VERSION,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._subscription_key = subscription_key
        self._api_version = api_version
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def build_endpoint(self, media_type: MediaType) -> str:
        path = _ANALYZE_PATHS[coerce_media_type(media_type)]
        return f"{self._endpoint}/{path}?api-version={self._api_version}"

    def build_request_body(
        self, media_type: MediaType, content: str, blocklist_names: Iterable[str] = ()
    ) -> dict[str, Any]:
        """Return the JSON payload for ``media_type``.

        Image content must already be base64-encoded; it is sent verbatim.
        """
        media_type = coerce_media_type(media_type)
        if media_type is MediaType.TEXT:
            request: TextDetectionRequest | ImageDetectionRequest = TextDetectionRequest(
                text=content, blocklist_names=list(blocklist_names)
            )
        else:
            request = ImageDetectionRequest(image=ImageContent(content=content))
        return request.model_dump(by_alias=True)

    def parse_result(self, body: str, media_type: MediaType) -> DetectionResult:
        schema = _RESULT_SCHEMAS[coerce_media_type(media_type)]
        return schema.model_validate_json(body)

    async def detect(
        self, media_type: MediaType, content: str, blocklist_names: Iterable[str] = ()
    ) -> DetectionResult:
        """Analyze ``content`` and return the detector's per-category findings.

        Raises :class:`DetectionError` when the detector reports an error or
        returns a body that cannot be read. Transport failures such as
        timeouts surface as ``httpx.TransportError`` and are not retried.
        """
        url = self.build_endpoint(media_type)
        payload = json.dumps(self.build_request_body(media_type, content, blocklist_names))
        logger.debug(
            "Sending %s detection request to %s (payload size: %d chars)",
            media_type,
            url,
            len(payload),
        )

        response = await self._client.post(
            url,
            content=payload,
            headers={
                SUBSCRIPTION_KEY_HEADER: self._subscription_key,
                "Content-Type": "application/json; charset=utf-8",
            },
        )
        status = str(response.status_code)
        logger.debug("Detector responded with status %s", status)

        if not response.content:
            logger.error("Detector response body is empty (status %s)", status)
            raise DetectionError(status, "Response body is null.")

        text = response.text
        if not response.is_success:
            raise self._error_from_response(status, text)

        try:
            result = self.parse_result(text, media_type)
        except ValidationError:
            logger.error("Failed to parse detection result: %s", text)
            raise DetectionError(
                status, f"HttpResponse is null. Response text is {text}"
            ) from None

        logger.debug("Parsed %s detection result", media_type)
        return result

    @staticmethod
    def _error_from_response(status: str, text: str) -> DetectionError:
        logger.error("Detector returned an error (status %s): %s", status, text)
        try:
            envelope = DetectionErrorResponse.model_validate_json(text)
        except ValidationError:
            envelope = None

        error = envelope.error if envelope is not None else None
        if error is None or error.code is None or error.message is None:
            return DetectionError(status, f"Error is null. Response text is {text}")
        return DetectionError(error.code, error.message)
