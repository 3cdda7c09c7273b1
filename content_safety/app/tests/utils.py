"""Helpers for faking the detector in tests."""
from __future__ import annotations

from typing import Any, Callable

import httpx

from ..core.config import SafetySettings
from ..services.moderation import ContentSafetyService

DETECTOR_ENDPOINT = "https://detector.test"
SUBSCRIPTION_KEY = "test-subscription-key"

Handler = Callable[[httpx.Request], httpx.Response]


def enabled_settings(**overrides: Any) -> SafetySettings:
    values: dict[str, Any] = {"endpoint": DETECTOR_ENDPOINT, "subscription_key": SUBSCRIPTION_KEY}
    values.update(overrides)
    return SafetySettings(**values)


def disabled_settings(**overrides: Any) -> SafetySettings:
    values: dict[str, Any] = {"endpoint": "", "subscription_key": ""}
    values.update(overrides)
    return SafetySettings(**values)


def analysis_body(
    hate: int = 0,
    self_harm: int = 0,
    sexual: int = 0,
    violence: int = 0,
    blocklist_matches: list[dict[str, str]] | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "categoriesAnalysis": [
            {"category": "Hate", "severity": hate},
            {"category": "SelfHarm", "severity": self_harm},
            {"category": "Sexual", "severity": sexual},
            {"category": "Violence", "severity": violence},
        ]
    }
    if blocklist_matches is not None:
        body["blocklistsMatch"] = blocklist_matches
    return body


class RecordingHandler:
    """Mock transport handler that records every request it serves."""

    def __init__(self, respond: Handler) -> None:
        self._respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)


def make_service(
    respond: Handler, settings: SafetySettings | None = None
) -> tuple[ContentSafetyService, RecordingHandler]:
    handler = RecordingHandler(respond)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    service = ContentSafetyService(settings or enabled_settings(), client=client)
    return service, handler
