"""Tests for the detector HTTP client."""

import asyncio
import json

import httpx
import pytest

from ..clients.detector import SUBSCRIPTION_KEY_HEADER, DetectorClient
from ..core.errors import DetectionError, InvalidArgumentError
from ..models import Category, MediaType
from ..schemas.detection import ImageDetectionResult, TextDetectionResult
from .utils import DETECTOR_ENDPOINT, SUBSCRIPTION_KEY, RecordingHandler, analysis_body


def _detector(handler: RecordingHandler) -> DetectorClient:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return DetectorClient(DETECTOR_ENDPOINT, SUBSCRIPTION_KEY, client=client)


def _unused(request: httpx.Request) -> httpx.Response:  # pragma: no cover - must not be called
    raise AssertionError(f"unexpected request to {request.url}")


def test_build_endpoint_per_media_type() -> None:
    detector = DetectorClient(f"{DETECTOR_ENDPOINT}/", SUBSCRIPTION_KEY)

    assert detector.build_endpoint(MediaType.TEXT) == (
        "https://detector.test/contentsafety/text:analyze?api-version=2024-09-01"
    )
    assert detector.build_endpoint(MediaType.IMAGE) == (
        "https://detector.test/contentsafety/image:analyze?api-version=2024-09-01"
    )


def test_unknown_media_type_is_rejected_before_any_request() -> None:
    handler = RecordingHandler(_unused)
    detector = _detector(handler)

    with pytest.raises(InvalidArgumentError, match="Invalid Media Type"):
        detector.build_endpoint("Video")  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        asyncio.run(detector.detect("Audio", "hello"))  # type: ignore[arg-type]
    assert handler.requests == []


def test_text_request_body_carries_blocklists() -> None:
    detector = DetectorClient(DETECTOR_ENDPOINT, SUBSCRIPTION_KEY)

    body = detector.build_request_body(MediaType.TEXT, "hello there", ["scams"])

    assert body == {"text": "hello there", "blocklistNames": ["scams"]}


def test_image_request_body_passes_base64_through() -> None:
    detector = DetectorClient(DETECTOR_ENDPOINT, SUBSCRIPTION_KEY)

    body = detector.build_request_body(MediaType.IMAGE, "QUJD")

    assert body == {"image": {"content": "QUJD"}}
    assert json.loads(json.dumps(body))["image"]["content"] == "QUJD"


def test_detect_text_parses_severities_and_blocklists() -> None:
    asyncio.run(_detect_text())


async def _detect_text() -> None:
    def respond(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=analysis_body(
                sexual=6, blocklist_matches=[{"blocklistName": "scams", "blocklistItemId": "7"}]
            ),
        )

    handler = RecordingHandler(respond)
    detector = _detector(handler)

    result = await detector.detect(MediaType.TEXT, "buy now", ["scams"])

    assert isinstance(result, TextDetectionResult)
    severities = {item.category: item.severity for item in result.categories_analysis or []}
    assert severities[Category.SEXUAL] == 6
    assert result.blocklists_match is not None
    assert result.blocklists_match[0].blocklist_item_id == "7"

    [request] = handler.requests
    assert request.method == "POST"
    assert request.url.path == "/contentsafety/text:analyze"
    assert request.url.params["api-version"] == "2024-09-01"
    assert request.headers[SUBSCRIPTION_KEY_HEADER] == SUBSCRIPTION_KEY
    assert request.headers["content-type"].startswith("application/json")
    assert json.loads(request.content) == {"text": "buy now", "blocklistNames": ["scams"]}
    await detector.aclose()


def test_detect_image_uses_image_schema() -> None:
    asyncio.run(_detect_image())


async def _detect_image() -> None:
    handler = RecordingHandler(lambda request: httpx.Response(200, json=analysis_body(violence=2)))
    detector = _detector(handler)

    result = await detector.detect(MediaType.IMAGE, "QUJD")

    assert type(result) is ImageDetectionResult
    assert handler.requests[0].url.path == "/contentsafety/image:analyze"
    assert json.loads(handler.requests[0].content) == {"image": {"content": "QUJD"}}


def _detect_error(response: httpx.Response) -> DetectionError:
    detector = _detector(RecordingHandler(lambda request: response))
    with pytest.raises(DetectionError) as excinfo:
        asyncio.run(detector.detect(MediaType.TEXT, "hello"))
    return excinfo.value


def test_error_envelope_is_parsed() -> None:
    error = _detect_error(
        httpx.Response(401, json={"error": {"code": "Unauthorized", "message": "bad key"}})
    )

    assert error.code == "Unauthorized"
    assert error.message == "bad key"
    assert str(error) == "Error Code: Unauthorized, Message: bad key"


def test_error_envelope_without_code_keeps_status_and_body() -> None:
    error = _detect_error(httpx.Response(400, json={"error": {"message": "missing code"}}))

    assert error.code == "400"
    assert error.message.startswith("Error is null. Response text is ")
    assert "missing code" in error.message


def test_unparsable_error_body_keeps_status_and_body() -> None:
    error = _detect_error(httpx.Response(503, text="<html>upstream down</html>"))

    assert error.code == "503"
    assert "<html>upstream down</html>" in error.message


def test_empty_body_is_a_detection_error() -> None:
    error = _detect_error(httpx.Response(500))

    assert error.code == "500"
    assert error.message == "Response body is null."


def test_unparsable_success_body_is_a_detection_error() -> None:
    error = _detect_error(httpx.Response(200, text="not json"))

    assert error.code == "200"
    assert error.message == "HttpResponse is null. Response text is not json"


def test_null_success_body_is_a_detection_error() -> None:
    error = _detect_error(httpx.Response(200, text="null"))

    assert error.code == "200"


def test_transport_failures_propagate() -> None:
    def respond(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    detector = _detector(RecordingHandler(respond))

    with pytest.raises(httpx.TransportError):
        asyncio.run(detector.detect(MediaType.TEXT, "hello"))
