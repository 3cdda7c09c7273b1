"""Entrypoint for the content safety service."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from .core.config import get_settings
from .core.errors import ContentModerationError, DetectionError, InvalidArgumentError
from .schemas.moderation import (
    AnalyzePayload,
    DecisionResponse,
    ImageModerationPayload,
    ImageUrlModerationPayload,
    ModerationVerdict,
    TextModerationPayload,
)
from .services.moderation import (
    ContentSafetyService,
    get_content_safety_service,
    reset_content_safety_service,
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Application factory used by ASGI servers."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):  # noqa: ARG001 - FastAPI lifespan signature
        try:
            yield
        finally:
            await reset_content_safety_service()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    @app.exception_handler(ContentModerationError)
    async def moderation_failed(request: Request, exc: ContentModerationError) -> JSONResponse:  # noqa: ARG001
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": "moderation_failed", "message": exc.message},
        )

    @app.get("/health", summary="Service health probe")
    def read_health(
        service: ContentSafetyService = Depends(get_content_safety_service),
    ) -> dict[str, object]:
        return {
            "status": "ok",
            "service": settings.app_name,
            "moderationEnabled": service.is_enabled(),
        }

    @app.post("/moderation/text", response_model=ModerationVerdict)
    async def moderate_text(
        payload: TextModerationPayload,
        service: ContentSafetyService = Depends(get_content_safety_service),
    ) -> ModerationVerdict:
        return ModerationVerdict(passed=await service.moderate_text(payload.text))

    @app.post("/moderation/image", response_model=ModerationVerdict)
    async def moderate_image(
        payload: ImageModerationPayload,
        service: ContentSafetyService = Depends(get_content_safety_service),
    ) -> ModerationVerdict:
        return ModerationVerdict(passed=await service.moderate_image(payload.image))

    @app.post("/moderation/image-url", response_model=ModerationVerdict)
    async def moderate_image_url(
        payload: ImageUrlModerationPayload,
        service: ContentSafetyService = Depends(get_content_safety_service),
    ) -> ModerationVerdict:
        return ModerationVerdict(passed=await service.moderate_image_from_url(payload.url))

    @app.post("/moderation/analyze", response_model=DecisionResponse, response_model_by_alias=True)
    async def analyze(
        payload: AnalyzePayload,
        service: ContentSafetyService = Depends(get_content_safety_service),
    ) -> DecisionResponse:
        """Return the full per-category breakdown for one piece of content."""
        if not service.is_enabled():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Content moderation is not configured",
            )
        try:
            decision = await service.evaluate(
                payload.media_type,
                payload.content,
                reject_thresholds=payload.reject_thresholds,
                blocklist_names=payload.blocklist_names,
            )
        except InvalidArgumentError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=exc.message
            ) from None
        except (DetectionError, httpx.HTTPError) as exc:
            raise ContentModerationError(f"Failed to analyze content: {exc}") from exc

        return DecisionResponse(
            suggested_action=decision.suggested_action.label,
            action_by_category={
                str(category): action.label
                for category, action in decision.action_by_category.items()
            },
        )

    return app


app = create_app()
