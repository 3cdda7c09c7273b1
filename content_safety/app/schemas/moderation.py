"""Request and response schemas for the moderation endpoints."""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from ..models import Category, MediaType


class TextModerationPayload(BaseModel):
    text: str = Field(min_length=1, description="Text to moderate")


class ImageModerationPayload(BaseModel):
    image: str = Field(min_length=1, description="Base64-encoded image")


class ImageUrlModerationPayload(BaseModel):
    url: str = Field(min_length=1, description="Location of the image to download")


class ModerationVerdict(BaseModel):
    passed: bool


class AnalyzePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    media_type: MediaType = Field(alias="mediaType")
    content: str = Field(min_length=1)
    reject_thresholds: Optional[Dict[Category, int]] = Field(default=None, alias="rejectThresholds")
    blocklist_names: List[str] = Field(default_factory=list, alias="blocklistNames")


class DecisionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    suggested_action: str = Field(serialization_alias="suggestedAction")
    action_by_category: Dict[str, str] = Field(serialization_alias="actionByCategory")
