"""Pydantic schemas for the detector's JSON wire format."""
from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from ..models import Category


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ImageContent(WireModel):
    content: str = Field(description="Base64-encoded image bytes")


class TextDetectionRequest(WireModel):
    text: str
    blocklist_names: List[str] = Field(default_factory=list, alias="blocklistNames")


class ImageDetectionRequest(WireModel):
    image: ImageContent


class CategoryAnalysis(WireModel):
    category: Category
    severity: Optional[int] = None


class BlocklistMatch(WireModel):
    blocklist_name: Optional[str] = Field(default=None, alias="blocklistName")
    blocklist_item_id: Optional[str] = Field(default=None, alias="blocklistItemId")
    blocklist_item_text: Optional[str] = Field(default=None, alias="blocklistItemText")


class ImageDetectionResult(WireModel):
    categories_analysis: Optional[List[CategoryAnalysis]] = Field(
        default=None, alias="categoriesAnalysis"
    )


class TextDetectionResult(ImageDetectionResult):
    blocklists_match: Optional[List[BlocklistMatch]] = Field(default=None, alias="blocklistsMatch")


DetectionResult = Union[TextDetectionResult, ImageDetectionResult]


class DetectionInnerError(WireModel):
    code: Optional[str] = None
    innererror: Any = None


class DetectionErrorBody(WireModel):
    code: Optional[str] = None
    message: Optional[str] = None
    target: Optional[str] = None
    details: Optional[List[Any]] = None
    innererror: Optional[DetectionInnerError] = None


class DetectionErrorResponse(WireModel):
    error: Optional[DetectionErrorBody] = None
