"""Domain types shared by the detector client and the decision engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, StrEnum


class MediaType(StrEnum):
    TEXT = "Text"
    IMAGE = "Image"


class Category(StrEnum):
    """Harm categories reported by the detector, valued by their wire names."""

    HATE = "Hate"
    SELF_HARM = "SelfHarm"
    SEXUAL = "Sexual"
    VIOLENCE = "Violence"


class Action(IntEnum):
    """Moderation outcome. Ordered so that ``max`` picks the strictest action."""

    ACCEPT = 0
    REJECT = 1

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class Decision:
    suggested_action: Action
    action_by_category: dict[Category, Action] = field(default_factory=dict)

    @property
    def accepted(self) -> bool:
        return self.suggested_action is Action.ACCEPT
