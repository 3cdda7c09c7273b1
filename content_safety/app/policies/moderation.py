"""Threshold-based moderation decisions over detector severities."""
from __future__ import annotations

import logging
from typing import Mapping, Optional

from ..core.errors import InvalidArgumentError
from ..models import Action, Category, Decision
from ..schemas.detection import DetectionResult, TextDetectionResult

logger = logging.getLogger(__name__)

# -1 disables a category, any other value N rejects severities >= N.
VALID_THRESHOLD_VALUES: tuple[int, ...] = (-1, 0, 2, 4, 6)
DISABLED_THRESHOLD = -1

DEFAULT_REJECT_THRESHOLDS: Mapping[Category, int] = {
    Category.HATE: 4,
    Category.SELF_HARM: 4,
    Category.SEXUAL: 4,
    Category.VIOLENCE: 4,
}


def default_reject_thresholds() -> dict[Category, int]:
    """Reject medium severity and above on every category."""
    return dict(DEFAULT_REJECT_THRESHOLDS)


def validate_threshold(category: Category, threshold: Optional[int]) -> int:
    if threshold is None or threshold not in VALID_THRESHOLD_VALUES:
        logger.error(
            "Invalid reject threshold for category %s: %s (valid values: %s)",
            category,
            threshold,
            VALID_THRESHOLD_VALUES,
        )
        raise InvalidArgumentError("RejectThreshold can only be in (-1, 0, 2, 4, 6)")
    return threshold


def validate_thresholds(reject_thresholds: Mapping[Category, Optional[int]]) -> dict[Category, int]:
    """Return a validated copy of ``reject_thresholds``."""
    return {
        category: validate_threshold(category, threshold)
        for category, threshold in reject_thresholds.items()
    }


def get_severity(category: Category, result: DetectionResult) -> int:
    """Return the severity the detector reported for ``category``."""
    analyses = result.categories_analysis if result is not None else None
    if analyses is None:
        logger.error("Detection result has no category analysis; cannot read %s", category)
        raise InvalidArgumentError("DetectionResult or categoriesAnalysis is null")

    for analysis in analyses:
        if analysis.category == category:
            if analysis.severity is None:
                raise InvalidArgumentError(f"Can not find detection result for {category}")
            return analysis.severity

    available = ", ".join(str(analysis.category) for analysis in analyses) or "none"
    logger.error(
        "Category %s not found in detection result. Available categories: %s", category, available
    )
    raise InvalidArgumentError(f"Invalid Category {category}")


def category_action(severity: int, threshold: int) -> Action:
    if threshold != DISABLED_THRESHOLD and severity >= threshold:
        return Action.REJECT
    return Action.ACCEPT


def make_decision(
    result: DetectionResult, reject_thresholds: Mapping[Category, Optional[int]]
) -> Decision:
    """Decide whether to accept content given per-category reject thresholds.

    Only categories present in ``reject_thresholds`` are evaluated; a category
    left out of the mapping can never cause a rejection. Any blocklist match on
    a text result rejects the content regardless of severities.
    """
    logger.debug("Making moderation decision over %d categories", len(reject_thresholds))

    action_by_category: dict[Category, Action] = {}
    final_action = Action.ACCEPT

    for category, threshold in reject_thresholds.items():
        checked = validate_threshold(category, threshold)
        severity = get_severity(category, result)
        action = category_action(severity, checked)
        action_by_category[category] = action
        if action > final_action:
            final_action = action
            logger.debug("Final action updated to %s due to category %s", action.label, category)

    if isinstance(result, TextDetectionResult) and result.blocklists_match:
        logger.debug("Text blocklist match detected; rejecting content")
        final_action = Action.REJECT

    logger.info("Moderation %s", "ACCEPTED" if final_action is Action.ACCEPT else "REJECTED")
    return Decision(suggested_action=final_action, action_by_category=action_by_category)
