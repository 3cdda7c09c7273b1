"""Exception hierarchy for the content safety service.

Callers outside the service only ever see :class:`ContentModerationError`;
the other kinds are raised internally and chained as its ``__cause__``.
"""
from __future__ import annotations


class ContentSafetyError(Exception):
    """Base class for all content safety exceptions."""

    code = "CONTENT_SAFETY_ERROR"
    retryable = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgumentError(ContentSafetyError, ValueError):
    """Raised for unsupported media types, bad thresholds or missing categories."""

    code = "INVALID_ARGUMENT"


class DetectionError(ContentSafetyError):
    """Raised when the detector answers with an error or an unusable body."""

    retryable = False

    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"Error Code: {code}, Message: {message}")
        self.code = code
        self.message = message


class ContentModerationError(ContentSafetyError):
    """Raised when the safety of a piece of content could not be determined."""

    code = "MODERATION_FAILED"
