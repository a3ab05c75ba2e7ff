"""
Error taxonomy for the CV pipeline.

Every error knows its HTTP status and how to render itself as the JSON body
the API returns, so routers and exception handlers never build error
payloads by hand.
"""

from __future__ import annotations

from typing import Any

from cvbuddy.domain.enums import UpstreamErrorKind
from cvbuddy.domain.models import ErrorDetails, ErrorResponse


class CVBuddyError(RuntimeError):
    """Base class for every failure the API reports as a structured error."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.message)

    def to_body(self) -> dict[str, Any]:
        return self.to_response().model_dump(by_alias=True, exclude_none=True)


class SubmissionValidationError(CVBuddyError):
    """Missing or invalid form input. Raised before any upstream call."""

    status_code = 400


class ConfigurationError(CVBuddyError):
    """Required Azure OpenAI settings are missing from the environment."""

    code = "ConfigurationError"


class UpstreamServiceError(CVBuddyError):
    """The completion service call failed, classified for operators."""

    def __init__(
        self,
        message: str,
        kind: UpstreamErrorKind,
        details: ErrorDetails,
        status_code: int = 500,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.kind = kind
        self.details = details

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.message, details=self.details)


class ExtractionError(CVBuddyError):
    """The uploaded document could not be parsed into text."""


class EmptyResultError(CVBuddyError):
    """A collaborator succeeded but produced nothing usable."""


class OptimizationError(CVBuddyError):
    """The CV rewrite call failed."""
