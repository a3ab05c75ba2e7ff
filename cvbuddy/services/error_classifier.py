"""
Classifies completion-service failures into operator-facing error shapes.

Typed signals from the openai SDK (exception class, HTTP status, error code)
are checked first. Substring matching on the message is the last resort for
errors that carry nothing structured.
"""

import logging

import openai

from cvbuddy.config import Settings
from cvbuddy.domain.enums import UpstreamErrorKind
from cvbuddy.domain.errors import ConfigurationError, UpstreamServiceError
from cvbuddy.domain.models import ErrorDetails

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "Error analyzing job description"
DEFAULT_CODE = "ERROR"

NOT_FOUND_CODES = {"404", "DeploymentNotFound"}
AUTH_CODES = {"InvalidAPIKey"}

NOT_FOUND_ERROR = "Azure OpenAI Resource Not Found: Please check your deployment configuration."
AUTH_ERROR = "Azure OpenAI Authentication Error: Invalid or missing API key."

NOT_FOUND_ACTION = (
    "Verify that the deployment exists in Azure and that the endpoint URL is correct"
)
AUTH_ACTION = "Check that your API key is correct and active"
GENERIC_ACTION = "Check the error details and Azure OpenAI configuration"


def error_message(exc: BaseException) -> str:
    """Human-readable text of an exception (openai errors carry .message)."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc)


def error_status(exc: BaseException) -> int | None:
    for attr in ("status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    return None


def error_code(exc: BaseException) -> str | None:
    code = getattr(exc, "code", None)
    return str(code) if code else None


def detect_kind(exc: BaseException) -> UpstreamErrorKind:
    """Decide which bucket an upstream failure belongs to."""

    if isinstance(exc, ConfigurationError):
        return UpstreamErrorKind.GENERIC

    message = error_message(exc).lower()
    code = error_code(exc)
    status = error_status(exc)

    # Typed errors and structured codes first
    if isinstance(exc, openai.NotFoundError) or code in NOT_FOUND_CODES:
        return UpstreamErrorKind.NOT_FOUND
    if isinstance(exc, openai.AuthenticationError) or status == 401 or code in AUTH_CODES:
        return UpstreamErrorKind.AUTH_FAILURE

    # Message heuristics
    if "not found" in message:
        return UpstreamErrorKind.NOT_FOUND
    if "authenticate" in message or "api key" in message:
        return UpstreamErrorKind.AUTH_FAILURE

    return UpstreamErrorKind.GENERIC


def classify_upstream_error(exc: BaseException, settings: Settings) -> UpstreamServiceError:
    """Wrap an analyzer failure into the structured error the API returns."""

    kind = detect_kind(exc)
    message = error_message(exc) or DEFAULT_MESSAGE
    code = error_code(exc) or DEFAULT_CODE
    status = error_status(exc) or 500

    if kind is UpstreamErrorKind.NOT_FOUND:
        error = NOT_FOUND_ERROR
        details = ErrorDetails(
            message=message,
            code=code,
            suggested_action=NOT_FOUND_ACTION,
            expected_url=settings.expected_url,
        )
    elif kind is UpstreamErrorKind.AUTH_FAILURE:
        error = AUTH_ERROR
        details = ErrorDetails(message=message, code=code, suggested_action=AUTH_ACTION)
    else:
        error = message
        details = ErrorDetails(
            message=message,
            code=code,
            suggested_action=GENERIC_ACTION,
            expected_url=settings.expected_url,
        )

    logger.error(f"Upstream failure classified as {kind.value} (status={status}, code={code}): {message}")
    return UpstreamServiceError(error, kind=kind, details=details, status_code=status)
