"""Enums shared across the domain layer."""

from enum import Enum


class UpstreamErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    AUTH_FAILURE = "auth_failure"
    GENERIC = "generic"


class PipelineStage(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    ANALYZED = "analyzed"
    EXTRACTED = "extracted"
    OPTIMIZED = "optimized"
    RESPONDED = "responded"
    ERRORED = "errored"
