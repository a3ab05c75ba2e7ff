"""
Pydantic models for requests, responses, and internal data transfer.
Pure data — no I/O, no side effects.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ── Job Analysis ──────────────────────────────────────────────


def _string_list_or_none(value: Any) -> list[str] | None:
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return value
    return None


class JobAnalysis(BaseModel):
    """
    Typed view over the fields the analyzer asks the model for.

    The model is not guaranteed to follow the requested shape, so every
    field is optional and values of the wrong type are dropped to None
    instead of failing validation.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    required_skills: list[str] | None = Field(None, alias="requiredSkills")
    soft_skills: list[str] | None = Field(None, alias="softSkills")
    experience: str | None = None
    education: str | None = None
    key_responsibilities: str | list[str] | None = Field(None, alias="keyResponsibilities")

    @field_validator("required_skills", "soft_skills", mode="before")
    @classmethod
    def _skill_list(cls, value: Any) -> list[str] | None:
        return _string_list_or_none(value)

    @field_validator("experience", "education", mode="before")
    @classmethod
    def _string_or_none(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("key_responsibilities", mode="before")
    @classmethod
    def _responsibilities(cls, value: Any) -> str | list[str] | None:
        if isinstance(value, str):
            return value
        return _string_list_or_none(value)


class StructuredAnalysis(BaseModel):
    """The analyzer's completion parsed cleanly as a JSON object."""

    kind: Literal["structured"] = "structured"
    data: dict[str, Any]

    def as_job_analysis(self) -> JobAnalysis:
        return JobAnalysis.model_validate(self.data)

    def to_payload(self) -> dict[str, Any]:
        # Echo exactly what the model returned
        return self.data


class UnstructuredAnalysis(BaseModel):
    """The analyzer's completion was not a JSON object; keep the raw text."""

    kind: Literal["unstructured"] = "unstructured"
    raw_content: str

    def as_job_analysis(self) -> JobAnalysis:
        return JobAnalysis()

    def to_payload(self) -> dict[str, Any]:
        return {"rawContent": self.raw_content}


AnalysisResult = Annotated[
    Union[StructuredAnalysis, UnstructuredAnalysis],
    Field(discriminator="kind"),
]


# ── Pipeline ──────────────────────────────────────────────────


class CVSubmission(BaseModel):
    """A validated request: job description text plus the raw PDF bytes."""

    job_description: str
    cv_bytes: bytes
    cv_filename: str | None = None


class ProcessCVResponse(BaseModel):
    """Response for POST /api/process-cv."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    job_analysis: dict[str, Any] = Field(..., alias="jobAnalysis")
    original_cv: str = Field(..., alias="originalCV")
    optimized_cv: str = Field(..., alias="optimizedCV")


class ErrorDetails(BaseModel):
    """Diagnostic payload attached to upstream-service failures."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    code: str = "ERROR"
    suggested_action: str = Field(..., alias="suggestedAction")
    expected_url: str | None = Field(None, alias="expectedUrl")


class ErrorResponse(BaseModel):
    """JSON body of every error response."""

    error: str
    details: ErrorDetails | None = None


# ── Rendering ─────────────────────────────────────────────────


class RenderCVRequest(BaseModel):
    """Request body for POST /api/render-cv."""

    model_config = ConfigDict(populate_by_name=True)

    optimized_cv: str = Field("", alias="optimizedCV")


class PositionedLine(BaseModel):
    """One wrapped line of text placed on a page (coordinates in mm, top-left origin)."""

    text: str
    x: float
    y: float
    is_header: bool = False


class LayoutPage(BaseModel):
    lines: list[PositionedLine] = Field(default_factory=list)
