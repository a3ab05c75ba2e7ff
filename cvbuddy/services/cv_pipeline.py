"""
CV optimization pipeline — analyze job description → extract CV text → rewrite CV.
Depends on ports only (Dependency Inversion).

Each request walks a linear sequence of stages:

    received → validated → analyzed → extracted → optimized → responded

Any failure moves the request to ``errored`` and raises a CVBuddyError
carrying the status and body the API should return.
"""

import logging
import uuid

from cvbuddy.config import Settings
from cvbuddy.domain.enums import PipelineStage
from cvbuddy.domain.errors import (
    CVBuddyError,
    EmptyResultError,
    ExtractionError,
    OptimizationError,
    SubmissionValidationError,
)
from cvbuddy.domain.models import CVSubmission, ProcessCVResponse
from cvbuddy.ports.ai_port import AIPort
from cvbuddy.ports.document_port import DocumentPort
from cvbuddy.services.error_classifier import classify_upstream_error, error_message

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"


def validate_submission(
    job_description: str | None,
    cv_bytes: bytes | None,
    cv_content_type: str | None,
    cv_filename: str | None = None,
) -> CVSubmission:
    """
    Check the raw form input. Raises SubmissionValidationError (400) when the
    job description or CV file is missing, or the file is not a PDF.
    """
    logger.info(f"→ {PipelineStage.RECEIVED.value} (file={cv_filename!r}, type={cv_content_type!r})")

    if not job_description or not job_description.strip():
        raise SubmissionValidationError("Job description is required")

    if cv_bytes is None:
        raise SubmissionValidationError("CV file is required")

    if cv_content_type != PDF_MEDIA_TYPE:
        raise SubmissionValidationError("CV file must be a PDF")

    return CVSubmission(
        job_description=job_description,
        cv_bytes=cv_bytes,
        cv_filename=cv_filename,
    )


class CVOptimizationPipeline:
    """Orchestrates the two completion calls around PDF text extraction."""

    def __init__(self, ai: AIPort, documents: DocumentPort, settings: Settings) -> None:
        self._ai = ai
        self._docs = documents
        self._settings = settings

    async def run(self, submission: CVSubmission) -> ProcessCVResponse:
        """
        Full pipeline for one validated submission:
        1. Analyze the job description
        2. Extract text from the CV PDF
        3. Rewrite the CV against the analysis

        Returns the analysis payload, the extracted text and the rewritten CV.
        """
        run_id = uuid.uuid4().hex[:8]
        self._log_stage(run_id, PipelineStage.VALIDATED)

        try:
            response = await self._run_stages(run_id, submission)
        except CVBuddyError as exc:
            self._log_stage(run_id, PipelineStage.ERRORED, f"{type(exc).__name__}: {exc.message}")
            raise

        self._log_stage(run_id, PipelineStage.RESPONDED)
        return response

    async def _run_stages(self, run_id: str, submission: CVSubmission) -> ProcessCVResponse:
        # Step 1: Analyze the job description
        try:
            analysis = await self._ai.analyze_job_description(submission.job_description)
        except Exception as exc:
            raise classify_upstream_error(exc, self._settings) from exc

        if analysis is None:
            raise EmptyResultError("Failed to analyze job description")
        self._log_stage(run_id, PipelineStage.ANALYZED, analysis.kind)

        # Step 2: Extract text from the CV
        try:
            cv_text = await self._docs.extract_text(submission.cv_bytes)
        except Exception as exc:
            raise ExtractionError(
                f"Error extracting text from CV: {error_message(exc)}"
            ) from exc

        if not cv_text:
            raise EmptyResultError("Failed to extract text from CV")
        self._log_stage(run_id, PipelineStage.EXTRACTED, f"{len(cv_text)} chars")

        # Step 3: Rewrite the CV
        try:
            optimized_cv = await self._ai.optimize_cv(analysis, cv_text)
        except Exception as exc:
            raise OptimizationError(error_message(exc) or "Error optimizing CV") from exc
        self._log_stage(run_id, PipelineStage.OPTIMIZED, f"{len(optimized_cv)} chars")

        return ProcessCVResponse(
            job_analysis=analysis.to_payload(),
            original_cv=cv_text,
            optimized_cv=optimized_cv,
        )

    @staticmethod
    def _log_stage(run_id: str, stage: PipelineStage, note: str = "") -> None:
        suffix = f" ({note})" if note else ""
        if stage is PipelineStage.ERRORED:
            logger.error(f"[{run_id}] → {stage.value}{suffix}")
        else:
            logger.info(f"[{run_id}] → {stage.value}{suffix}")
