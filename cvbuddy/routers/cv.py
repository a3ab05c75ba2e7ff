"""
CV endpoints — thin HTTP layer, delegates all logic to the pipeline.
"""

import logging

from fastapi import APIRouter, Depends, Response

from cvbuddy.dependencies import get_cv_pipeline, get_renderer, get_submission
from cvbuddy.domain.errors import SubmissionValidationError
from cvbuddy.domain.models import CVSubmission, ErrorResponse, ProcessCVResponse, RenderCVRequest
from cvbuddy.ports.render_port import RenderPort
from cvbuddy.services.cv_pipeline import CVOptimizationPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["CV"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post(
    "/process-cv",
    response_model=ProcessCVResponse,
    responses=_ERROR_RESPONSES,
)
async def process_cv(
    submission: CVSubmission = Depends(get_submission),
    pipeline: CVOptimizationPipeline = Depends(get_cv_pipeline),
):
    """
    Analyze a job description and rewrite the uploaded CV (PDF) to match it.

    Multipart form fields: ``jobDescription`` (text) and ``cvFile`` (PDF).
    """
    return await pipeline.run(submission)


@router.post(
    "/render-cv",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}, 400: {"model": ErrorResponse}},
)
async def render_cv(
    body: RenderCVRequest,
    renderer: RenderPort = Depends(get_renderer),
):
    """Lay out optimized CV text on A4 pages and return it as a PDF download."""
    if not body.optimized_cv.strip():
        raise SubmissionValidationError("Optimized CV text is required")

    logger.info(f"Rendering optimized CV ({len(body.optimized_cv)} chars)")
    pdf_bytes = renderer.render(body.optimized_cv)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="optimized_cv.pdf"'},
    )
