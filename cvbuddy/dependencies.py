"""
Dependency Injection container.

Wires abstract ports → concrete adapters. To swap a provider
(e.g., Azure OpenAI → another completion service), change the adapter
instantiation here. Nothing else in the codebase changes.
"""

from functools import lru_cache

from fastapi import Depends, File, Form, UploadFile

from cvbuddy.adapters.azure_openai_adapter import AzureOpenAIAdapter
from cvbuddy.adapters.pypdf_adapter import PyPdfAdapter
from cvbuddy.adapters.reportlab_renderer import ReportLabRenderer
from cvbuddy.config import Settings, get_settings
from cvbuddy.domain.errors import ConfigurationError
from cvbuddy.domain.models import CVSubmission
from cvbuddy.ports.ai_port import AIPort
from cvbuddy.ports.document_port import DocumentPort
from cvbuddy.ports.render_port import RenderPort
from cvbuddy.services.cv_pipeline import CVOptimizationPipeline, validate_submission
from cvbuddy.services.error_classifier import classify_upstream_error


# ── Singletons (cached) ──────────────────────────────────────


@lru_cache(maxsize=4)
def _get_ai_adapter(settings: Settings) -> AzureOpenAIAdapter:
    # Raises ConfigurationError when endpoint/key are missing; failures are not cached
    return AzureOpenAIAdapter(settings=settings)


@lru_cache(maxsize=1)
def _get_document_adapter() -> PyPdfAdapter:
    return PyPdfAdapter()


@lru_cache(maxsize=1)
def _get_renderer() -> ReportLabRenderer:
    return ReportLabRenderer()


# ── FastAPI Dependencies (return abstract types) ──────────────


def get_ai_service(settings: Settings = Depends(get_settings)) -> AIPort:
    """
    Inject the completion-service adapter.
    Missing configuration is reported like any other upstream failure.
    """
    try:
        return _get_ai_adapter(settings)
    except ConfigurationError as exc:
        raise classify_upstream_error(exc, settings) from exc


def get_document_parser() -> DocumentPort:
    """Inject the PDF text extractor."""
    return _get_document_adapter()


def get_renderer() -> RenderPort:
    """Inject the CV → PDF renderer."""
    return _get_renderer()


async def get_submission(
    job_description: str | None = Form(None, alias="jobDescription"),
    cv_file: UploadFile | None = File(None, alias="cvFile"),
) -> CVSubmission:
    """Read and validate the multipart form before any collaborator is built."""
    cv_bytes = await cv_file.read() if cv_file is not None else None
    return validate_submission(
        job_description=job_description,
        cv_bytes=cv_bytes,
        cv_content_type=cv_file.content_type if cv_file is not None else None,
        cv_filename=cv_file.filename if cv_file is not None else None,
    )


# ── Domain Services ───────────────────────────────────────────


def get_cv_pipeline(
    ai: AIPort = Depends(get_ai_service),
    docs: DocumentPort = Depends(get_document_parser),
    settings: Settings = Depends(get_settings),
) -> CVOptimizationPipeline:
    """Injects the AI and document adapters into the CV pipeline."""
    return CVOptimizationPipeline(ai=ai, documents=docs, settings=settings)
