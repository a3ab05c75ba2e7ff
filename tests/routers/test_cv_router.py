"""
Endpoint tests for /api/process-cv and /api/render-cv.

Collaborators are swapped through app.dependency_overrides, so no request
ever reaches Azure OpenAI and the process environment is never mutated.
"""

import httpx
import openai
import pytest
from fastapi.testclient import TestClient

from cvbuddy.config import Settings, get_settings
from cvbuddy.dependencies import get_ai_service, get_cv_pipeline, get_document_parser
from cvbuddy.domain.models import StructuredAnalysis, UnstructuredAnalysis
from cvbuddy.services.error_classifier import AUTH_ERROR, NOT_FOUND_ERROR
from main import app

JOB_DESCRIPTION = "Seeking a backend engineer with Go experience"


@pytest.fixture
def client(settings, mock_ai, mock_docs):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_ai_service] = lambda: mock_ai
    app.dependency_overrides[get_document_parser] = lambda: mock_docs
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def unconfigured():
    """Real adapter wiring with no endpoint or key configured."""
    broken = Settings(_env_file=None, endpoint="", api_key="")
    app.dependency_overrides[get_settings] = lambda: broken
    app.dependency_overrides.pop(get_ai_service, None)
    return broken


@pytest.fixture
def pdf_file(make_pdf):
    return {"cvFile": ("cv.pdf", make_pdf("Jane Doe - 5 years backend development"), "application/pdf")}


def post_cv(client, data=None, files=None):
    return client.post("/api/process-cv", data=data or {}, files=files)


def assert_no_upstream_calls(mock_ai, mock_docs):
    assert mock_ai.analyze_job_description.await_count == 0
    assert mock_ai.optimize_cv.await_count == 0
    assert mock_docs.extract_text.await_count == 0


# ── Success ───────────────────────────────────────────────────


def test_round_trip_returns_mocked_collaborator_output(client, pdf_file, mock_ai, mock_docs):
    analysis = {
        "requiredSkills": ["Go", "PostgreSQL"],
        "softSkills": ["Communication"],
        "experience": "3+ years backend",
        "education": "BSc Computer Science",
        "keyResponsibilities": ["Build APIs"],
    }
    mock_ai.analyze_job_description.return_value = StructuredAnalysis(data=analysis)
    mock_docs.extract_text.return_value = "Jane Doe — 5 years backend development"
    mock_ai.optimize_cv.return_value = "Jane Doe — Go backend engineer"

    response = post_cv(client, {"jobDescription": JOB_DESCRIPTION}, pdf_file)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "jobAnalysis": analysis,
        "originalCV": "Jane Doe — 5 years backend development",
        "optimizedCV": "Jane Doe — Go backend engineer",
    }
    mock_ai.analyze_job_description.assert_awaited_once_with(JOB_DESCRIPTION)


def test_unparseable_analysis_is_returned_as_raw_content(client, pdf_file, mock_ai):
    mock_ai.analyze_job_description.return_value = UnstructuredAnalysis(raw_content="Go and SQL")

    response = post_cv(client, {"jobDescription": JOB_DESCRIPTION}, pdf_file)

    assert response.status_code == 200
    assert response.json()["jobAnalysis"] == {"rawContent": "Go and SQL"}
    mock_ai.optimize_cv.assert_awaited_once()


# ── Validation (400, no upstream calls) ───────────────────────


def test_missing_job_description(client, pdf_file, mock_ai, mock_docs):
    response = post_cv(client, files=pdf_file)

    assert response.status_code == 400
    assert response.json() == {"error": "Job description is required"}
    assert_no_upstream_calls(mock_ai, mock_docs)


def test_missing_cv_file(client, mock_ai, mock_docs):
    response = post_cv(client, {"jobDescription": JOB_DESCRIPTION})

    assert response.status_code == 400
    assert response.json() == {"error": "CV file is required"}
    assert_no_upstream_calls(mock_ai, mock_docs)


def test_non_pdf_cv_file(client, mock_ai, mock_docs):
    files = {"cvFile": ("cv.txt", b"plain text cv", "text/plain")}

    response = post_cv(client, {"jobDescription": JOB_DESCRIPTION}, files)

    assert response.status_code == 400
    assert response.json() == {"error": "CV file must be a PDF"}
    assert_no_upstream_calls(mock_ai, mock_docs)


def test_cv_file_sent_as_text_field(client, mock_ai, mock_docs):
    response = post_cv(client, {"jobDescription": JOB_DESCRIPTION, "cvFile": "not a file"})

    assert response.status_code == 400
    assert response.json() == {"error": "CV file must be a PDF"}
    assert_no_upstream_calls(mock_ai, mock_docs)


def test_validation_runs_before_configuration_is_checked(client, unconfigured):
    response = post_cv(client, {"jobDescription": JOB_DESCRIPTION})

    assert response.status_code == 400


# ── Analysis failures ─────────────────────────────────────────


def test_empty_analysis_returns_500_and_skips_optimizer(client, pdf_file, mock_ai):
    mock_ai.analyze_job_description.return_value = None

    response = post_cv(client, {"jobDescription": JOB_DESCRIPTION}, pdf_file)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to analyze job description"}
    mock_ai.optimize_cv.assert_not_awaited()


def test_deployment_not_found(client, pdf_file, mock_ai, settings):
    request = httpx.Request("POST", settings.expected_url)
    mock_ai.analyze_job_description.side_effect = openai.NotFoundError(
        "Resource not found",
        response=httpx.Response(404, request=request),
        body={"code": "DeploymentNotFound"},
    )

    response = post_cv(client, {"jobDescription": JOB_DESCRIPTION}, pdf_file)

    assert response.status_code == 404
    body = response.json()
    assert body["error"] == NOT_FOUND_ERROR
    assert body["details"]["code"] == "DeploymentNotFound"
    assert body["details"]["suggestedAction"]
    assert body["details"]["expectedUrl"] == settings.expected_url


def test_authentication_failure(client, pdf_file, mock_ai, settings):
    request = httpx.Request("POST", settings.expected_url)
    mock_ai.analyze_job_description.side_effect = openai.AuthenticationError(
        "Access denied due to invalid subscription key",
        response=httpx.Response(401, request=request),
        body=None,
    )

    response = post_cv(client, {"jobDescription": JOB_DESCRIPTION}, pdf_file)

    assert response.status_code == 401
    body = response.json()
    assert body["error"] == AUTH_ERROR
    assert body["details"]["suggestedAction"]
    assert "expectedUrl" not in body["details"]


def test_generic_upstream_failure(client, pdf_file, mock_ai, settings):
    mock_ai.analyze_job_description.side_effect = RuntimeError("connection reset")

    response = post_cv(client, {"jobDescription": JOB_DESCRIPTION}, pdf_file)

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "connection reset"
    assert body["details"]["code"] == "ERROR"
    assert body["details"]["expectedUrl"] == settings.expected_url


def test_missing_configuration_is_reported_with_expected_url(client, pdf_file, unconfigured):
    response = post_cv(client, {"jobDescription": JOB_DESCRIPTION}, pdf_file)

    assert response.status_code == 500
    body = response.json()
    assert body["details"]["code"] == "ConfigurationError"
    assert "AZURE_OPENAI_ENDPOINT" in body["details"]["message"]
    assert body["details"]["expectedUrl"] == unconfigured.expected_url


# ── Extraction / optimization failures ────────────────────────


def test_extraction_failure(client, pdf_file, mock_ai, mock_docs):
    mock_ai.analyze_job_description.return_value = StructuredAnalysis(data={})
    mock_docs.extract_text.side_effect = ValueError("stream has ended unexpectedly")

    response = post_cv(client, {"jobDescription": JOB_DESCRIPTION}, pdf_file)

    assert response.status_code == 500
    assert response.json() == {"error": "Error extracting text from CV: stream has ended unexpectedly"}


def test_optimizer_failure(client, pdf_file, mock_ai):
    mock_ai.analyze_job_description.return_value = StructuredAnalysis(data={})
    mock_ai.optimize_cv.side_effect = RuntimeError("rate limited")

    response = post_cv(client, {"jobDescription": JOB_DESCRIPTION}, pdf_file)

    assert response.status_code == 500
    assert response.json() == {"error": "rate limited"}


def test_unexpected_error_returns_json(pdf_file):
    class ExplodingPipeline:
        async def run(self, submission):
            raise KeyError("surprise")

    app.dependency_overrides[get_cv_pipeline] = lambda: ExplodingPipeline()
    try:
        response = TestClient(app, raise_server_exceptions=False).post(
            "/api/process-cv", data={"jobDescription": JOB_DESCRIPTION}, files=pdf_file
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"error": "'surprise'"}


# ── Rendering & health ────────────────────────────────────────


def test_render_cv_returns_pdf_attachment(client):
    response = client.post("/api/render-cv", json={"optimizedCV": "EXPERIENCE\nBackend engineer"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "optimized_cv.pdf" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_render_cv_rejects_blank_text(client):
    response = client.post("/api/render-cv", json={"optimizedCV": "   "})

    assert response.status_code == 400
    assert response.json() == {"error": "Optimized CV text is required"}


def test_render_cv_without_body_returns_error_shape(client):
    response = client.post("/api/render-cv")

    assert response.status_code == 400
    body = response.json()
    assert "detail" not in body
    assert body["error"].startswith("Invalid request")


def test_health_check(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
