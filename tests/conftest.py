import io
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from cvbuddy.config import Settings
from cvbuddy.ports.ai_port import AIPort
from cvbuddy.ports.document_port import DocumentPort


@pytest.fixture
def settings():
    """Explicit config object; tests never touch the process environment."""
    return Settings(
        _env_file=None,
        endpoint="https://example-resource.openai.azure.com/",
        api_key="test-key",
        api_version="2024-12-01-preview",
        deployment_name="cv-deploy",
        model_name="gpt-4o-mini",
    )


@pytest.fixture
def mock_ai():
    ai = MagicMock(spec=AIPort)
    ai.analyze_job_description = AsyncMock()
    ai.optimize_cv = AsyncMock(return_value="OPTIMIZED CV")
    return ai


@pytest.fixture
def mock_docs():
    docs = MagicMock(spec=DocumentPort)
    docs.extract_text = AsyncMock(return_value="Jane Doe - 5 years backend development")
    return docs


@pytest.fixture
def completion():
    """Build a chat-completions-like response with one choice per content."""

    def _build(*contents):
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=c)) for c in contents]
        )

    return _build


@pytest.fixture
def make_pdf():
    """Render a one-page PDF containing the given lines."""

    def _make(*lines: str) -> bytes:
        from reportlab.lib.pagesizes import A4
        from reportlab.pdfgen import canvas

        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=A4)
        y = 800
        for line in lines:
            c.drawString(72, y, line)
            y -= 20
        c.save()
        return buffer.getvalue()

    return _make
