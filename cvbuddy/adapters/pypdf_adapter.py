"""
Concrete implementation of DocumentPort using pypdf.

CPU-bound parsing is offloaded to a worker thread via asyncio.to_thread()
so large PDFs don't block the event loop.
"""

import asyncio
import io
import logging

from pypdf import PdfReader

from cvbuddy.domain.errors import ExtractionError
from cvbuddy.ports.document_port import DocumentPort

logger = logging.getLogger(__name__)


class PyPdfAdapter(DocumentPort):
    """Extracts text from PDF files using pypdf."""

    async def extract_text(self, file_bytes: bytes) -> str:
        """Read all pages and concatenate text."""
        try:
            return await asyncio.to_thread(self._extract_pdf, file_bytes)
        except Exception as exc:
            logger.error(f"PDF extraction failed: {type(exc).__name__}: {exc}")
            raise ExtractionError(str(exc) or type(exc).__name__) from exc

    @staticmethod
    def _extract_pdf(file_bytes: bytes) -> str:
        reader = PdfReader(io.BytesIO(file_bytes))
        pages_text: list[str] = []

        for page in reader.pages:
            text = page.extract_text()
            if text:
                pages_text.append(text.strip())

        return "\n\n".join(pages_text)
