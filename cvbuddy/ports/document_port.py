"""
Abstract interface for document text extraction.
"""

from abc import ABC, abstractmethod


class DocumentPort(ABC):
    """Port for extracting text content from uploaded CV files."""

    @abstractmethod
    async def extract_text(self, file_bytes: bytes) -> str:
        """
        Extract all text from a document given its raw bytes.
        Returns concatenated text from all pages.

        Raises ExtractionError if the document cannot be parsed.
        """
        ...
