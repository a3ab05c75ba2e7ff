"""
Abstract interface for turning CV text back into a downloadable document.
"""

from abc import ABC, abstractmethod


class RenderPort(ABC):
    """Port for rendering plain CV text into a paginated PDF."""

    @abstractmethod
    def render(self, cv_text: str) -> bytes:
        """Return the PDF file contents for the given CV text."""
        ...
