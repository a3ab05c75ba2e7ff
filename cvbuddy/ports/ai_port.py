"""
Abstract interface for AI operations.
Concrete implementations (Azure OpenAI, OpenAI, etc.) must implement this port.
"""

from abc import ABC, abstractmethod

from cvbuddy.domain.models import AnalysisResult


class AIPort(ABC):
    """Port for the two completion calls the CV pipeline makes."""

    @abstractmethod
    async def analyze_job_description(self, job_description: str) -> AnalysisResult | None:
        """
        Extract required skills, soft skills, experience, education and key
        responsibilities from a job description.

        Returns StructuredAnalysis when the model answered with a JSON object,
        UnstructuredAnalysis wrapping the raw text otherwise, and None when
        the service returned no completion at all.
        """
        ...

    @abstractmethod
    async def optimize_cv(self, analysis: AnalysisResult, cv_text: str) -> str:
        """
        Rewrite the CV to match the analysed job.
        Returns the completion text verbatim, or "" if there was none.
        """
        ...
