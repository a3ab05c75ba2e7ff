"""
Concrete implementation of AIPort using an Azure OpenAI deployment.

The deployment is reached through the plain OpenAI SDK pointed at
``{endpoint}/openai/deployments/{deployment}`` with the ``api-version`` query
parameter and ``api-key`` header Azure expects.
"""

import json
import logging

from openai import AsyncOpenAI

from cvbuddy.config import Settings
from cvbuddy.domain.errors import ConfigurationError
from cvbuddy.domain.models import AnalysisResult, StructuredAnalysis, UnstructuredAnalysis
from cvbuddy.ports.ai_port import AIPort

logger = logging.getLogger(__name__)

ANALYZER_SYSTEM_PROMPT = "You are an expert HR assistant who analyzes job descriptions."
OPTIMIZER_SYSTEM_PROMPT = (
    "You are an expert CV writer who tailors CVs to specific job descriptions."
)

# Extraction should be literal; rewriting is allowed more room.
ANALYZER_MAX_TOKENS = 800
ANALYZER_TEMPERATURE = 0.2
OPTIMIZER_MAX_TOKENS = 2000
OPTIMIZER_TEMPERATURE = 0.3


def parse_analysis(content: str | None) -> AnalysisResult | None:
    """
    Best-effort parse of the analyzer's completion.

    - no content, or a literal JSON ``null``  → None
    - a JSON object                           → StructuredAnalysis
    - anything else                           → UnstructuredAnalysis(raw text)
    """
    if not content:
        return None

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError:
        logger.info(f"Could not parse JSON response: {content[:200]!r}")
        return UnstructuredAnalysis(raw_content=content)

    if parsed is None:
        return None
    if not isinstance(parsed, dict):
        logger.info(f"Analysis JSON is a {type(parsed).__name__}, not an object; keeping raw text")
        return UnstructuredAnalysis(raw_content=content)

    return StructuredAnalysis(data=parsed)


class AzureOpenAIAdapter(AIPort):
    """Talks to an Azure OpenAI chat completions deployment."""

    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None) -> None:
        missing = settings.missing_required()
        if missing:
            raise ConfigurationError(
                "Azure OpenAI endpoint, API key, and deployment name must be defined "
                f"in environment variables (missing: {', '.join(missing)})"
            )

        self._settings = settings
        self._model = settings.model_name

        logger.info("=== Azure OpenAI client configuration ===")
        logger.info(f"Endpoint:     {settings.endpoint}")
        logger.info(f"Deployment:   {settings.deployment_name}")
        logger.info(f"API version:  {settings.api_version}")
        logger.info(f"Model:        {settings.model_name}")
        logger.info(f"Expected URL: {settings.expected_url}")

        # No retries at any layer
        self._client = client or AsyncOpenAI(
            api_key=settings.api_key,
            base_url=settings.deployment_url,
            default_query={"api-version": settings.api_version},
            default_headers={"api-key": settings.api_key},
            max_retries=0,
        )

    async def analyze_job_description(self, job_description: str) -> AnalysisResult | None:
        """Ask the model for the five requirement fields as JSON."""

        prompt = (
            "Analyze the following job description and extract the key requirements, skills, "
            "and qualifications being sought:\n\n"
            f"{job_description}\n\n"
            "Return a structured JSON object with the following properties:\n"
            "1. requiredSkills: Array of technical skills required\n"
            "2. softSkills: Array of soft skills mentioned\n"
            "3. experience: Years or type of experience required\n"
            "4. education: Education requirements\n"
            "5. keyResponsibilities: Key job responsibilities"
        )

        extra = {}
        if self._settings.analysis_json_mode:
            extra["response_format"] = {"type": "json_object"}

        logger.info("Sending job analysis request...")
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": ANALYZER_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=ANALYZER_MAX_TOKENS,
            temperature=ANALYZER_TEMPERATURE,
            **extra,
        )

        if not response.choices:
            logger.warning("Job analysis returned no choices")
            return None

        content = response.choices[0].message.content
        logger.info(f"Analysis response received: {(content or '')[:50]!r}...")
        return parse_analysis(content)

    async def optimize_cv(self, analysis: AnalysisResult, cv_text: str) -> str:
        """Rewrite the CV against the analysed requirements."""

        analysis_json = json.dumps(analysis.to_payload(), indent=2)
        prompt = (
            "I have analyzed a job description and extracted the following key requirements and skills:\n"
            f"{analysis_json}\n\n"
            "Now, I need to optimize the following CV to better match these requirements:\n\n"
            f"{cv_text}\n\n"
            "Please generate an optimized version of this CV that:\n"
            "1. Highlights experiences and skills that match the job requirements\n"
            "2. Reorganizes content to emphasize relevant qualifications\n"
            "3. Uses terminology from the job description where appropriate\n"
            "4. Adds any missing sections that would strengthen the application\n"
            "5. Keeps the overall length and structure similar to the original\n\n"
            "Return the optimized CV text."
        )

        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": OPTIMIZER_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=OPTIMIZER_MAX_TOKENS,
            temperature=OPTIMIZER_TEMPERATURE,
        )

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
