"""
Application configuration loaded from environment variables.
Uses pydantic-settings for typed, validated config.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Azure OpenAI connection details plus a few app-level knobs."""

    model_config = SettingsConfigDict(
        env_prefix="AZURE_OPENAI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    # ── Azure OpenAI ──────────────────────────────────────────
    endpoint: str = ""               # e.g. https://my-resource.openai.azure.com
    api_key: str = ""
    api_version: str = "2024-12-01-preview"
    deployment_name: str = "gpt-4o-mini"
    model_name: str = "gpt-4o-mini"
    analysis_json_mode: bool = False

    # ── App ───────────────────────────────────────────────────
    app_name: str = Field("cv-buddy", validation_alias="APP_NAME")
    debug: bool = Field(False, validation_alias="DEBUG")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    @property
    def deployment_url(self) -> str:
        """Base URL the completion client talks to."""
        return f"{self.endpoint.rstrip('/')}/openai/deployments/{self.deployment_name}"

    @property
    def expected_url(self) -> str:
        """Full chat-completions URL, reported back to operators on failures."""
        return f"{self.deployment_url}/chat/completions?api-version={self.api_version}"

    def missing_required(self) -> list[str]:
        """Names of required environment variables that are unset."""
        missing = []
        if not self.endpoint:
            missing.append("AZURE_OPENAI_ENDPOINT")
        if not self.api_key:
            missing.append("AZURE_OPENAI_API_KEY")
        if not self.deployment_name:
            missing.append("AZURE_OPENAI_DEPLOYMENT_NAME")
        return missing


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build the settings once per process."""
    return Settings()
