"""Configuration management for Wikiscribe."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration via environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # LLM Configuration
    default_model: str = Field(
        default="groq/llama-3.3-70b-versatile",
        alias="WIKISCRIBE_MODEL",
    )
    fallback_model: Optional[str] = Field(
        default="gemini/gemini-2.0-flash",
        alias="WIKISCRIBE_FALLBACK_MODEL",
    )

    # API Keys (LiteLLM reads these automatically)
    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    groq_api_key: Optional[str] = Field(default=None, alias="GROQ_API_KEY")
    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    anthropic_api_key: Optional[str] = Field(default=None, alias="ANTHROPIC_API_KEY")

    # Notion destination
    notion_api_key: Optional[str] = Field(default=None, alias="NOTION_API_KEY")
    notion_page_id: Optional[str] = Field(default=None, alias="NOTION_PAGE_ID")

    # Processing settings
    max_run_length: int = Field(
        default=2000,
        gt=0,
        alias="WIKISCRIBE_MAX_RUN_LENGTH",
    )
    llm_temperature: float = Field(
        default=0.3,
        alias="WIKISCRIBE_TEMPERATURE",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        alias="WIKISCRIBE_MAX_RETRIES",
    )
    http_timeout: float = Field(
        default=10.0,
        alias="WIKISCRIBE_HTTP_TIMEOUT",
    )

    @property
    def has_llm_credentials(self) -> bool:
        """Check if any LLM provider key is configured."""
        return any(
            (
                self.gemini_api_key,
                self.groq_api_key,
                self.openai_api_key,
                self.anthropic_api_key,
            )
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if needed."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Load settings from an optional specific .env file."""
    global _settings
    if env_file:
        _settings = Settings(_env_file=env_file)
    else:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next access re-reads the environment."""
    global _settings
    _settings = None
