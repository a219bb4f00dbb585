"""Application configuration management."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Settings
    app_name: str = "Job Board Moderation Service"
    app_version: str = "0.1.0"
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # API Settings
    api_v1_prefix: str = "/api/v1"
    host: str = "0.0.0.0"
    port: int = 8000

    # LLM Provider Configuration
    llm_provider: str = Field(
        default="openai",
        description="LLM provider to use: 'openai', 'openrouter', 'gemini' or 'ollama'"
    )

    # OpenAI API Configuration
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key (required if llm_provider='openai')"
    )
    openai_api_url: str = Field(
        default="https://api.openai.com/v1/chat/completions",
        description="OpenAI chat completions URL"
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="OpenAI model name"
    )

    # OpenRouter API Configuration
    openrouter_api_key: str = Field(
        default="",
        description="OpenRouter API key (required if llm_provider='openrouter')"
    )
    openrouter_api_url: str = Field(
        default="https://openrouter.ai/api/v1/chat/completions",
        description="OpenRouter API base URL"
    )
    openrouter_model: str = Field(
        default="openai/gpt-4o-mini",
        description="OpenRouter model name"
    )

    # Gemini API Configuration
    gemini_api_key: str = Field(
        default="",
        description="Gemini API key (required if llm_provider='gemini')"
    )
    gemini_model: str = Field(
        default="gemini-2.0-flash",
        description="Gemini model name"
    )

    # Ollama Configuration
    ollama_api_url: str = Field(
        default="http://localhost:11434",
        description="Ollama server URL"
    )
    ollama_model: str = Field(
        default="llama3.1:8b",
        description="Ollama model name"
    )

    # Timeout Settings (in seconds)
    llm_timeout: int = Field(
        default=30,
        description="Transport timeout for a single provider request"
    )
    spam_check_timeout: Optional[float] = Field(
        default=20.0,
        description="Upper bound on one spam check; unset to rely on llm_timeout only"
    )

    # Spam Check Configuration
    spam_max_content_chars: Optional[int] = Field(
        default=10_000,
        description="Maximum accepted content length; unset to disable the check"
    )

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parent.parent / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get application settings instance.

    Returns:
        Settings: Application settings loaded from environment
    """
    return Settings()


# Global settings instance
settings = get_settings()
