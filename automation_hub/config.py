"""
Configuration management for Automation Hub.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = Field(default="Automation Hub", env="APP_NAME")
    debug: bool = Field(default=False, env="DEBUG")
    environment: str = Field(default="development", env="ENVIRONMENT")

    # API
    api_host: str = Field(default="0.0.0.0", env="API_HOST")
    api_port: int = Field(default=8000, env="API_PORT")
    api_workers: int = Field(default=1, env="API_WORKERS")
    cors_origins: str = Field(
        default="*",
        env="CORS_ORIGINS",
        description="Comma-separated list of allowed origins for the browser front end.",
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./automation_hub.db", env="DATABASE_URL"
    )

    # Logging
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    log_format: str = Field(default="json", env="LOG_FORMAT")

    # Model provider (OpenRouter, OpenAI-compatible chat completions)
    openrouter_api_key: Optional[str] = Field(default=None, env="OPENROUTER_API_KEY")
    openrouter_base_url: str = Field(
        default="https://openrouter.ai/api/v1", env="OPENROUTER_BASE_URL"
    )
    openrouter_referer: str = Field(
        default="https://localhost:5173", env="OPENROUTER_REFERER"
    )
    openrouter_title: str = Field(default="Automation Hub", env="OPENROUTER_TITLE")
    llm_timeout_seconds: float = Field(default=60.0, env="LLM_TIMEOUT_SECONDS")

    # Models
    chat_model: str = Field(
        default="meta-llama/llama-3.2-3b-instruct:free", env="CHAT_MODEL"
    )
    extraction_model: str = Field(
        default="google/gemini-flash-1.5:free", env="EXTRACTION_MODEL"
    )
    generation_model: str = Field(
        default="meta-llama/llama-3.1-8b-instruct:free", env="GENERATION_MODEL"
    )

    # Code generation
    conversation_summary_limit: int = Field(
        default=4000, env="CONVERSATION_SUMMARY_LIMIT"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
