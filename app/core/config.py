"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (.env file).
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project Info
    PROJECT_NAME: str = "PWM Engine: wrestling weight-cut targets and Cut Score."
    VERSION: str = "0.1.0"
    AUTHORS: List[str] = ["PWM contributors"]
    PROJECT_URL: str = ""

    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Dev server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


# Global settings instance
settings = Settings()
