"""
Application configuration using Pydantic settings.
"""

from decimal import Decimal
from pydantic_settings import BaseSettings, SettingsConfigDict

from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # App
    app_name: str = "Serendipia Finance"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./data/db.sqlite"

    # Calendar: "today" is always resolved in this zone, never the host's
    reference_timezone: str = "America/Caracas"
    week_start_day: int = 0  # 0 = Monday ... 6 = Sunday

    # Money
    default_exchange_rate: Decimal = Decimal("36.5")  # Bs. per USD
    adjustments_count_as_income: bool = False
    trend_months: int = 12

    # AI Provider
    ai_provider: str = "openrouter"  # openrouter, ollama, openai, anthropic
    ai_model: str = "anthropic/claude-3-haiku"
    ai_base_url: Optional[str] = None  # For Ollama: http://localhost:11434

    # API Keys (optional based on provider)
    openrouter_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None

    # AI Feature Flags
    ai_analysis_enabled: bool = True

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    frontend_url: str = "http://localhost:5173"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )


# Global settings instance
settings = Settings()
