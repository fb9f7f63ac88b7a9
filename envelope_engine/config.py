"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="ENVELOPE_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Service
    service_name: str = "envelope-engine"
    log_level: str = "INFO"

    # Calculations
    status_tolerance: float = 5.0  # Absolute money band for under/over checks
    strict_custom_weeks: bool = True  # custom_weeks without a week count raises


settings = Settings()
