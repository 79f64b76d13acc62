"""Application configuration using Pydantic Settings."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STUDYTIME_",
    )

    # API
    app_name: str = "Study Time Service API"
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:8000"

    # Sessions
    min_session_minutes: int = 1
    max_session_minutes: int = 720  # 12 hours
    max_pause_minutes: int = 1440  # 24 hours
    session_edit_hours: int = 24

    # Manual records
    min_manual_record_minutes: int = 15
    manual_record_edit_days: int = 7
    daily_limit_hours: int = 12

    # Reporting
    max_history_days: int = 365
    max_statistics_days: int = 730  # 2 years

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def daily_limit_minutes(self) -> int:
        """Maximum minutes of study that can be recorded for one day."""
        return self.daily_limit_hours * 60


settings = Settings()
