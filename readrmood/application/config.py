"""Application configuration using Pydantic Settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="READRMOOD_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = "readrmood"
    app_version: str = "0.1.0"
    debug: bool = False

    # Logging
    log_level: str = "INFO"

    # Storage
    data_dir: Path = Path("~/.readrmood")
    background_writes: bool = False

    # Achievement evaluation
    evaluation_window_ms: int = Field(default=150, gt=0)
    night_start_hour: int = Field(default=23, ge=0, le=23)
    night_end_hour: int = Field(default=5, ge=0, le=23)

    # Summaries
    recent_sessions_limit: int = 50
    top_books_limit: int = 5

    @property
    def evaluation_window(self) -> float:
        return self.evaluation_window_ms / 1000.0

    @property
    def resolved_data_dir(self) -> Path:
        return self.data_dir.expanduser()


# Create a singleton instance
settings = Settings()
