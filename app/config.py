"""
Application configuration.

Values come from the environment or a .env file (case-insensitive).
"""

from pathlib import Path
from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Running log settings."""

    app_title: str = Field(default="Running Log")
    log_level: str = Field(default="INFO", description="Logging level")
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding runs.csv, prefs.json and stats.json"
    )

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
