"""Application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    content_dir: Path = Path("content")
    content_pattern: str = "*.md"
    app_title: str = "renvins' thoughts blog"
    debug: bool = False
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="MDBLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()
