from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Logging
    log_level: str = "INFO"

    # Checks: one shared deadline per pass, in seconds
    check_timeout: float = 10.0

    # Status page
    page_title: str = "Service Status"
    show_version: bool = False

    # Build metadata, usually injected by the deploy pipeline
    build_version: str = ""
    build_revision: str = ""
    build_commit_date: str = ""


settings = Settings()
