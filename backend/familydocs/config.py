"""
Family Docs Backend - Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and exposes a default `settings` object.
Who:   Passed into create_app(); the module-level instance is only the default.
When:  Loaded once at import time; validated before the app starts.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have working defaults for a single-household install on
    localhost. Attributes are grouped by concern.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Format: mongodb://[user:password@]host:port
    mongo_url: str = Field(
        default="mongodb://127.0.0.1:27017",
        description="MongoDB connection URL",
    )
    mongo_db_name: str = Field(default="familyDocs")

    # How long the driver waits for a reachable server before failing an operation
    mongo_server_selection_timeout_ms: int = Field(default=5000, ge=100, le=60_000)

    # ── File Storage ──────────────────────────────────────────────────────
    # Relative to the backend CWD; also mounted read-only at /uploads
    upload_dir: str = Field(default="uploads")

    # 25MB = 25 * 1024 * 1024
    max_file_size: int = Field(default=26_214_400, ge=1_024, le=524_288_000)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated URLs, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=5000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Error Reporting ───────────────────────────────────────────────────
    # When on, 500 envelopes carry the underlying driver/OS error text in "error".
    # Turn off for anything reachable from outside the household network.
    expose_error_details: bool = Field(default=True)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # MONGO_URL and mongo_url both work
        "extra": "ignore",
    }


settings = Settings()
