"""
Daymare Backend: Application Configuration
===========================================

What:  Centralized configuration using Pydantic Settings.
How:   Values come from environment variables (or a .env file), are coerced and
       validated once, and are exposed through the module-level ``settings``.
Who:   Imported by the application factory, the database helpers and the
       static file service.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every field has a development default so the server starts against a
    local MongoDB with no configuration at all.
    """

    # ── MongoDB ───────────────────────────────────────────────────────────
    mongo_url: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string",
    )
    mongo_database: str = Field(default="daymare")
    mongo_collection: str = Field(default="article")

    # Driver default; startup fails once server selection gives up.
    mongo_server_selection_timeout_ms: int = Field(default=30_000, ge=1_000, le=300_000)

    # ── Static Files ──────────────────────────────────────────────────────
    # Relative to the backend working directory.
    static_root: str = Field(default="./static")

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="http://localhost:8081")

    @property
    def cors_origins_list(self) -> List[str]:
        """Comma-separated CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8081, ge=1, le=65535)

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

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


settings = Settings()
