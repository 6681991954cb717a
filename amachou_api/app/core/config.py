"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API starts with no configuration at all; a deployment overrides them
via the environment.
"""

import os
from dataclasses import dataclass


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Amachou API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Name used to build the ``X-<app>-alert`` / ``X-<app>-error`` headers
    # that clients read to display notifications.
    application_name: str = os.getenv("APPLICATION_NAME", "amachouApp")

    # Root under which every REST resource is mounted.  The ``Location``
    # header of created resources is built from it.
    api_prefix: str = os.getenv("API_PREFIX", "/api")

    # Path or connection string for the SQLite database.  If a relative
    # path is provided, it is resolved relative to the project root by
    # the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "amachou.db")

    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
    max_page_size: int = int(os.getenv("MAX_PAGE_SIZE", "2000"))

    # Comma‑separated list of allowed origins.  Empty disables CORS.
    cors_origins: str = os.getenv("CORS_ORIGINS", "")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8080"))

    @property
    def cors_origin_list(self) -> list[str]:
        return _split_csv(self.cors_origins)


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
