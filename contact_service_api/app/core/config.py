"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  Defaults are provided for all fields so the service starts
with a local SQLite directory store and no profile service.  In a
production deployment you should override these via environment
variables.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Contact Service API")
    api_version: str = os.getenv("API_VERSION", "0.2.4")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

    # Path of the SQLite file backing the directory store and the agent
    # registry.  Relative paths are resolved against the package root by
    # the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "contact_service.db")

    # Identity that owns the shared records (group registry and address
    # book).  Only the service itself writes to those records.
    service_agent_id: str = os.getenv("SERVICE_AGENT_ID", "contactservice")

    # Number of attempts for a fetch-modify-store cycle that loses a
    # version race before the operation is reported as a storage failure.
    commit_retries: int = int(os.getenv("COMMIT_RETRIES", "3"))

    # Base URL of the user information (profile) service.  Leave empty to
    # disable the /user and /permission endpoints.
    user_information_url: str = os.getenv("USER_INFORMATION_URL", "")
    user_information_token: str = os.getenv("USER_INFORMATION_TOKEN", "")
    request_timeout: int = int(os.getenv("REQUEST_TIMEOUT", "15"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must be
# set before importing this module.
settings = Settings()
