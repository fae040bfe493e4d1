"""Application configuration loaded from environment variables."""

import os
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

# Check if .env file exists and is readable
_env_file = None
try:
    env_path = Path(".env")
    if env_path.exists() and os.access(env_path, os.R_OK):
        _env_file = ".env"
except (OSError, PermissionError):
    pass


class Settings(BaseSettings):
    """All configuration for the statement interpreter.

    Values are loaded from environment variables or a .env file.
    """

    # Application
    app_name: str = "statement-interpreter"
    debug: bool = False

    # Logging
    json_logs: bool = False
    log_level: str = "INFO"
    engine_log_level: Optional[str] = None  # defaults to log_level

    # History requirements
    min_annual_periods: int = 2
    preferred_annual_periods: int = 5  # fewer → DataQuality warning

    # Analysis
    default_tax_rate: float = 0.21  # used for ROIC when pre-tax income <= 0
    recommendation_limit: int = 8
    parallel_analyzers: bool = True
    analysis_timeout_seconds: float = 30.0

    model_config = {
        "env_file": _env_file,
        "env_file_encoding": "utf-8",
        "env_file_ignore_empty": True,
    }
