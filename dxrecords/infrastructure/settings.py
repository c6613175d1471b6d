"""Application Settings and Configuration.

This module provides application-wide settings that combine configuration
from the configuration manager with application-specific defaults.

Security Impact:
    - Database credentials stay inside DatabaseConfig (SecretStr)
    - Defaults are provided for development convenience
"""

import os
from typing import Optional

from dxrecords import __version__
from dxrecords.infrastructure.config_manager import DatabaseConfig, get_database_config

# Application metadata
APP_NAME = "Diagnostic Test Records"
APP_VERSION = __version__

# Browser UI dev servers
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


class Settings:
    """Application settings loaded from configuration manager and environment.

    Environment Variables:
        - DX_APP_NAME: Display name used in logs and API metadata
        - DX_LOG_LEVEL: Logging level (default INFO)
        - DX_JSON_LOGS: Emit JSON log lines ("true"/"false")
        - DX_CORS_ORIGINS: Comma-separated list of allowed browser origins
        - DX_HOST / DX_PORT: Bind address for `dxrecords serve`
    """

    def __init__(self):
        self._db_config: Optional[DatabaseConfig] = None

        self.app_name = os.getenv("DX_APP_NAME", APP_NAME)
        self.app_version = APP_VERSION

        self.log_level = os.getenv("DX_LOG_LEVEL", "INFO")
        self.json_logs = os.getenv("DX_JSON_LOGS", "false").lower() == "true"

        self.cors_origins = [
            origin.strip()
            for origin in os.getenv("DX_CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
            if origin.strip()
        ]

        self.host = os.getenv("DX_HOST", "0.0.0.0")
        self.port = int(os.getenv("DX_PORT", "8000"))

    @property
    def db_config(self) -> DatabaseConfig:
        """Database configuration, loaded lazily on first access."""
        if self._db_config is None:
            self._db_config = get_database_config()
        return self._db_config


# Global settings instance
settings = Settings()
