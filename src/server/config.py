"""Configuration management for the FastAPI server.

This module handles configuration loading from environment variables,
providing sensible defaults for local development.
"""

import logging
import os
from pathlib import Path

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application configuration settings.

    Attributes:
        app_name: Application name
        version: Application version
        debug: Debug mode flag
        database_path: SQLite database file path
        cors_origins: List of allowed CORS origins
        host: Server host address
        port: Server port number
        price_source_url: Base URL of the quote service
        price_timeout: Per-request timeout for quote lookups (seconds)
        price_batch_limit: Maximum unique tickers per batch lookup
        log_level: Root log level for the server and CLI
    """

    app_name: str = "Wheel Tracker API"
    version: str = "1.0.0"
    debug: bool = False

    # Database configuration
    database_path: str = "~/.wheel_tracker/wheel.db"

    # CORS configuration - allow local development origins
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 3001

    # Price source configuration
    price_source_url: str = "https://stockprices.dev/api"
    price_timeout: float = 5.0
    price_batch_limit: int = 20

    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""
        env_prefix = "WHEEL_TRACKER_"
        case_sensitive = False

    @property
    def database_url(self) -> str:
        """Get SQLAlchemy database URL.

        Returns:
            Database URL string for SQLAlchemy
        """
        expanded_path = os.path.expanduser(self.database_path)
        return f"sqlite:///{expanded_path}"

    def get_database_path(self) -> Path:
        """Get expanded database path as Path object."""
        return Path(os.path.expanduser(self.database_path))


# Global settings instance
settings = Settings()
