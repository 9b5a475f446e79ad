"""
Users API: Application Configuration
======================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the application factory, the store and the logger setup.
When:  Loaded once at module import time.

Recognized variables:
    MYSQL_HOST, MYSQL_USER, MYSQL_PASSWORD, MYSQL_DATABASE, MYSQL_PORT
        Store connection. Assembled into a mysql+aiomysql URL.
    DATABASE_URL
        Optional full SQLAlchemy URL. Overrides the MYSQL_* fields
        (used by the test suite to point at SQLite).
    LOGTAIL_TOKEN, LOGTAIL_URL
        Remote log sink credentials and endpoint. No token, no remote sink.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

# Listening port is part of the public contract, not a setting.
SERVER_HOST = "0.0.0.0"
SERVER_PORT = 3000


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. Production deployments override
    the MYSQL_* credentials and LOGTAIL_TOKEN.
    """

    # ── Store ─────────────────────────────────────────────────────────────
    mysql_host: str = Field(default="localhost")
    mysql_user: str = Field(default="root")
    mysql_password: str = Field(default="")
    mysql_database: str = Field(default="users")
    mysql_port: int = Field(default=3306, ge=1, le=65535)

    # What: Full SQLAlchemy async URL; wins over the MYSQL_* fields when set
    database_url: Optional[str] = Field(default=None)

    # ── Remote Log Sink (Logtail / Better Stack) ──────────────────────────
    logtail_token: str = Field(default="")
    logtail_url: str = Field(default="https://in.logs.betterstack.com")

    # What: Capacity of the in-memory queue in front of the remote sink
    # When full, new records are dropped instead of blocking the request path
    remote_log_queue_size: int = Field(default=1000, ge=1, le=100_000)

    # What: Per-request HTTP timeout for shipping one record (seconds)
    remote_log_timeout: float = Field(default=5.0, gt=0, le=60)

    # What: How long shutdown keeps shipping queued records (seconds)
    # Records still queued after that are dropped, not delivered
    remote_log_drain_timeout: float = Field(default=2.0, ge=0, le=60)

    # ── Logging ───────────────────────────────────────────────────────────
    # Valid: DEBUG, INFO, WARN, ERROR, ALERT (WARNING accepted as WARN)
    log_level: str = Field(default="DEBUG")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is one of the event logger's level names."""
        valid_levels = {"DEBUG", "INFO", "WARN", "ERROR", "ALERT"}
        upper = v.upper()
        if upper == "WARNING":
            upper = "WARN"
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def store_url(self) -> URL | str:
        """
        What: The URL handed to create_async_engine.
        Why URL.create: escapes special characters in the password and keeps
        it masked when the URL object is rendered in logs.
        """
        if self.database_url:
            return self.database_url
        return URL.create(
            drivername="mysql+aiomysql",
            username=self.mysql_user,
            password=self.mysql_password or None,
            host=self.mysql_host,
            port=self.mysql_port,
            database=self.mysql_database,
        )

    @property
    def remote_logging_enabled(self) -> bool:
        return bool(self.logtail_token)


settings = Settings()
