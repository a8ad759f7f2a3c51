"""
Wallit Users — Application Configuration
=========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Values come from environment variables (or a .env file), are coerced
       and range-checked on load, and are exposed through the `settings`
       singleton.
Who:   Imported by every module that needs configuration values.

Database connection:
    Either set DATABASE_URL to a complete SQLAlchemy async URL, or supply the
    individual parts (DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD) and let
    `sqlalchemy_url` assemble them.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. Production deployments must
    provide the database credentials.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Full async URL; when set, the individual parts below are ignored
    database_url: Optional[str] = Field(
        default=None,
        description="Async SQLAlchemy connection URL (overrides db_* parts)",
    )

    db_driver: str = Field(default="postgresql+asyncpg")
    db_host: str = Field(default="localhost")
    db_port: int = Field(default=5432, ge=1, le=65535)
    db_name: str = Field(default="wallit", description="Database name")
    db_user: str = Field(default="wallit", description="Database user")
    db_password: str = Field(default="", description="Database password")

    # Pool sizing; not applied to SQLite engines
    db_pool_size: int = Field(default=10, ge=1, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # Opt-in schema creation on startup. Never drops existing tables;
    # `alembic upgrade head` is the normal path.
    db_create_all: bool = Field(default=False)

    # ── Security ──────────────────────────────────────────────────────────
    # bcrypt cost factor; each step doubles hashing time
    password_hash_rounds: int = Field(default=12, ge=4, le=16)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated URLs
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

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

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def sqlalchemy_url(self) -> str:
        """The connection URL handed to the async engine."""
        if self.database_url:
            return self.database_url
        return URL.create(
            drivername=self.db_driver,
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        ).render_as_string(hide_password=False)

    def validate_required_for_production(self) -> None:
        """
        Validates that the database credentials are configured.

        Called during app startup (lifespan). Raises ValueError listing every
        problem found.
        """
        errors = []
        if not self.database_url and not self.db_password:
            errors.append(
                "DB_PASSWORD is not set. Provide DB_NAME, DB_USER and DB_PASSWORD "
                "or a complete DATABASE_URL."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


settings = Settings()
