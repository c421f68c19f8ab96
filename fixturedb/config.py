"""Configuration management for fixturedb."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .log import setup_logging
from .types import Environment


class Settings(BaseModel):
    """Fixture pipeline settings.

    One instance is created per test session or script and passed to the
    provisioner and harness explicitly.
    """

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development/production/testing)",
    )

    # Stage snapshots
    stage_dir: Path = Field(
        default=Path("db"), description="Directory holding one database per stage"
    )
    stage_suffix: str = Field(
        default=".db", description="File suffix of stage database files"
    )

    # Timeouts
    query_timeout: float = Field(
        default=60.0, gt=0, description="Harness wall-clock limit per check (seconds)"
    )
    busy_timeout: float = Field(
        default=60.0, ge=0, description="SQLite lock wait before failing (seconds)"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("stage_suffix")
    @classmethod
    def _suffix_has_dot(cls, value: str) -> str:
        if value and not value.startswith("."):
            return f".{value}"
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == Environment.TESTING

    def stage_path(self, stage: str) -> Path:
        """Get the database file path of a stage."""
        return self.stage_dir / f"{stage}{self.stage_suffix}"


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Load settings from environment variables.

    Args:
        env_file: Optional .env file; by default the nearest .env is used
    """
    load_dotenv(env_file)

    return Settings(
        environment=Environment(os.getenv("FIXTUREDB_ENV", "development")),
        stage_dir=Path(os.getenv("FIXTUREDB_STAGE_DIR", "db")),
        stage_suffix=os.getenv("FIXTUREDB_STAGE_SUFFIX", ".db"),
        query_timeout=float(os.getenv("FIXTUREDB_QUERY_TIMEOUT", "60")),
        busy_timeout=float(os.getenv("FIXTUREDB_BUSY_TIMEOUT", "60")),
        log_level=os.getenv("FIXTUREDB_LOG_LEVEL", "INFO"),
    )


def setup_logging_from_settings(
    settings: Settings, enable_file_logging: bool = True
) -> None:
    """Configure logging once at session start from loaded settings."""
    setup_logging(
        level=settings.log_level,
        enable_file_logging=enable_file_logging,
        is_test_env=settings.is_testing,
    )
