"""
Pydantic configuration models for HouseHunt.

These models provide type-safe configuration with validation for:
- Application paths
- Database and logging settings
- Listing page fetching
- Selector overrides for the extraction engine
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Enums
# =============================================================================


class Sentiment(str, Enum):
    """How the user feels about a listing after seeing it."""

    LOVE = "love"
    LIKE = "like"
    NEUTRAL = "neutral"
    DISLIKE = "dislike"


# =============================================================================
# Extraction Configuration
# =============================================================================


class FieldExtractionRule(BaseModel):
    """Selector cascade for a single listing field."""

    selectors: list[str] = Field(
        default_factory=list,
        description="CSS selectors to try in order",
    )
    regex: str | None = Field(
        default=None,
        description="Regex applied to the element text (group 1 is the value)",
    )

    @field_validator("regex")
    @classmethod
    def valid_value_regex(cls, v: str | None) -> str | None:
        if v is not None:
            try:
                pattern = re.compile(v)
            except re.error as e:
                raise ValueError(f"invalid regex: {e}") from e
            if pattern.groups < 1:
                raise ValueError("regex needs a capture group for the value")
        return v


class ExtractionConfig(BaseModel):
    """Overrides for the built-in selector cascades.

    Keys of ``direct`` are ``address`` and ``price``; keys of ``loose`` are
    ``beds``, ``baths`` and ``sqft``. Fields left out keep the defaults.
    """

    direct: dict[str, FieldExtractionRule] = Field(
        default_factory=dict,
        description="Direct selector cascades (first non-empty element wins)",
    )
    loose: dict[str, FieldExtractionRule] = Field(
        default_factory=dict,
        description="Loose class-substring selectors combined with a regex",
    )

    @field_validator("direct")
    @classmethod
    def known_direct_fields(cls, v: dict[str, FieldExtractionRule]) -> dict[str, FieldExtractionRule]:
        """Only address and price use direct selector cascades."""
        unknown = set(v) - {"address", "price"}
        if unknown:
            raise ValueError(f"unsupported direct fields: {', '.join(sorted(unknown))}")
        return v

    @field_validator("loose")
    @classmethod
    def known_loose_fields(cls, v: dict[str, FieldExtractionRule]) -> dict[str, FieldExtractionRule]:
        """Only beds, baths and sqft use loose fallback cascades."""
        unknown = set(v) - {"beds", "baths", "sqft"}
        if unknown:
            raise ValueError(f"unsupported loose fields: {', '.join(sorted(unknown))}")
        return v


# =============================================================================
# Fetch Configuration
# =============================================================================


class FetchConfig(BaseModel):
    """Server-side listing fetch settings."""

    timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="Request timeout in seconds",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum attempts on transport failure",
    )
    user_agent: str | None = Field(
        default=None,
        description="Custom user agent (default: desktop Chrome)",
    )
    allowed_hosts: list[str] = Field(
        default_factory=lambda: ["zillow.com"],
        description="Hosts (and their subdomains) that may be fetched",
    )


# =============================================================================
# Database Configuration
# =============================================================================


class DatabaseConfig(BaseModel):
    """Database connection settings."""

    url: str = Field(
        default="sqlite:///data/househunt.db",
        description="SQLAlchemy database URL",
    )
    echo: bool = Field(
        default=False,
        description="Echo SQL statements (debugging)",
    )


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    file: Path | None = Field(
        default=Path("logs/househunt.log"),
        description="Log file path",
    )
    json_format: bool = Field(
        default=True,
        description="Use JSON format for file logs",
    )
    rich_console: bool = Field(
        default=True,
        description="Use Rich for console output",
    )


# =============================================================================
# Application Configuration
# =============================================================================


class AppConfig(BaseModel):
    """Root application configuration.

    This is the main configuration object loaded from app.yaml.
    """

    # Paths
    config_dir: Path = Field(
        default=Path("configs"),
        description="Configuration directory",
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Data storage directory",
    )

    # Components
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        for dir_path in [self.config_dir, self.data_dir]:
            dir_path.mkdir(parents=True, exist_ok=True)

        # Create logs directory from logging config
        if self.logging.file:
            self.logging.file.parent.mkdir(parents=True, exist_ok=True)
