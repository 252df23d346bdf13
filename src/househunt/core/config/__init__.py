"""Configuration loading and validation."""

from .loader import ConfigError, load_app_config
from .models import (
    AppConfig,
    DatabaseConfig,
    ExtractionConfig,
    FetchConfig,
    FieldExtractionRule,
    LoggingConfig,
    Sentiment,
)

__all__ = [
    # Enums
    "Sentiment",
    # Config models
    "AppConfig",
    "DatabaseConfig",
    "ExtractionConfig",
    "FetchConfig",
    "FieldExtractionRule",
    "LoggingConfig",
    # Loaders
    "ConfigError",
    "load_app_config",
]
