"""
Phalcon Runtime - Configuration

Centralized configuration management for the runtime helpers,
the collection type and the DI container.
Uses environment variables with sensible defaults.
"""
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Environment(Enum):
    """Deployment environments."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class LoggingConfig:
    """Logging configuration."""
    service_name: str = field(default_factory=lambda: os.getenv("PHALCON_SERVICE_NAME", "phalcon-runtime"))
    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    json_format: bool = field(
        default_factory=lambda: os.getenv("LOG_FORMAT", "json").lower() == "json"
    )
    log_to_console: bool = field(default_factory=lambda: _env_flag("LOG_TO_CONSOLE", "true"))
    include_timestamp: bool = True
    environment: str = field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))


@dataclass
class TracingConfig:
    """OpenTelemetry tracing configuration."""
    enabled: bool = field(default_factory=lambda: _env_flag("OTEL_ENABLED", "false"))
    service_name: str = field(
        default_factory=lambda: os.getenv("OTEL_SERVICE_NAME", "phalcon-runtime")
    )
    service_version: str = field(
        default_factory=lambda: os.getenv("OTEL_SERVICE_VERSION", "4.0.0")
    )
    console_export: bool = field(default_factory=lambda: _env_flag("OTEL_TRACE_CONSOLE", "false"))


@dataclass
class CollectionConfig:
    """Defaults for the Collection type."""
    insensitive: bool = field(
        default_factory=lambda: _env_flag("PHALCON_COLLECTION_INSENSITIVE", "true")
    )
    # JSON_HEX_TAG | JSON_HEX_AMP | JSON_HEX_APOS | JSON_HEX_QUOT | JSON_UNESCAPED_SLASHES
    json_options: int = field(
        default_factory=lambda: int(os.getenv("PHALCON_JSON_OPTIONS", "79"))
    )


@dataclass
class HelperConfig:
    """Defaults for the helper functions."""
    random_length: int = field(
        default_factory=lambda: int(os.getenv("PHALCON_RANDOM_LENGTH", "8"))
    )


@dataclass
class DiConfig:
    """Dependency injection configuration."""
    # First container constructed claims the empty default slot
    auto_default: bool = field(
        default_factory=lambda: _env_flag("PHALCON_DI_AUTO_DEFAULT", "true")
    )


@dataclass
class Config:
    """Main configuration class combining all sub-configs."""
    env: Environment = field(default_factory=lambda: Environment(os.getenv("ENVIRONMENT", "development")))
    debug: bool = field(default_factory=lambda: _env_flag("DEBUG", "false"))

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)
    collection: CollectionConfig = field(default_factory=CollectionConfig)
    helper: HelperConfig = field(default_factory=HelperConfig)
    di: DiConfig = field(default_factory=DiConfig)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.env == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.env == Environment.DEVELOPMENT

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "env": self.env.value,
            "debug": self.debug,
            "logging": {
                "level": self.logging.level,
                "json_format": self.logging.json_format,
            },
            "tracing": {
                "enabled": self.tracing.enabled,
                "service_name": self.tracing.service_name,
            },
            "collection": {
                "insensitive": self.collection.insensitive,
                "json_options": self.collection.json_options,
            },
            "helper": {
                "random_length": self.helper.random_length,
            },
            "di": {
                "auto_default": self.di.auto_default,
            },
        }


# Singleton configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create configuration singleton."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the environment is read again."""
    global _config
    _config = None
