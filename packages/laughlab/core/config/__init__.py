"""Application configuration."""

from laughlab.core.config.loader import configure_logging, load_app_config, load_config
from laughlab.core.config.models import AgentConfig, AppConfig, EvidenceLockConfig, LoggingConfig

__all__ = [
    "AgentConfig",
    "AppConfig",
    "EvidenceLockConfig",
    "LoggingConfig",
    "configure_logging",
    "load_app_config",
    "load_config",
]
