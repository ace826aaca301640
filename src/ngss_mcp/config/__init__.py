"""Config module exports."""

from ngss_mcp.config.loader import NgssSettings, load_config
from ngss_mcp.config.models import (
    CacheConfig,
    DataConfig,
    LimitsConfig,
    LoggingConfig,
    NgssConfig,
    ServerConfig,
)

__all__ = [
    "load_config",
    "NgssConfig",
    "NgssSettings",
    "CacheConfig",
    "DataConfig",
    "LimitsConfig",
    "LoggingConfig",
    "ServerConfig",
]
