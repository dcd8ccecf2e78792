"""
Config Module - Black Box Interface

Purpose: Typed application configuration
Interface: ConfigProvider protocol, EnvConfigProvider, StaticConfigProvider
Hidden: Environment parsing, defaults

Components receive the config objects they need at construction time.
"""

from .provider import (
    APIConfig,
    AuthConfig,
    ConfigProvider,
    DatabaseConfig,
    EnvConfigProvider,
    StaticConfigProvider,
)

__all__ = [
    "APIConfig",
    "AuthConfig",
    "ConfigProvider",
    "DatabaseConfig",
    "EnvConfigProvider",
    "StaticConfigProvider",
]
