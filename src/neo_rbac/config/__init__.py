"""Configuration module for neo-rbac."""

from .constants import (
    GlobalRole,
    PermissionTokens,
    DefaultRoles,
    DatabaseTables,
    DenialReasons,
)

from .settings import RBACSettings, get_settings

from .logging_config import (
    setup_logging,
    LogLevel,
    LogVerbosity,
    LogFormat,
    LoggingConfig,
)

__all__ = [
    # Constants
    "GlobalRole",
    "PermissionTokens",
    "DefaultRoles",
    "DatabaseTables",
    "DenialReasons",
    
    # Settings
    "RBACSettings",
    "get_settings",
    
    # Logging configuration
    "setup_logging",
    "LogLevel",
    "LogVerbosity",
    "LogFormat",
    "LoggingConfig",
]
