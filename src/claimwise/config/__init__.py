"""Application configuration helpers."""

from __future__ import annotations

from .backend import BackendProfile, PhantomReads, get_backend_profile
from .env import optional_env_var
from .errors import ConfigurationError
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "BackendProfile",
    "ConfigurationError",
    "DatabaseConfig",
    "PhantomReads",
    "StorageConfig",
    "configure_logging",
    "get_backend_profile",
    "get_database_config",
    "get_storage_config",
    "optional_env_var",
]
