"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, positive_int_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .firestore import FirestoreConfig, get_firestore_config
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .verification import (
    DEFAULT_VERIFY_BATCH_SIZE,
    StorageBackend,
    VerificationConfig,
    get_verification_config,
)

__all__ = [
    "DEFAULT_VERIFY_BATCH_SIZE",
    "ConfigurationError",
    "DatabaseConfig",
    "FirestoreConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageBackend",
    "StorageConfig",
    "VerificationConfig",
    "configure_logging",
    "get_database_config",
    "get_firestore_config",
    "get_storage_config",
    "get_verification_config",
    "optional_env_var",
    "positive_int_env_var",
    "require_env_vars",
]
