"""Settings for the moderator verification workflows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from .env import optional_env_var, positive_int_env_var
from .errors import ConfigurationError

DEFAULT_VERIFY_BATCH_SIZE: Final[int] = 20


class StorageBackend(StrEnum):
    SQLALCHEMY = "sqlalchemy"
    FIRESTORE = "firestore"


@dataclass(frozen=True, slots=True, kw_only=True)
class VerificationConfig:
    backend: StorageBackend = StorageBackend.SQLALCHEMY
    batch_size: int = DEFAULT_VERIFY_BATCH_SIZE


def get_verification_config() -> VerificationConfig:
    raw_backend = optional_env_var("RUNBOARD_BACKEND") or StorageBackend.SQLALCHEMY.value
    try:
        backend = StorageBackend(raw_backend.lower())
    except ValueError as exc:
        choices = ", ".join(member.value for member in StorageBackend)
        raise ConfigurationError(
            f"RUNBOARD_BACKEND must be one of {choices}, got {raw_backend!r}"
        ) from exc
    batch_size = positive_int_env_var(
        "RUNBOARD_VERIFY_BATCH_SIZE",
        default=DEFAULT_VERIFY_BATCH_SIZE,
    )
    return VerificationConfig(backend=backend, batch_size=batch_size)
