"""Firestore REST configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import optional_env_var, require_env_vars

FIRESTORE_API_URL: Final[str] = "https://firestore.googleapis.com/v1"
DEFAULT_DATABASE_ID: Final[str] = "(default)"


@dataclass(frozen=True, slots=True, kw_only=True)
class FirestoreConfig:
    """Where the leaderboard documents live and how to authenticate.

    ``emulator_host`` (``host:port``) takes precedence over the public API and
    skips authentication, mirroring the Firebase SDKs.
    """

    project_id: str
    database_id: str = DEFAULT_DATABASE_ID
    api_key: str | None = None
    access_token: str | None = None
    emulator_host: str | None = None

    @property
    def api_url(self) -> str:
        if self.emulator_host:
            return f"http://{self.emulator_host}/v1"
        return FIRESTORE_API_URL

    @property
    def database_path(self) -> str:
        return f"projects/{self.project_id}/databases/{self.database_id}"

    @property
    def documents_url(self) -> str:
        return f"{self.api_url}/{self.database_path}/documents"

    @classmethod
    def from_environment(cls) -> FirestoreConfig:
        values = require_env_vars(("FIRESTORE_PROJECT_ID",))
        return cls(
            project_id=values["FIRESTORE_PROJECT_ID"].strip(),
            database_id=optional_env_var("FIRESTORE_DATABASE") or DEFAULT_DATABASE_ID,
            api_key=optional_env_var("FIRESTORE_API_KEY"),
            access_token=optional_env_var("FIRESTORE_ACCESS_TOKEN"),
            emulator_host=optional_env_var("FIRESTORE_EMULATOR_HOST"),
        )


def get_firestore_config() -> FirestoreConfig:
    return FirestoreConfig.from_environment()
