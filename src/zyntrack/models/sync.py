"""Sync-related data models for GitHub document sync."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

DEFAULT_BRANCH = "main"
DEFAULT_PATH = "data/logs.json"


class SyncConfig(BaseModel):
    """Remote target for GitHub sync.

    A non-empty token is the only thing that enables sync.
    """

    owner: str = ""
    repo: str = ""
    branch: str = Field(default=DEFAULT_BRANCH, description="Branch holding the log document")
    path: str = Field(default=DEFAULT_PATH, description="Path of the JSON document in the repo")
    token: str = ""

    @field_validator("owner", "repo", "token", mode="before")
    @classmethod
    def strip_value(cls, v: object) -> str:
        """Strip whitespace; treat None as empty."""
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("branch", mode="before")
    @classmethod
    def default_branch(cls, v: object) -> str:
        """Fall back to the default branch when blank."""
        value = str(v).strip() if v is not None else ""
        return value or DEFAULT_BRANCH

    @field_validator("path", mode="before")
    @classmethod
    def default_path(cls, v: object) -> str:
        """Fall back to the default path when blank; drop leading slashes."""
        value = str(v).strip().lstrip("/") if v is not None else ""
        return value or DEFAULT_PATH

    @property
    def enabled(self) -> bool:
        """Whether this config turns remote sync on."""
        return bool(self.token)

    @property
    def repository(self) -> str:
        """Repository in "owner/repo" form."""
        return f"{self.owner}/{self.repo}"

    def missing_fields(self) -> list[str]:
        """Names of required fields that are empty."""
        return [name for name in ("owner", "repo", "token") if not getattr(self, name)]


class SyncStatus(str, Enum):
    """Status of the store's sync with GitHub."""

    IDLE = "idle"
    SYNCING = "syncing"
    ERROR = "error"


@dataclass(frozen=True)
class SyncState:
    """Snapshot of the sync state machine."""

    enabled: bool = False
    status: SyncStatus = SyncStatus.IDLE
    message: str = ""
    last_synced_at: datetime | None = None

    @property
    def phase(self) -> str:
        """Phase name: disabled when sync is off, otherwise the status value."""
        if not self.enabled:
            return "disabled"
        return self.status.value
