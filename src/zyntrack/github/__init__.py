"""GitHub contents API integration."""

from .client import (
    DEFAULT_API_URL,
    GitHubContentsClient,
    RemoteConfigError,
    RemoteConflictError,
    RemoteError,
)

__all__ = [
    "DEFAULT_API_URL",
    "GitHubContentsClient",
    "RemoteConfigError",
    "RemoteConflictError",
    "RemoteError",
]
