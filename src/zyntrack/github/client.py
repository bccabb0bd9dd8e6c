"""GitHub contents API client for the synced log document."""

from __future__ import annotations

import base64
import binascii
import json
import logging
import time
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

import httpx

from ..models import LogEntry, SyncConfig, sanitize_entries

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


class RemoteConfigError(Exception):
    """Sync configuration is incomplete."""

    pass


class RemoteError(Exception):
    """The remote store rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RemoteConflictError(RemoteError):
    """The version token was stale; another writer moved the document."""

    pass


class GitHubContentsClient:
    """Async client for one JSON document in a GitHub repository.

    Reads return the document's sha as the version token. Writes send the
    last-known sha back so GitHub rejects them if the document changed in
    between. No merge is ever attempted.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: REST API base URL (use custom for Enterprise)
            timeout: Request timeout in seconds
            transport: Optional transport override
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> GitHubContentsClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def fetch_remote(self, config: SyncConfig) -> tuple[list[LogEntry], str | None]:
        """Read the log document.

        Args:
            config: Remote target and token

        Returns:
            (entries, sha). A missing document yields ([], None).

        Raises:
            RemoteConfigError: owner, repo or token missing
            RemoteError: Non-success response or undecodable document
        """
        self._require_complete(config)
        url = self._contents_url(config)

        response = await self._send("GET", url, config, params={"ref": config.branch})
        if response.status_code == 404:
            logger.info("No remote document at %s:%s yet", config.repository, config.path)
            return [], None
        self._raise_for_status(response, "fetch")

        data = self._json(response)
        content = data.get("content")
        if not isinstance(content, str) or not content.strip():
            # GitHub omits the content of files over 1 MB
            raise RemoteError(
                "Remote log file has no readable content; it may be too large for the "
                "contents API.",
                response.status_code,
            )
        entries = self._decode_document(content)
        sha = data.get("sha")
        logger.info(
            "Fetched %d logs from %s:%s (sha=%s)", len(entries), config.repository, config.path, sha
        )
        return entries, sha

    async def push_remote(
        self,
        config: SyncConfig,
        snapshot: Sequence[LogEntry],
        sha: str | None,
        message: str,
    ) -> str:
        """Replace the log document with a full snapshot.

        Args:
            config: Remote target and token
            snapshot: Every entry the document should contain
            sha: Last-known version token; None creates the document
            message: Commit message describing the change

        Returns:
            The document's new sha.

        Raises:
            RemoteConfigError: owner, repo or token missing
            RemoteConflictError: sha is stale
            RemoteError: Any other non-success response
        """
        self._require_complete(config)
        url = self._contents_url(config)

        payload: dict[str, Any] = {
            "message": message,
            "content": self._encode_document(snapshot),
            "branch": config.branch,
        }
        if sha:
            payload["sha"] = sha

        response = await self._send("PUT", url, config, json=payload)
        self._raise_for_status(response, "push")

        new_sha = (self._json(response).get("content") or {}).get("sha")
        if not new_sha:
            raise RemoteError("GitHub did not return a new version for the log file.")
        logger.info("Pushed %d logs to %s (sha=%s)", len(snapshot), config.repository, new_sha)
        return new_sha

    # --- Private Methods ---

    @staticmethod
    def _require_complete(config: SyncConfig) -> None:
        missing = config.missing_fields()
        if missing:
            raise RemoteConfigError(f"GitHub sync config is missing: {', '.join(missing)}")

    @staticmethod
    def _contents_url(config: SyncConfig) -> str:
        return (
            f"/repos/{quote(config.owner, safe='')}/{quote(config.repo, safe='')}"
            f"/contents/{quote(config.path)}"
        )

    async def _send(
        self, method: str, url: str, config: SyncConfig, **kwargs: Any
    ) -> httpx.Response:
        headers = {"Authorization": f"Bearer {config.token}"}
        logger.debug("%s %s", method, url)

        start_time = time.monotonic()
        try:
            response = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.RequestError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            logger.error("%s %s failed after %.0fms: %s", method, url, elapsed_ms, e)
            raise RemoteError(f"Request failed: {e}") from e

        elapsed_ms = (time.monotonic() - start_time) * 1000
        logger.debug("%s %s: HTTP %d (%.0fms)", method, url, response.status_code, elapsed_ms)
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response, action: str) -> None:
        if response.is_success:
            return

        message = _server_message(response) or response.reason_phrase or "Request failed"
        status = response.status_code
        logger.error("GitHub %s failed: HTTP %d %s", action, status, message)

        if status == 409 or (status == 422 and "sha" in message.lower()):
            raise RemoteConflictError(
                f"{message} The log file changed on GitHub; reload before retrying.",
                status,
            )
        raise RemoteError(message, status)

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise RemoteError(f"Invalid JSON response: {e}") from e
        if not isinstance(data, dict):
            raise RemoteError("Unexpected response from GitHub.")
        return data

    @staticmethod
    def _decode_document(content: str) -> list[LogEntry]:
        try:
            text = base64.b64decode(content).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise RemoteError(f"Cannot decode remote log file: {e}") from e

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            raise RemoteError(f"Remote log file is not valid JSON: {e}") from e
        if not isinstance(parsed, list):
            raise RemoteError("Remote log file must contain a JSON array.")
        return sanitize_entries(parsed)

    @staticmethod
    def _encode_document(snapshot: Sequence[LogEntry]) -> str:
        text = json.dumps([entry.to_dict() for entry in snapshot], indent=2) + "\n"
        return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _server_message(response: httpx.Response) -> str | None:
    """Extract GitHub's error "message" field, if present."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return None
