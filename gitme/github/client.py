"""Thin GitHub REST client built on urllib."""

from __future__ import annotations

import base64
import binascii
import http.client
import json
from typing import Any, Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from ..config import GitHubConfig


class GitHubAPIError(RuntimeError):
    """Raised when a GitHub request fails or returns an unexpected payload."""

    def __init__(self, message: str, *, status: Optional[int] = None, url: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.url = url


class GitHubClient:
    """Reads repository metadata, trees and file contents."""

    ACCEPT = "application/vnd.github.v3+json"

    def __init__(
        self,
        config: GitHubConfig | None = None,
        *,
        urlopen_fn: Callable[..., Any] = urlopen,
    ) -> None:
        self.config = config or GitHubConfig()
        self._urlopen_fn = urlopen_fn

    def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        url = f"{self.config.api_base_url}/repos/{quote(owner)}/{quote(repo)}"
        return self._request_object(url)

    def get_tree(self, owner: str, repo: str, ref: str) -> dict[str, Any]:
        url = (
            f"{self.config.api_base_url}/repos/{quote(owner)}/{quote(repo)}"
            f"/git/trees/{quote(ref, safe='')}?recursive=1"
        )
        return self._request_object(url)

    def get_blob_text(self, owner: str, repo: str, sha: str) -> str:
        url = f"{self.config.api_base_url}/repos/{quote(owner)}/{quote(repo)}/git/blobs/{sha}"
        payload = self._request_object(url)
        content = payload.get("content")
        if not isinstance(content, str):
            raise GitHubAPIError(f"Blob payload missing content for URL: {url}", url=url)
        if payload.get("encoding") == "base64":
            try:
                raw = base64.b64decode(content.replace("\n", ""), validate=False)
            except (binascii.Error, ValueError) as exc:
                raise GitHubAPIError(f"Invalid base64 blob for URL: {url}", url=url) from exc
            return raw.decode("utf-8", errors="replace")
        return content

    def get_raw_text(self, owner: str, repo: str, ref: str, path: str) -> str:
        url = f"{self.config.raw_base_url}/{quote(owner)}/{quote(repo)}/{quote(ref)}/{quote(path)}"
        return self._request(url, accept=None).decode("utf-8", errors="replace")

    def _request_object(self, url: str) -> dict[str, Any]:
        content = self._request(url, accept=self.ACCEPT)
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as exc:
            raise GitHubAPIError(f"Invalid JSON received from GitHub for URL: {url}", url=url) from exc
        if not isinstance(parsed, dict):
            raise GitHubAPIError(
                "Unexpected GitHub payload: top-level value must be a JSON object", url=url
            )
        return parsed

    def _request(self, url: str, *, accept: str | None) -> bytes:
        request = Request(url, headers=self._build_headers(accept))
        try:
            with self._urlopen_fn(request, timeout=self.config.request_timeout) as response:
                return response.read()
        except HTTPError as exc:
            raise GitHubAPIError(
                f"GitHub request failed with HTTP {exc.code} for URL: {url}",
                status=exc.code,
                url=url,
            ) from exc
        except URLError as exc:
            raise GitHubAPIError(f"GitHub request failed for URL: {url}: {exc.reason}", url=url) from exc
        except (OSError, http.client.HTTPException) as exc:
            raise GitHubAPIError(f"GitHub connection failed for URL: {url}: {exc!r}", url=url) from exc

    def _build_headers(self, accept: str | None) -> dict[str, str]:
        headers: dict[str, str] = {}
        if accept:
            headers["Accept"] = accept
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        return headers


__all__ = ["GitHubAPIError", "GitHubClient"]
