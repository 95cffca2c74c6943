"""GitHub client module: contents, code search and commit lookups.

This module provides a small async client over the GitHub REST API with
the three capabilities the GitHub provider needs: fetching a path (file
or directory listing), running a code search with text fragments, and
reading the date of the newest commit touching a path. Caching and
search throttling live in the provider; this client performs exactly one
HTTP request per call and never retries.
"""

from __future__ import annotations

import base64
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote

import httpx

from core.errors import NotFoundError, UpstreamServiceError

from .inputs import normalize_path


@dataclass(frozen=True, slots=True)
class GitHubDirEntry:
    name: str
    path: str
    type: str  # "file", "dir", "symlink" or "submodule"


@dataclass(frozen=True, slots=True)
class GitHubFile:
    name: str
    path: str
    size: int
    # None when the API did not inline the body (files over ~1MB)
    content: Optional[bytes]


@dataclass(frozen=True, slots=True)
class CodeSearchHit:
    path: str
    fragments: Tuple[str, ...]


ContentResponse = Union[List[GitHubDirEntry], GitHubFile]


class GitHubClient:
    """Async GitHub client.

    Purpose:
      - get_content(owner, repo, path) -> directory entries or a file
      - get_raw_content(owner, repo, path) -> bytes
      - search_code(query, owner, repo, path, extension) -> List[CodeSearchHit]
      - get_latest_commit_date(owner, repo, path) -> datetime

    Key behavior:
      - 404 maps to NotFoundError; any other failure to UpstreamServiceError.
      - Rate-limit responses (429, or 403 with no remaining quota) fail
        immediately with the reset time in the message.
    """

    BASE_URL = "https://api.github.com"
    JSON_ACCEPT = "application/vnd.github+json"
    RAW_ACCEPT = "application/vnd.github.raw"
    TEXT_MATCH_ACCEPT = "application/vnd.github.text-match+json"

    def __init__(
        self,
        *,
        token: Optional[str] = None,
        timeout: float = 20.0,
        verify: bool = True,
    ) -> None:
        self._timeout = float(timeout)
        self._verify = bool(verify)
        self._headers = self._build_headers(token)

    async def get_content(self, *, owner: str, repo: str, path: str) -> ContentResponse:
        """Fetch a repository path; a list for directories, a GitHubFile otherwise."""
        async with self._create_client() as client:
            resp = await self._get(client, self._contents_url(owner, repo, path))
            self._check(resp, context=f"contents {owner}/{repo}/{path}")
            data = resp.json()

        if isinstance(data, list):
            return [
                GitHubDirEntry(
                    name=str(item.get("name", "")),
                    path=str(item.get("path", "")),
                    type=str(item.get("type", "file")),
                )
                for item in data
            ]

        content: Optional[bytes] = None
        if data.get("encoding") == "base64" and data.get("content"):
            content = base64.b64decode(data["content"])
        elif data.get("size", 0) == 0:
            content = b""

        return GitHubFile(
            name=str(data.get("name", "")),
            path=str(data.get("path", path)),
            size=int(data.get("size", 0)),
            content=content,
        )

    async def get_raw_content(self, *, owner: str, repo: str, path: str) -> bytes:
        """Fetch the raw bytes of a file in a single request (bodies up to 100MB).

        Directories still answer with a JSON listing under the raw media
        type; those are reported as NotFoundError since they have no body.
        """
        path_clean = normalize_path(path)
        async with self._create_client(custom_headers={"Accept": self.RAW_ACCEPT}) as client:
            resp = await self._get(client, self._contents_url(owner, repo, path_clean))
            self._check(resp, context=f"raw {owner}/{repo}/{path_clean}")

        if resp.headers.get("Content-Type", "").startswith("application/json"):
            raise NotFoundError(f"Not a file: {path_clean}")
        return resp.content

    async def search_code(
        self,
        *,
        query: str,
        owner: str,
        repo: str,
        path: Optional[str] = None,
        extension: Optional[str] = None,
    ) -> List[CodeSearchHit]:
        q = f"{query} repo:{owner}/{repo}"
        if extension:
            q += f" extension:{extension.lstrip('.')}"
        if path:
            q += f" path:{path}"

        async with self._create_client(custom_headers={"Accept": self.TEXT_MATCH_ACCEPT}) as client:
            resp = await self._get(client, "/search/code", params={"q": q})
            self._check(resp, context="search/code")
            items = resp.json().get("items", [])

        return [
            CodeSearchHit(
                path=str(item["path"]),
                fragments=tuple(
                    str(m.get("fragment", ""))
                    for m in item.get("text_matches") or []
                    if m.get("fragment")
                ),
            )
            for item in items
            if isinstance(item.get("path"), str)
        ]

    async def get_latest_commit_date(self, *, owner: str, repo: str, path: str) -> datetime:
        async with self._create_client() as client:
            resp = await self._get(
                client,
                f"/repos/{owner}/{repo}/commits",
                params={"path": path, "per_page": 1},
            )
            self._check(resp, context=f"commits {owner}/{repo}/{path}")
            commits = resp.json()

        if not commits:
            raise NotFoundError(f"No commits found for {path}")
        try:
            raw = commits[0]["commit"]["committer"]["date"]
            return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamServiceError(f"Unexpected commit payload for {path}: {e}") from e

    # --- HTTP helpers ---

    def _build_headers(self, token: Optional[str]) -> dict[str, str]:
        headers = {
            "Accept": self.JSON_ACCEPT,
            "User-Agent": "synapse-mcp",
        }
        token = (token or "").strip()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _create_client(self, custom_headers: Optional[Mapping[str, str]] = None) -> httpx.AsyncClient:
        headers = {**self._headers, **dict(custom_headers or {})}
        return httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers=headers,
            timeout=self._timeout,
            verify=self._verify,
        )

    def _contents_url(self, owner: str, repo: str, path: str) -> str:
        rel = (path or "").strip("/")
        base = f"/repos/{owner}/{repo}/contents"
        return f"{base}/{quote(rel, safe='/')}" if rel else base

    async def _get(
        self,
        client: httpx.AsyncClient,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Response:
        try:
            return await client.get(url, params=dict(params or {}))
        except httpx.HTTPError as e:
            raise UpstreamServiceError(f"GitHub request failed (GET {url}): {e}") from e

    def _check(self, resp: httpx.Response, *, context: str) -> None:
        if resp.status_code == 404:
            raise NotFoundError(f"Not found on GitHub: {context}")

        limited = self._rate_limit_message(resp)
        if limited:
            raise UpstreamServiceError(f"GitHub rate limit hit ({context}): {limited}")

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamServiceError(f"GitHub request failed ({context}): {e}") from e

    def _rate_limit_message(self, resp: httpx.Response) -> Optional[str]:
        if resp.status_code == 429:
            retry_after = _parse_int_header(resp.headers, "Retry-After")
            if retry_after is not None:
                return f"retry after {retry_after}s"
            return "too many requests"

        if resp.status_code == 403 and resp.headers.get("X-RateLimit-Remaining") == "0":
            reset = _parse_int_header(resp.headers, "X-RateLimit-Reset")
            if reset is not None:
                return f"quota resets in {max(0, reset - int(time.time()))}s"
            return "quota exhausted"

        return None


def _parse_int_header(headers: Mapping[str, str], name: str) -> Optional[int]:
    value = (headers.get(name) or "").strip()
    if not value.isdigit():
        return None
    return int(value)
