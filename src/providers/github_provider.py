"""GitHub-backed ContentProvider.

Scoped to one repository and an optional base path inside it. Caller
paths are relative to the base path; file bodies and commit dates are
cached for a few minutes and code searches go through the throttler.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import List, Optional

from clients.github import GitHubClient
from core.errors import SizeExceededError, SynapseError
from core.limits import (
    MAX_GITHUB_FILE_SIZE,
    MAX_MCP_RESPONSE_SIZE,
    NOTE_EXTENSION,
    STREAMING_THRESHOLD,
    UNKNOWN_LINE,
)
from core.models import (
    FileInfo,
    FileSystemEntry,
    ReadMetadata,
    ReadOptions,
    ReadResult,
    SearchMatch,
    SearchResult,
)
from core.paths import join_path, normalize_posix_relpath, remove_base_path, strip_slashes
from core.search import extract_matches, split_lines
from core.validation import resolve_line_range, validate_read_options, validate_response_size
from providers.github.cache import GitHubCache
from providers.github.throttler import GitHubSearchThrottler

logger = logging.getLogger(__name__)


class GitHubProvider:
    def __init__(
        self,
        *,
        client: GitHubClient,
        owner: str,
        repo: str,
        base_path: str = "",
        cache: Optional[GitHubCache] = None,
        throttler: Optional[GitHubSearchThrottler] = None,
    ) -> None:
        self._client = client
        self._owner = owner
        self._repo = repo
        self._base_path = strip_slashes(base_path)
        self._cache = cache or GitHubCache()
        self._throttler = throttler or GitHubSearchThrottler()

    @property
    def label(self) -> str:
        repo = f"{self._owner}/{self._repo}"
        return f"{repo}/{self._base_path}" if self._base_path else repo

    def _full_path(self, path: str) -> str:
        return join_path(self._base_path, normalize_posix_relpath(path))

    async def list(self, path: str = "") -> List[FileSystemEntry]:
        full_path = self._full_path(path)
        try:
            data = await self._client.get_content(owner=self._owner, repo=self._repo, path=full_path)
        except SynapseError as e:
            logger.warning("GitHub list error (%s @ %s): %s", self.label, full_path, e)
            raise

        if not isinstance(data, list):
            # The path names a file
            return []

        return [
            FileSystemEntry(
                name=item.name,
                type="directory" if item.type == "dir" else "file",
                path=remove_base_path(item.path, self._base_path),
            )
            for item in data
        ]

    async def read(self, path: str, options: Optional[ReadOptions] = None) -> ReadResult:
        validate_read_options(options)
        full_path = self._full_path(path)
        text = await self._fetch_text(full_path)

        start_line, end_line = resolve_line_range(options)
        max_size = MAX_MCP_RESPONSE_SIZE
        if options is not None and options.max_response_size is not None:
            max_size = options.max_response_size

        lines = split_lines(text)
        content = "\n".join(lines[start_line - 1:end_line])
        # Only the slice travels over the transport, so only the slice is checked.
        validate_response_size(content, max_size)

        file_size = len(text.encode("utf-8"))
        return ReadResult(
            content=content,
            metadata=ReadMetadata(
                start_line=start_line,
                end_line=end_line,
                total_lines=len(lines) if file_size < STREAMING_THRESHOLD else None,
                file_size=file_size,
            ),
        )

    async def search(self, query: str) -> List[SearchResult]:
        await self._throttler.admit()

        try:
            hits = await self._client.search_code(
                query=query,
                owner=self._owner,
                repo=self._repo,
                path=self._base_path or None,
                extension=NOTE_EXTENSION,
            )
        except SynapseError as e:
            logger.warning("GitHub search error (%s): %s", self.label, e)
            return []

        results: List[SearchResult] = []
        for hit in hits:
            rel = remove_base_path(hit.path, self._base_path)
            try:
                text = await self._fetch_text(hit.path)
                matches = extract_matches(text, query)
            except SynapseError as e:
                logger.warning("Falling back to search fragments for %s: %s", hit.path, e)
                matches = [SearchMatch(line=UNKNOWN_LINE, content=f) for f in hit.fragments]
                if not matches:
                    matches = [SearchMatch(line=UNKNOWN_LINE, content=f"Match found in {rel}")]
            results.append(SearchResult(path=rel, matches=matches))
        return results

    async def get_file_info(self, path: str) -> FileInfo:
        full_path = self._full_path(path)
        text = await self._fetch_text(full_path)
        size = len(text.encode("utf-8"))

        return FileInfo(
            path=remove_base_path(full_path, self._base_path),
            size=size,
            file_type=PurePosixPath(full_path).suffix,
            last_modified=await self._last_modified(full_path),
            line_count=len(split_lines(text)) if size < STREAMING_THRESHOLD else None,
        )

    async def _fetch_text(self, full_path: str) -> str:
        cached = self._cache.get_content(full_path)
        if cached is not None:
            return cached

        # One raw-media request per uncached file, whatever its size.
        try:
            raw = await self._client.get_raw_content(owner=self._owner, repo=self._repo, path=full_path)
        except SynapseError as e:
            logger.warning("GitHub read error (%s @ %s): %s", self.label, full_path, e)
            raise

        if len(raw) > MAX_GITHUB_FILE_SIZE:
            raise SizeExceededError(
                f"File size ({len(raw) / 1024 / 1024:.2f}MB) exceeds GitHub API limit "
                f"of {MAX_GITHUB_FILE_SIZE / 1024 / 1024:.0f}MB"
            )

        text = raw.decode("utf-8", errors="replace")
        self._cache.set_content(full_path, text)
        return text

    async def _last_modified(self, full_path: str) -> datetime:
        cached = self._cache.get_commit_date(full_path)
        if cached is not None:
            return cached

        try:
            date = await self._client.get_latest_commit_date(
                owner=self._owner, repo=self._repo, path=full_path
            )
        except SynapseError as e:
            logger.warning("Commit lookup failed for %s, using current time: %s", full_path, e)
            return datetime.now(timezone.utc)

        self._cache.set_commit_date(full_path, date)
        return date
