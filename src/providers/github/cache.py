"""Per-provider memoization of GitHub file bodies and commit dates."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from core.cache import Clock, TTLCache
from core.limits import GITHUB_CACHE_TTL_SECONDS


class GitHubCache:
    """Two independent TTL caches keyed by full repository path."""

    def __init__(
        self,
        *,
        ttl_seconds: float = GITHUB_CACHE_TTL_SECONDS,
        clock: Optional[Clock] = None,
    ) -> None:
        self._content: TTLCache[str] = TTLCache(ttl_seconds=ttl_seconds, clock=clock)
        self._commit_dates: TTLCache[datetime] = TTLCache(ttl_seconds=ttl_seconds, clock=clock)

    def get_content(self, path: str) -> Optional[str]:
        return self._content.get(path)

    def set_content(self, path: str, content: str) -> None:
        self._content.set(path, content)

    def get_commit_date(self, path: str) -> Optional[datetime]:
        return self._commit_dates.get(path)

    def set_commit_date(self, path: str, date: datetime) -> None:
        self._commit_dates.set(path, date)

    def clear(self) -> None:
        self._content.clear()
        self._commit_dates.clear()
