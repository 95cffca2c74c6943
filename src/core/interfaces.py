"""Core protocol and interface definitions.

Defines the ContentProvider protocol implemented by the local, GitHub
and aggregating providers so the tools can treat them uniformly.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from core.models import FileInfo, FileSystemEntry, ReadOptions, ReadResult, SearchResult


class ContentProvider(Protocol):
    """Contract for any content provider (local roots, GitHub, aggregator)."""

    async def list(self, path: str = "") -> List[FileSystemEntry]:
        ...

    async def read(self, path: str, options: Optional[ReadOptions] = None) -> ReadResult:
        ...

    async def search(self, query: str) -> List[SearchResult]:
        ...

    async def get_file_info(self, path: str) -> FileInfo:
        ...
