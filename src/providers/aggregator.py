"""Unified namespace over a root provider and mounted providers.

A mount grafts a whole provider under a virtual prefix such as
`github/owner/repo`. Paths under a prefix are dispatched to the mounted
provider (longest matching prefix wins); everything else goes to the
root provider. Mount prefixes also show up as virtual directories so
they can be discovered by browsing.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from core.interfaces import ContentProvider
from core.models import FileInfo, FileSystemEntry, ReadOptions, ReadResult, SearchResult
from core.paths import is_within, normalize_posix_relpath, strip_slashes

logger = logging.getLogger(__name__)


def _prefixed(prefix: str, path: str) -> str:
    rel = path.lstrip("/")
    return f"{prefix}/{rel}" if rel else prefix


class AggregatorProvider:
    def __init__(self, root_provider: ContentProvider) -> None:
        self._root = root_provider
        # Insertion order is registration order (used by search).
        self._mounts: Dict[str, ContentProvider] = {}

    @property
    def mounts(self) -> Dict[str, ContentProvider]:
        return dict(self._mounts)

    def mount(self, prefix: str, provider: ContentProvider) -> None:
        normalized = strip_slashes(prefix)
        if not normalized:
            raise ValueError("Mount prefix must be non-empty")
        self._mounts[normalized] = provider

    def _resolve(self, path: str, *, allow_exact: bool) -> Optional[Tuple[str, ContentProvider, str]]:
        """Find (prefix, provider, sub_path) for the longest mount owning `path`."""
        for prefix in sorted(self._mounts, key=len, reverse=True):
            if path.startswith(prefix + "/"):
                return prefix, self._mounts[prefix], path[len(prefix) + 1:]
            if allow_exact and path == prefix:
                return prefix, self._mounts[prefix], ""
        return None

    async def list(self, path: str = "") -> List[FileSystemEntry]:
        normalized = normalize_posix_relpath(path)

        owner = self._resolve(normalized, allow_exact=True)
        if owner is not None:
            prefix, provider, sub_path = owner
            entries = await provider.list(sub_path)
            return [replace(e, path=_prefixed(prefix, e.path)) for e in entries]

        entries = await self._root.list(normalized)
        names = {e.name for e in entries}

        for prefix in self._mounts:
            if not is_within(prefix, normalized) or prefix == normalized:
                continue
            remaining = prefix[len(normalized):].lstrip("/") if normalized else prefix
            segment = remaining.split("/")[0]
            if segment in names:
                continue
            names.add(segment)
            entries.append(
                FileSystemEntry(
                    name=segment,
                    type="directory",
                    path=f"{normalized}/{segment}" if normalized else segment,
                )
            )

        return entries

    async def read(self, path: str, options: Optional[ReadOptions] = None) -> ReadResult:
        normalized = normalize_posix_relpath(path)
        owner = self._resolve(normalized, allow_exact=False)
        if owner is not None:
            _prefix, provider, sub_path = owner
            return await provider.read(sub_path, options)
        return await self._root.read(normalized, options)

    async def search(self, query: str) -> List[SearchResult]:
        results = list(await self._root.search(query))

        for prefix, provider in self._mounts.items():
            try:
                mounted = await provider.search(query)
            except Exception:
                # One broken mount never aborts the others
                logger.warning("Error searching provider mounted at %s", prefix, exc_info=True)
                continue
            results.extend(replace(r, path=_prefixed(prefix, r.path)) for r in mounted)

        return results

    async def get_file_info(self, path: str) -> FileInfo:
        normalized = normalize_posix_relpath(path)
        owner = self._resolve(normalized, allow_exact=False)
        if owner is not None:
            prefix, provider, sub_path = owner
            info = await provider.get_file_info(sub_path)
            return replace(info, path=_prefixed(prefix, info.path))
        return await self._root.get_file_info(normalized)
