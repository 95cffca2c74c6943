"""Recursive keyword search over note files under the local roots."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import List, Sequence, Set

from core.limits import NOTE_EXTENSION
from core.models import SearchResult
from core.search import extract_matches

logger = logging.getLogger(__name__)


class FileSystemWalker:
    def __init__(self, root_paths: Sequence[Path], *, extension: str = NOTE_EXTENSION) -> None:
        self._roots = list(root_paths)
        self._extension = extension

    async def search(self, query: str) -> List[SearchResult]:
        return await asyncio.to_thread(self._search, query)

    def _search(self, query: str) -> List[SearchResult]:
        results: List[SearchResult] = []
        # Relative paths already matched; an earlier root wins on overlap.
        seen: Set[str] = set()

        for root in self._roots:
            try:
                self._walk(root, root, query, seen, results)
            except OSError as e:
                logger.warning("Error walking root %s: %s", root, e)
        return results

    def _walk(
        self,
        current: Path,
        root: Path,
        query: str,
        seen: Set[str],
        results: List[SearchResult],
    ) -> None:
        with os.scandir(current) as it:
            entries = list(it)

        needle = query.lower()
        for entry in entries:
            full = Path(entry.path)
            try:
                if entry.is_dir(follow_symlinks=False):
                    self._walk(full, root, query, seen, results)
                    continue
                # Symlinked files are skipped; their targets may sit outside every root.
                if not entry.is_file(follow_symlinks=False):
                    continue
                if not entry.name.endswith(self._extension):
                    continue

                rel = full.relative_to(root).as_posix()
                if rel in seen:
                    continue

                content = full.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                # One unreadable file or directory never aborts the search
                logger.warning("Skipping %s during search: %s", full, e)
                continue

            if needle in content.lower():
                results.append(SearchResult(path=rel, matches=extract_matches(content, query)))
                seen.add(rel)
