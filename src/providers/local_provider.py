"""Local filesystem ContentProvider.

Serves one or more root directories as a single namespace. Every path
is confined to the roots; single-file operations use the first root
holding the file, listings merge all roots.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from core.errors import ContentIOError, InvalidArgumentError, SizeExceededError
from core.limits import MAX_MCP_RESPONSE_SIZE, STREAMING_THRESHOLD
from core.models import FileInfo, FileSystemEntry, ReadMetadata, ReadOptions, ReadResult, SearchResult
from core.validation import resolve_line_range, validate_read_options
from providers.local.path_resolver import PathResolver
from providers.local.stream_reader import FileStreamReader
from providers.local.walker import FileSystemWalker


def _clean(path: str) -> str:
    # Leading "/" is kept so absolute paths fail containment instead of
    # being silently re-rooted.
    return (path or "").strip().replace("\\", "/")


class LocalFileSystemProvider:
    def __init__(
        self,
        root_paths: Sequence[Path | str],
        *,
        reader: Optional[FileStreamReader] = None,
    ) -> None:
        self._resolver = PathResolver(root_paths)
        self._reader = reader or FileStreamReader()
        self._walker = FileSystemWalker(self._resolver.roots)

    @property
    def roots(self) -> List[Path]:
        return self._resolver.roots

    async def list(self, path: str = "") -> List[FileSystemEntry]:
        rel = _clean(path)
        # Resolve eagerly so escapes fail before any thread hop.
        candidates = list(self._resolver.candidates(rel))

        def _do() -> List[FileSystemEntry]:
            merged: Dict[str, FileSystemEntry] = {}
            for base, root in candidates:
                if not base.is_dir():
                    continue
                try:
                    children = sorted(base.iterdir(), key=lambda p: p.name)
                except OSError as e:
                    raise ContentIOError(f"Failed to list {path or '.'}: {e}") from e
                for child in children:
                    # Use POSIX-style paths to keep results stable across OSes
                    child_rel = child.relative_to(root).as_posix()
                    if child_rel in merged:
                        continue
                    merged[child_rel] = FileSystemEntry(
                        name=child.name,
                        type="directory" if child.is_dir() else "file",
                        path=child_rel,
                    )
            return list(merged.values())

        return await asyncio.to_thread(_do)

    async def read(self, path: str, options: Optional[ReadOptions] = None) -> ReadResult:
        validate_read_options(options)
        abs_path, _root = await self._resolve_file(path)

        start_line, end_line = resolve_line_range(options)
        max_size = MAX_MCP_RESPONSE_SIZE
        if options is not None and options.max_response_size is not None:
            max_size = options.max_response_size

        file_size = (await asyncio.to_thread(abs_path.stat)).st_size
        result = await self._reader.read_range(
            abs_path,
            start_line=start_line,
            end_line=end_line,
            max_response_size=max_size,
            count_all_lines=file_size < STREAMING_THRESHOLD,
        )
        if result.size_limited:
            raise SizeExceededError(
                f"Lines {start_line}-{end_line} of {path} exceed the response size limit "
                f"of {max_size} bytes; request fewer lines or a larger max_response_size"
            )

        return ReadResult(
            content=result.content,
            metadata=ReadMetadata(
                start_line=start_line,
                end_line=end_line,
                total_lines=result.total_lines,
                file_size=file_size,
            ),
        )

    async def search(self, query: str) -> List[SearchResult]:
        return await self._walker.search(query)

    async def get_file_info(self, path: str) -> FileInfo:
        abs_path, root = await self._resolve_file(path)
        st = await asyncio.to_thread(abs_path.stat)

        line_count = None
        if st.st_size < STREAMING_THRESHOLD:
            line_count = await self._reader.count_lines(abs_path)

        return FileInfo(
            path=abs_path.relative_to(root).as_posix(),
            size=st.st_size,
            file_type=abs_path.suffix,
            last_modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            line_count=line_count,
        )

    async def _resolve_file(self, path: str) -> Tuple[Path, Path]:
        rel = _clean(path)
        if not rel:
            raise InvalidArgumentError("Path is empty")
        return await asyncio.to_thread(self._resolver.resolve_file, rel)
