"""Line-range reads over local files without loading them whole.

Files are iterated line by line in text mode (universal newlines), so
'\\n', '\\r\\n' and '\\r' terminators are all handled. Blocking IO runs
in a worker thread to keep the event loop responsive.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from core.errors import ContentIOError, NotFoundError
from core.limits import MAX_MCP_RESPONSE_SIZE, MAX_REQUESTED_LINES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreamReadResult:
    content: str
    lines_read: int
    total_lines: Optional[int] = None
    # True when the byte ceiling cut the requested range short
    size_limited: bool = False


def _open_text(path: Path):
    return path.open("r", encoding="utf-8", errors="replace", newline=None)


class FileStreamReader:
    def __init__(self, *, max_collected_lines: int = MAX_REQUESTED_LINES) -> None:
        self._max_collected_lines = max(1, int(max_collected_lines))

    async def read_range(
        self,
        path: Path,
        *,
        start_line: int = 1,
        end_line: Optional[int] = None,
        max_response_size: int = MAX_MCP_RESPONSE_SIZE,
        count_all_lines: bool = False,
    ) -> StreamReadResult:
        return await asyncio.to_thread(
            self._read_range,
            path,
            start_line,
            end_line,
            max_response_size,
            count_all_lines,
        )

    async def count_lines(self, path: Path) -> int:
        return await asyncio.to_thread(self._count_lines, path)

    def _read_range(
        self,
        path: Path,
        start_line: int,
        end_line: Optional[int],
        max_response_size: int,
        count_all_lines: bool,
    ) -> StreamReadResult:
        collected: List[str] = []
        response_size = 0
        counter = 0
        size_limited = False
        collecting = True

        try:
            with _open_text(path) as fh:
                for raw in fh:
                    counter += 1
                    if not collecting:
                        # Range is done; only keeping the running total.
                        continue
                    if counter < start_line:
                        continue

                    done = end_line is not None and counter > end_line
                    if not done:
                        line = raw.rstrip("\n")
                        # Measured as joined content: a separator precedes every line but the first
                        line_size = len(line.encode("utf-8")) + (1 if collected else 0)
                        if response_size + line_size > max_response_size:
                            logger.info(
                                "Response size limit (%d bytes) reached at line %d of %s",
                                max_response_size,
                                counter,
                                path,
                            )
                            size_limited = True
                            done = True
                        else:
                            collected.append(line)
                            response_size += line_size
                            if len(collected) >= self._max_collected_lines:
                                done = True

                    if done:
                        if not count_all_lines:
                            break
                        collecting = False
        except FileNotFoundError as e:
            raise NotFoundError(f"File not found: {path.name}") from e
        except OSError as e:
            raise ContentIOError(f"Failed to read file {path.name}: {e}") from e

        return StreamReadResult(
            content="\n".join(collected),
            lines_read=len(collected),
            total_lines=counter if count_all_lines else None,
            size_limited=size_limited,
        )

    def _count_lines(self, path: Path) -> int:
        count = 0
        try:
            with _open_text(path) as fh:
                for _ in fh:
                    count += 1
        except FileNotFoundError as e:
            raise NotFoundError(f"File not found: {path.name}") from e
        except OSError as e:
            raise ContentIOError(f"Failed to count lines in {path.name}: {e}") from e
        return count
