"""Plain-text line splitting and keyword match extraction."""

from __future__ import annotations

import re
from typing import List

from core.limits import MAX_MATCHES_PER_FILE
from core.models import SearchMatch

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> List[str]:
    """Split on any line-ending convention.

    A trailing terminator does not produce an extra empty line, so the
    result matches line-by-line iteration over the same file on disk.
    """
    if not text:
        return []
    lines = _LINE_BREAK_RE.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def extract_matches(content: str, query: str, context_rows: int = 1) -> List[SearchMatch]:
    """Case-insensitive line matches with `context_rows` lines around each hit.

    At most MAX_MATCHES_PER_FILE matches are returned, in line order.
    """
    lines = split_lines(content)
    needle = query.lower()
    matches: List[SearchMatch] = []

    for index, line in enumerate(lines):
        if needle not in line.lower():
            continue
        start = max(0, index - context_rows)
        end = min(len(lines), index + context_rows + 1)
        matches.append(SearchMatch(line=index + 1, content="\n".join(lines[start:end])))
        if len(matches) >= MAX_MATCHES_PER_FILE:
            break

    return matches
