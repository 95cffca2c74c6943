"""Validation of pagination options and response sizes.

Shared by the local and GitHub providers so both apply the same rules
before touching disk or network.
"""

from __future__ import annotations

from typing import Optional, Tuple

from core.errors import InvalidArgumentError, SizeExceededError
from core.limits import (
    DEFAULT_MAX_LINES,
    MAX_MCP_RESPONSE_SIZE,
    MAX_REQUESTED_LINES,
    MIN_RESPONSE_SIZE,
)
from core.models import ReadOptions


def validate_read_options(options: Optional[ReadOptions]) -> None:
    if options is None:
        return

    start, end, max_lines = options.start_line, options.end_line, options.max_lines

    if start is not None and start < 1:
        raise InvalidArgumentError("start_line must be >= 1")
    if end is not None and end < 1:
        raise InvalidArgumentError("end_line must be >= 1")
    if max_lines is not None and max_lines < 1:
        raise InvalidArgumentError("max_lines must be >= 1")
    if end is not None and max_lines is not None:
        raise InvalidArgumentError("Cannot specify both end_line and max_lines")
    if start is not None and end is not None and end < start:
        raise InvalidArgumentError("end_line must be >= start_line")

    requested: Optional[int] = max_lines
    if requested is None and end is not None:
        requested = end - (start if start is not None else 1) + 1
    if requested is not None and requested > MAX_REQUESTED_LINES:
        raise InvalidArgumentError(
            f"Cannot request more than {MAX_REQUESTED_LINES} lines in a single read"
        )

    if options.max_response_size is not None and options.max_response_size < MIN_RESPONSE_SIZE:
        raise InvalidArgumentError(f"max_response_size must be at least {MIN_RESPONSE_SIZE} bytes")


def validate_response_size(content: str, max_size: int = MAX_MCP_RESPONSE_SIZE) -> None:
    size = len(content.encode("utf-8"))
    if size > max_size:
        raise SizeExceededError(
            f"Response size ({size / 1024 / 1024:.2f}MB) exceeds MCP transport limit "
            f"of {max_size / 1024 / 1024:.2f}MB; request fewer lines"
        )


def resolve_line_range(options: Optional[ReadOptions]) -> Tuple[int, int]:
    """Compute the (start_line, end_line) a read covers, both 1-based inclusive."""
    opts = options or ReadOptions()
    start = opts.start_line if opts.start_line is not None else 1
    if opts.end_line is not None:
        return start, opts.end_line

    max_lines = opts.max_lines if opts.max_lines is not None else DEFAULT_MAX_LINES
    return start, start + max_lines - 1
