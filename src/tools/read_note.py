"""MCP tool that reads a bounded line range of a file.

Registers the 'read_note' tool. Reads are always paginated: without a
range the first 100 lines are returned.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from core.errors import InvalidArgumentError
from core.interfaces import ContentProvider
from core.models import ReadOptions


def register(mcp: FastMCP, *, provider: ContentProvider) -> None:
    @mcp.tool(name="read_note")
    async def read_note(
        path: str,
        start_line: Optional[int] = None,
        end_line: Optional[int] = None,
        max_lines: Optional[int] = None,
        max_response_size: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Read part of a file and return {content, metadata}.

        Params:
          - path: file path relative to the namespace root (required).
          - start_line: first line, 1-based (default: 1).
          - end_line: last line, inclusive. Mutually exclusive with max_lines.
          - max_lines: number of lines to read (default: 100, max: 300).
          - max_response_size: byte ceiling for the returned content
            (default: 4MB, min: 1KB).

        GitHub files are limited to 100MB and cached for 3 minutes.

        Raises:
          InvalidArgumentError for bad ranges; SizeExceededError when the
          requested lines are larger than max_response_size.
        """
        if not path or not path.strip():
            raise InvalidArgumentError("Missing file path")

        options = ReadOptions(
            start_line=start_line,
            end_line=end_line,
            max_lines=max_lines,
            max_response_size=max_response_size,
        )
        result = await provider.read(path, options)
        return result.to_dict()
