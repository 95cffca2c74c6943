"""MCP tool returning file metadata without reading its content."""

from __future__ import annotations

from typing import Any, Dict

from mcp.server.fastmcp import FastMCP

from core.errors import InvalidArgumentError
from core.interfaces import ContentProvider


def register(mcp: FastMCP, *, provider: ContentProvider) -> None:
    @mcp.tool(name="get_file_info")
    async def get_file_info(path: str) -> Dict[str, Any]:
        """Get size, line count (files under 1MB), type and last modification time.

        Use this to size a file before reading it.
        """
        if not path or not path.strip():
            raise InvalidArgumentError("Missing file path")

        info = await provider.get_file_info(path)
        return info.to_dict()
