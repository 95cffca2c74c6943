"""MCP tool that lists a directory of the unified namespace.

Registers the 'list_directory' tool. Mounted repositories appear as
virtual directories (e.g. 'github') so they can be browsed into.
"""

from __future__ import annotations

from typing import Any, Dict, List

from mcp.server.fastmcp import FastMCP

from core.interfaces import ContentProvider


def register(mcp: FastMCP, *, provider: ContentProvider) -> None:
    @mcp.tool(name="list_directory")
    async def list_directory(path: str = "") -> List[Dict[str, Any]]:
        """List files and directories at a path.

        Params:
          - path: directory relative to the namespace root (default: root).

        Returns:
          List of {name, type, path} objects; type is "file" or "directory".

        Raises:
          AccessDeniedError if the path escapes the configured roots.
        """
        entries = await provider.list(path or "")
        return [e.to_dict() for e in entries]
