"""MCP tool that searches note files across every source."""

from __future__ import annotations

from typing import Any, Dict, List

from mcp.server.fastmcp import FastMCP

from core.errors import InvalidArgumentError
from core.interfaces import ContentProvider


def register(mcp: FastMCP, *, provider: ContentProvider) -> None:
    @mcp.tool(name="search_notes")
    async def search_notes(query: str) -> List[Dict[str, Any]]:
        """Search for a keyword or phrase across all markdown files.

        Matching is case-insensitive. Each result lists up to 5 matches
        with one line of context; line is -1 when a GitHub match could
        not be located in the file.
        """
        if not query or not query.strip():
            raise InvalidArgumentError("Missing search query")

        results = await provider.search(query.strip())
        return [r.to_dict() for r in results]
