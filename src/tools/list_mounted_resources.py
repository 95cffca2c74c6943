"""MCP tool listing the configured local roots and GitHub mounts."""

from __future__ import annotations

from typing import List

from mcp.server.fastmcp import FastMCP

from config import AppConfig
from providers.factory import mounted_resources


def register(mcp: FastMCP, *, config: AppConfig) -> None:
    @mcp.tool(name="list_mounted_resources")
    async def list_mounted_resources() -> List[str]:
        """List mounted local directories and GitHub repositories/paths.

        Local roots are returned as absolute paths, repositories as their
        mount prefix (e.g. "github/owner/repo/docs").
        """
        return mounted_resources(config)
