"""Server bootstrap for the Synapse MCP service.

Creates the FastMCP instance, builds the aggregated content provider
from configuration, registers the tools and starts the MCP server
(stdio transport). Logs go to stderr since stdout carries the protocol.
"""

import logging
import sys
from typing import Optional, Sequence

from mcp.server.fastmcp import FastMCP

from config import AppConfig, load_config
from core.errors import InvalidArgumentError
from providers.factory import build_provider

from tools.get_file_info import register as register_get_file_info
from tools.list_directory import register as register_list_directory
from tools.list_mounted_resources import register as register_list_mounted_resources
from tools.read_note import register as register_read_note
from tools.search_notes import register as register_search_notes

logger = logging.getLogger(__name__)

mcp = FastMCP("synapse-mcp")


def register_tools(config: AppConfig) -> None:
    provider = build_provider(config)

    register_list_directory(mcp, provider=provider)
    register_search_notes(mcp, provider=provider)
    register_read_note(mcp, provider=provider)
    register_get_file_info(mcp, provider=provider)
    register_list_mounted_resources(mcp, config=config)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    config = load_config(sys.argv[1:] if argv is None else argv)
    configure_logging(config.log_level)

    try:
        register_tools(config)
    except InvalidArgumentError as e:
        logger.error("Invalid configuration: %s", e)
        raise SystemExit(1) from e

    logger.info("Synapse MCP serving roots: %s", ", ".join(config.notes_roots))
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
