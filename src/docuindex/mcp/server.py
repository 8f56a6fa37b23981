"""docuindex MCP server entrypoint using FastMCP.

Exposes index operations against the configured search service.
Run with:
  - docuindex-mcp
  - or: python -m docuindex.mcp.server
"""
from __future__ import annotations

import logging
from typing import Optional

from fastmcp import FastMCP

from docuindex.client import SearchClient
from docuindex.config import Settings, load_settings
from docuindex.mcp.tools import register_index_tools

logger = logging.getLogger(__name__)


class AppState:
    """Application state shared by MCP tools."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.client: Optional[SearchClient] = None

    def init_client(self) -> None:
        """Initialize the search client from configuration, if configured."""
        cfg = self.settings.service
        if cfg.base_url and cfg.app_id and cfg.api_key:
            self.client = SearchClient.from_settings(self.settings)
        else:
            logger.warning("Search service is not configured; index tools will fail")
            self.client = None


# Global state and server instance
_state: Optional[AppState] = None
mcp = FastMCP("docuindex MCP Server")


@mcp.tool
def health() -> str:
    """Simple health check tool."""
    return "ok"


def main() -> None:
    """Initialize state and run the MCP server."""
    global _state
    settings = load_settings()
    logging.basicConfig(level=settings.app.log_level.upper())
    _state = AppState(settings)
    _state.init_client()
    register_index_tools(mcp, get_state=lambda: _state)
    # Choose transport based on configuration: stdio (default), http, or sse
    transport = settings.app.transport
    if transport in ("http", "sse"):
        mcp.run(transport=transport, host=settings.app.host, port=settings.app.port)
    else:
        mcp.run()


if __name__ == "__main__":  # pragma: no cover
    main()
