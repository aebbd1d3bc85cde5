"""Browser Use Live MCP server"""

import structlog
from mcp.server.fastmcp import FastMCP

from . import __version__
from .config import SERVER_DESCRIPTION, SERVER_NAME
from .tools import register_task_tools

logger = structlog.get_logger()

# Create the MCP server instance
mcp = FastMCP(SERVER_NAME, instructions=SERVER_DESCRIPTION)

# Register Browser Task Tools
register_task_tools(mcp)


class BrowserLiveMCPServer:
    """MCP Server exposing Browser Use Cloud tasks"""

    def __init__(self):
        logger.info("Browser Use Live MCP server initialized", version=__version__)

    def run(self, transport: str = "stdio"):
        """Run the MCP server over stdio (HTTP serving goes through api.app)"""
        logger.info("Starting Browser Use Live MCP server", transport=transport)
        mcp.run(transport=transport)
