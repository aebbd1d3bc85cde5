"""
FastAPI application serving both the MCP endpoint and the task status API.

Routes:
- /mcp: MCP streamable-HTTP transport (tools for the assistant host)
- /api/task/{task_id}: task status polled by the live-view widget
- /api/health: service health
"""

import contextlib
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from mcp.server.fastmcp import FastMCP

from .. import __version__
from ..config import SERVER_DESCRIPTION, SERVER_TITLE
from ..errors import BrowserUseAPIError
from .endpoints import api_router

logger = structlog.get_logger()


def create_app(mcp_server: Optional[FastMCP] = None) -> FastAPI:
    """
    Build the HTTP application.

    Args:
        mcp_server: FastMCP instance to mount. None serves the status API only
            (used by tests and deployments that run MCP over stdio).
    """
    mcp_app = mcp_server.streamable_http_app() if mcp_server is not None else None

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        if mcp_server is None:
            yield
            return
        async with mcp_server.session_manager.run():
            logger.info("MCP session manager started")
            yield

    app = FastAPI(
        title=SERVER_TITLE,
        description=SERVER_DESCRIPTION,
        version=__version__,
        lifespan=lifespan,
    )

    # Errors raised while resolving dependencies (e.g. an unparseable env
    # setting) never reach the endpoint's own try/except
    @app.exception_handler(BrowserUseAPIError)
    async def browser_use_error_handler(
        request: Request, exc: BrowserUseAPIError
    ) -> JSONResponse:
        logger.error(
            "Request failed",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=exc.message,
        )
        return JSONResponse(status_code=500, content={"error": exc.message})

    app.include_router(api_router, prefix="/api")

    # Mounted last so /api routes match first
    if mcp_app is not None:
        app.mount("/", mcp_app)

    return app
