"""Command-line entry point for Browser Use Live"""

import asyncio
import json
import sys

import click
import structlog

from . import __version__
from .config import (
    DEFAULT_MAX_STEPS,
    DEFAULT_MODEL,
    MAX_MAX_STEPS,
    MIN_MAX_STEPS,
    SERVER_NAME,
    SUPPORTED_MODELS,
    BrowserLiveConfig,
    setup_logging,
)
from .errors import BrowserUseAPIError, ConfigurationError
from .services import TaskCoordinator

logger = structlog.get_logger()


def _setup_tracing(config: BrowserLiveConfig) -> None:
    # Tracing is optional; the server runs without a collector
    try:
        from .telemetry import setup_monitoring

        setup_monitoring(SERVER_NAME, config.otlp_endpoint)
        logger.info("OpenTelemetry instrumentation enabled")
    except Exception as e:
        logger.debug("OTEL instrumentation not available", error=str(e))


@click.group()
@click.version_option(__version__, prog_name=SERVER_NAME)
def cli() -> None:
    """Browser Use Live - run cloud browser tasks and watch them live."""
    setup_logging()


@cli.command()
@click.option(
    "--transport",
    type=click.Choice(["http", "stdio"]),
    default="http",
    show_default=True,
    help="http serves MCP and the status API together; stdio serves MCP only",
)
@click.option("--host", default=None, help="Bind host (default: $HOST or 0.0.0.0)")
@click.option("--port", type=int, default=None, help="Bind port (default: $PORT or 3000)")
def serve(transport: str, host: str | None, port: int | None) -> None:
    """Start the server."""
    try:
        config = BrowserLiveConfig.from_env()
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)
    _setup_tracing(config)

    if not config.has_api_key:
        logger.warning("BROWSER_USE_API_KEY is not set; task tools will fail")

    from .server import BrowserLiveMCPServer, mcp

    try:
        if transport == "stdio":
            BrowserLiveMCPServer().run("stdio")
            return

        import uvicorn

        from .api.app import create_app

        app = create_app(mcp)
        logger.info(
            "Serving MCP and status API",
            host=host or config.host,
            port=port or config.port,
            public_url=config.public_url,
        )
        uvicorn.run(app, host=host or config.host, port=port or config.port)
    except KeyboardInterrupt:
        logger.info("Browser Use Live server stopped")
        sys.exit(0)
    except Exception as e:
        logger.error("Fatal error running server", error=str(e), exc_info=True)
        sys.exit(1)


@cli.command()
@click.argument("task")
@click.option(
    "--model",
    type=click.Choice(SUPPORTED_MODELS),
    default=DEFAULT_MODEL,
    show_default=True,
)
@click.option(
    "--max-steps",
    type=click.IntRange(MIN_MAX_STEPS, MAX_MAX_STEPS),
    default=DEFAULT_MAX_STEPS,
    show_default=True,
)
@click.option("--wait/--no-wait", default=True, help="Poll until the task finishes")
def run(task: str, model: str, max_steps: int, wait: bool) -> None:
    """Run a browser TASK from the command line."""
    try:
        coordinator = TaskCoordinator()
        if wait:
            result = asyncio.run(coordinator.run_task(task, model, max_steps))
            click.echo(f"Live view: {result.handle.live_url}")
            click.echo(json.dumps(result.snapshot.to_dict(), indent=2))
            click.echo(result.summary)
            sys.exit(0 if result.snapshot.is_success else 1)
        launch = asyncio.run(coordinator.start_task(task, model, max_steps))
        click.echo(launch.message)
    except BrowserUseAPIError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("task_id")
def status(task_id: str) -> None:
    """Show the current status of TASK_ID."""
    try:
        snapshot = asyncio.run(TaskCoordinator().check_task(task_id))
    except BrowserUseAPIError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)
    click.echo(json.dumps(snapshot.to_dict(), indent=2))


def main():
    """Main entry point"""
    cli()


if __name__ == "__main__":
    main()
