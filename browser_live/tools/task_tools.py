"""
MCP tools for browser tasks.

Provides MCP tool wrappers for the task lifecycle:
- run_browser_task: Start a task and return the live-view widget immediately
- run_browser_task_and_wait: Start a task and block until it finishes
- check_task_result: Query a task's current result once

The tool bodies delegate to TaskCoordinator and convert every failure into a
``{"success": False, "error": ...}`` result so one bad call never takes the
server down.
"""

from typing import Annotated, Any, Callable, Literal

import structlog
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from ..config import (
    DEFAULT_MAX_STEPS,
    DEFAULT_MODEL,
    MAX_MAX_STEPS,
    MIN_MAX_STEPS,
    SUPPORTED_MODELS,
)
from ..errors import BrowserUseAPIError, ConfigurationError, MissingCredentialError
from ..models import TaskLaunch
from ..services import TaskCoordinator
from ..telemetry import trace_mcp_tool

logger = structlog.get_logger()

WIDGET_NAME = "browser-live-view"
WIDGET_INVOKING = "Starting cloud browser..."
WIDGET_INVOKED = "Browser session ready"

ModelName = Literal[
    "browser-use-2.0",
    "gpt-4.1",
    "gpt-4.1-mini",
    "o4-mini",
    "gemini-2.5-flash",
    "claude-sonnet-4-6",
]


def _failure(message: str, error: Exception) -> dict[str, Any]:
    error_type = type(error).__name__.removesuffix("Error") or "Error"
    if isinstance(error, MissingCredentialError):
        # Reported as-is, without the operation prefix
        return {"success": False, "error": error.message, "error_type": error_type}
    detail = error.message if isinstance(error, BrowserUseAPIError) else str(error)
    return {"success": False, "error": f"{message}: {detail}", "error_type": error_type}


def _validate_task_args(task: str, model: str, max_steps: int) -> str | None:
    if not task or not task.strip():
        return "Task description must not be empty"
    if model not in SUPPORTED_MODELS:
        return f"Unsupported model '{model}'. Choose one of: {', '.join(SUPPORTED_MODELS)}"
    if not MIN_MAX_STEPS <= max_steps <= MAX_MAX_STEPS:
        return f"max_steps must be between {MIN_MAX_STEPS} and {MAX_MAX_STEPS}"
    return None


def _build_coordinator(
    factory: Callable[[], TaskCoordinator],
) -> tuple[TaskCoordinator | None, dict[str, Any] | None]:
    try:
        return factory(), None
    except ConfigurationError as e:
        logger.error("Invalid server configuration", error=e.message)
        return None, _failure("Invalid server configuration", e)


def _widget_payload(launch: TaskLaunch) -> dict[str, Any]:
    return {
        "name": WIDGET_NAME,
        "props": launch.widget_props(),
        "invoking": WIDGET_INVOKING,
        "invoked": WIDGET_INVOKED,
    }


async def start_browser_task(
    coordinator: TaskCoordinator,
    task: str,
    model: str = DEFAULT_MODEL,
    max_steps: int = DEFAULT_MAX_STEPS,
) -> dict[str, Any]:
    """Start a task without waiting; the widget polls for the result itself"""
    invalid = _validate_task_args(task, model, max_steps)
    if invalid:
        return {"success": False, "error": invalid, "error_type": "Validation"}

    try:
        launch = await coordinator.start_task(task, model, max_steps)
    except Exception as e:
        logger.error("Failed to start browser task", error=str(e))
        return _failure("Failed to start browser task", e)

    return {
        "success": True,
        "message": launch.message,
        "widget": _widget_payload(launch),
    }


async def run_browser_task_to_completion(
    coordinator: TaskCoordinator,
    task: str,
    model: str = DEFAULT_MODEL,
    max_steps: int = DEFAULT_MAX_STEPS,
) -> dict[str, Any]:
    """Start a task and poll until it resolves"""
    invalid = _validate_task_args(task, model, max_steps)
    if invalid:
        return {"success": False, "error": invalid, "error_type": "Validation"}

    try:
        result = await coordinator.run_task(task, model, max_steps)
    except Exception as e:
        logger.error("Browser task run failed", error=str(e))
        return _failure("Browser task failed", e)

    return {
        "success": True,
        "message": result.summary,
        "widget": _widget_payload(result.launch),
        "result": result.snapshot.to_dict(),
        "task": result.metadata.get("task"),
        "model": result.metadata.get("model"),
    }


async def check_browser_task(
    coordinator: TaskCoordinator, task_id: str
) -> dict[str, Any]:
    """Query a task once and return its normalized snapshot"""
    if not task_id or not task_id.strip():
        return {
            "success": False,
            "error": "task_id must not be empty",
            "error_type": "Validation",
        }

    try:
        snapshot = await coordinator.check_task(task_id)
    except Exception as e:
        logger.error("Failed to check task result", task_id=task_id, error=str(e))
        return _failure("Failed to check task result", e)

    return {"success": True, "taskId": task_id, **snapshot.to_dict()}


def register_task_tools(
    mcp: FastMCP,
    coordinator_factory: Callable[[], TaskCoordinator] = TaskCoordinator,
) -> None:
    """Register browser task tools with the MCP server.

    Args:
        mcp: The FastMCP server instance to register tools with.
        coordinator_factory: Builds the coordinator per call so configuration
            changes (e.g. a newly set API key) are picked up.
    """

    @mcp.tool()
    @trace_mcp_tool("run_browser_task")
    async def run_browser_task(
        task: Annotated[
            str,
            Field(
                description="What you want the browser to do, e.g. "
                "'Go to google.com and search for AI news'"
            ),
        ],
        model: Annotated[ModelName, Field(description="LLM model to use")] = DEFAULT_MODEL,
        max_steps: Annotated[
            int,
            Field(ge=MIN_MAX_STEPS, le=MAX_MAX_STEPS, description="Max browser steps"),
        ] = DEFAULT_MAX_STEPS,
    ) -> dict[str, Any]:
        """
        Run a browser automation task in the cloud and watch it live.

        Opens a live browser session you can watch in real-time. Returns
        immediately; the live-view widget polls the task status on its own.

        Returns:
            Dict with structure:
            {
                "success": bool,
                "message": str,      # "Browser task started!\\nTask ID: ...\\nLive view: ..."
                "widget": {
                    "name": "browser-live-view",
                    "props": {
                        "taskId": str,
                        "sessionId": str,
                        "liveUrl": str,
                        "taskStatusApiUrl": str,
                        "task": str,
                        "model": str
                    }
                },
                "error": str         # Only when success is False
            }

        See Also:
            - check_task_result(): Get the outcome later
            - run_browser_task_and_wait(): Block until the task finishes
        """
        coordinator, failure = _build_coordinator(coordinator_factory)
        if failure:
            return failure
        return await start_browser_task(coordinator, task, model, max_steps)

    @mcp.tool()
    @trace_mcp_tool("run_browser_task_and_wait")
    async def run_browser_task_and_wait(
        task: Annotated[str, Field(description="What you want the browser to do")],
        model: Annotated[ModelName, Field(description="LLM model to use")] = DEFAULT_MODEL,
        max_steps: Annotated[
            int,
            Field(ge=MIN_MAX_STEPS, le=MAX_MAX_STEPS, description="Max browser steps"),
        ] = DEFAULT_MAX_STEPS,
    ) -> dict[str, Any]:
        """
        Run a browser task and wait for its final result.

        Polls Browser Use Cloud every few seconds until the task succeeds or
        fails, then returns the final output alongside the live-view widget.

        Notes:
            - Can take minutes for long tasks
            - Prefer run_browser_task() when the user wants to watch live
        """
        coordinator, failure = _build_coordinator(coordinator_factory)
        if failure:
            return failure
        return await run_browser_task_to_completion(
            coordinator, task, model, max_steps
        )

    @mcp.tool()
    @trace_mcp_tool("check_task_result")
    async def check_task_result(
        task_id: Annotated[str, Field(description="Task ID returned by run_browser_task")],
    ) -> dict[str, Any]:
        """
        Check the result of a browser task.

        Returns:
            Dict with structure:
            {
                "success": bool,
                "done": bool,             # True once the task finished
                "isSuccess": bool | None, # None while running
                "taskOutput": str | None,
                "totalSteps": int
            }
        """
        coordinator, failure = _build_coordinator(coordinator_factory)
        if failure:
            return failure
        return await check_browser_task(coordinator, task_id)
