"""Business logic behind the MCP tools and HTTP endpoints"""

from .task_coordinator import (
    FAILURE_NO_OUTPUT_MESSAGE,
    SUCCESS_NO_OUTPUT_MESSAGE,
    TaskCoordinator,
    compose_summary,
)

__all__ = [
    "FAILURE_NO_OUTPUT_MESSAGE",
    "SUCCESS_NO_OUTPUT_MESSAGE",
    "TaskCoordinator",
    "compose_summary",
]
