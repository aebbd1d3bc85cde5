"""Browser task API client"""

from typing import Any

from ..errors import MalformedResponseError
from ..models import TaskHandle
from .base import BaseAPIClient

START_TOOL = "browser_task"
STATUS_TOOL = "monitor_task"


class TaskAPIClient(BaseAPIClient):
    """API client for starting and monitoring browser tasks"""

    async def start_task(self, task: str, model: str, max_steps: int) -> TaskHandle:
        """Start a browser task (returns immediately with the live session)"""
        result = await self._call_tool(
            START_TOOL,
            {"task": task, "model": model, "max_steps": max_steps},
        )

        # Without a live URL the task cannot be watched, so treat it as malformed
        for field in ("task_id", "session_id", "live_url"):
            if not result.get(field):
                raise MalformedResponseError(
                    f"Start response missing '{field}' field", details=result
                )

        return TaskHandle(
            task_id=str(result["task_id"]),
            session_id=str(result["session_id"]),
            live_url=str(result["live_url"]),
            task=task,
            model=model,
        )

    async def get_task_status(self, task_id: str) -> dict[str, Any]:
        """Get raw task status (is_success, task_output, total_steps)"""
        return await self._call_tool(STATUS_TOOL, {"task_id": task_id})
