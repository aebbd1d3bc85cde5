"""Task lifecycle coordination.

Starts browser tasks and tracks them to completion. Two paths read task state:
run_task() polls until the provider resolves the task, and check_task() makes a
single status query. Neither keeps state between calls; Browser Use Cloud is
the only source of truth, so both can run concurrently for the same task.
"""

import asyncio
import time
from typing import Callable, Optional
from urllib.parse import quote

import structlog

from ..clients import TaskAPIClient, get_task_client
from ..config import (
    API_KEY_ENV_VAR,
    DEFAULT_MAX_STEPS,
    DEFAULT_MODEL,
    BrowserLiveConfig,
)
from ..errors import MissingCredentialError, TaskTimeoutError
from ..models import TaskHandle, TaskLaunch, TaskRunResult, TaskSnapshot
from ..normalizer import normalize_status

logger = structlog.get_logger()

SUCCESS_NO_OUTPUT_MESSAGE = (
    "Task completed successfully, but Browser Use did not return a final text output."
)
FAILURE_NO_OUTPUT_MESSAGE = "Task failed before a final output was returned."


def compose_summary(snapshot: TaskSnapshot) -> Optional[str]:
    """
    Build the human-readable result of a finished task.

    Returns None while the task is still pending. Otherwise the task output
    wins; without it a fixed fallback is used so the result is never empty.
    """
    if not snapshot.done:
        return None

    output = (snapshot.output or "").strip()
    if output:
        return snapshot.output
    if snapshot.is_success:
        return SUCCESS_NO_OUTPUT_MESSAGE
    return snapshot.error_message or FAILURE_NO_OUTPUT_MESSAGE


def task_status_url(public_url: str, task_id: str) -> str:
    """URL the live-view widget polls for this task"""
    return f"{public_url.rstrip('/')}/api/task/{quote(task_id, safe='')}"


def format_launch_message(handle: TaskHandle) -> str:
    return (
        f"Browser task started!\nTask ID: {handle.task_id}\nLive view: {handle.live_url}"
    )


class TaskCoordinator:
    """Start, poll and check Browser Use Cloud tasks"""

    def __init__(
        self,
        config: Optional[BrowserLiveConfig] = None,
        client_factory: Optional[Callable[[], TaskAPIClient]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or BrowserLiveConfig.from_env()
        self._client_factory = client_factory or (lambda: get_task_client(self.config))
        self._clock = clock

    def _require_credential(self) -> None:
        if not self.config.has_api_key:
            logger.warning("Browser Use API key missing", env_var=API_KEY_ENV_VAR)
            raise MissingCredentialError(API_KEY_ENV_VAR)

    def _launch(self, handle: TaskHandle) -> TaskLaunch:
        return TaskLaunch(
            handle=handle,
            status_url=task_status_url(self.config.public_url, handle.task_id),
            message=format_launch_message(handle),
        )

    async def start_task(
        self,
        task: str,
        model: str = DEFAULT_MODEL,
        max_steps: int = DEFAULT_MAX_STEPS,
    ) -> TaskLaunch:
        """Start a task and return immediately with its live session"""
        self._require_credential()

        async with self._client_factory() as client:
            handle = await client.start_task(task, model, max_steps)

        logger.info(
            "Browser task started",
            task_id=handle.task_id,
            session_id=handle.session_id,
            model=model,
            max_steps=max_steps,
        )
        return self._launch(handle)

    async def check_task(self, task_id: str) -> TaskSnapshot:
        """Query task status once"""
        self._require_credential()

        async with self._client_factory() as client:
            raw = await client.get_task_status(task_id)

        snapshot = normalize_status(raw)
        logger.debug(
            "Task status checked",
            task_id=task_id,
            outcome=snapshot.outcome.value,
            total_steps=snapshot.total_steps,
        )
        return snapshot

    async def run_task(
        self,
        task: str,
        model: str = DEFAULT_MODEL,
        max_steps: int = DEFAULT_MAX_STEPS,
        poll_interval: Optional[float] = None,
        max_wait: Optional[float] = None,
        max_polls: Optional[int] = None,
    ) -> TaskRunResult:
        """
        Start a task and poll until the provider reports an outcome.

        Args:
            task: Natural-language instruction for the browser
            model: Backend model (one of SUPPORTED_MODELS)
            max_steps: Step budget for the provider (1-100)
            poll_interval: Seconds between polls (default: config.poll_interval)
            max_wait: Optional wall-clock bound in seconds (default: config)
            max_polls: Optional bound on status queries (default: config)

        Returns:
            TaskRunResult with the final snapshot and composed summary

        Raises:
            MissingCredentialError: API key not configured (no request is made)
            TaskTimeoutError: A configured bound was exceeded
            BrowserUseAPIError: Any provider or transport failure, unretried

        Notes:
            - Returns on the first poll that reports an outcome, without sleeping
            - Cancelling the awaiting task stops polling at the next suspension
        """
        self._require_credential()

        interval = self.config.poll_interval if poll_interval is None else poll_interval
        max_wait = self.config.max_wait_seconds if max_wait is None else max_wait
        max_polls = self.config.max_polls if max_polls is None else max_polls

        async with self._client_factory() as client:
            handle = await client.start_task(task, model, max_steps)
            logger.info(
                "Browser task started, waiting for completion",
                task_id=handle.task_id,
                poll_interval=interval,
            )
            snapshot, polls = await self._poll_until_resolved(
                client, handle.task_id, interval, max_wait, max_polls
            )

        summary = compose_summary(snapshot)
        logger.info(
            "Browser task finished",
            task_id=handle.task_id,
            is_success=snapshot.is_success,
            total_steps=snapshot.total_steps,
            polls=polls,
        )
        return TaskRunResult(
            launch=self._launch(handle),
            snapshot=snapshot,
            summary=summary or "",
            polls=polls,
            metadata={"task": handle.task, "model": handle.model},
        )

    async def _poll_until_resolved(
        self,
        client: TaskAPIClient,
        task_id: str,
        interval: float,
        max_wait: Optional[float],
        max_polls: Optional[int],
    ) -> tuple[TaskSnapshot, int]:
        started = self._clock()
        polls = 0

        while True:
            raw = await client.get_task_status(task_id)
            polls += 1
            snapshot = normalize_status(raw)

            if snapshot.done:
                return snapshot, polls

            logger.debug(
                "Task still running",
                task_id=task_id,
                poll=polls,
                total_steps=snapshot.total_steps,
            )

            elapsed = self._clock() - started
            if max_polls is not None and polls >= max_polls:
                raise TaskTimeoutError(task_id, polls, elapsed)
            if max_wait is not None and elapsed + interval > max_wait:
                raise TaskTimeoutError(task_id, polls, elapsed)

            await asyncio.sleep(interval)
