"""Normalize raw Browser Use task status into a TaskSnapshot"""

from typing import Any, Mapping

from .errors import MalformedResponseError
from .models import TaskOutcome, TaskSnapshot


def _coerce_steps(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


def normalize_status(raw: Mapping[str, Any]) -> TaskSnapshot:
    """
    Convert a provider status payload into a TaskSnapshot.

    The provider reports completion through ``is_success``:
    missing or None means the task is still running, a boolean means it
    finished with that outcome. Nothing else decides whether a task is done.

    Args:
        raw: Decoded status payload, e.g.
            {"is_success": True, "task_output": "...", "total_steps": 7}

    Returns:
        TaskSnapshot (pure function; same input always gives the same output)

    Raises:
        MalformedResponseError: If is_success is neither None nor a boolean
    """
    indicator = raw.get("is_success")
    if indicator is None:
        outcome = TaskOutcome.PENDING
    elif not isinstance(indicator, bool):
        raise MalformedResponseError(
            f"Invalid is_success value in status response: {indicator!r}",
            details=dict(raw),
        )
    elif indicator:
        outcome = TaskOutcome.SUCCEEDED
    else:
        outcome = TaskOutcome.FAILED

    output = raw.get("task_output")
    if output is not None and not isinstance(output, str):
        output = str(output)

    error = raw.get("error")
    if error is not None and not isinstance(error, str):
        error = str(error)

    return TaskSnapshot(
        outcome=outcome,
        output=output,
        total_steps=_coerce_steps(raw.get("total_steps", 0)),
        error_message=error or None,
    )
