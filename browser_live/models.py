"""Domain models for browser tasks.

TaskHandle is created once per started task and never changes. TaskSnapshot
is recomputed on every status query and never cached.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class TaskOutcome(str, Enum):
    """Tri-state completion of a task as reported by the provider."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class TaskHandle:
    """Identifies one task started on Browser Use Cloud."""

    task_id: str
    session_id: str
    live_url: str
    task: str
    model: str


@dataclass(frozen=True)
class TaskSnapshot:
    """Point-in-time view of a task's progress.

    done and is_success are derived from outcome, so a resolved task can never
    report is_success=None and a pending one can never report done=True.
    """

    outcome: TaskOutcome
    output: Optional[str] = None
    total_steps: int = 0
    error_message: Optional[str] = None

    @property
    def done(self) -> bool:
        return self.outcome is not TaskOutcome.PENDING

    @property
    def is_success(self) -> Optional[bool]:
        if self.outcome is TaskOutcome.PENDING:
            return None
        return self.outcome is TaskOutcome.SUCCEEDED

    def to_dict(self) -> dict[str, Any]:
        """Wire shape shared by the status endpoint and the check tool."""
        data: dict[str, Any] = {
            "done": self.done,
            "isSuccess": self.is_success,
            "taskOutput": self.output,
            "totalSteps": self.total_steps,
        }
        if self.error_message:
            data["error"] = self.error_message
        return data


@dataclass
class TaskLaunch:
    """Result of a fire-and-forget start: the handle plus widget payload."""

    handle: TaskHandle
    status_url: str
    message: str

    def widget_props(self) -> dict[str, Any]:
        return {
            "taskId": self.handle.task_id,
            "sessionId": self.handle.session_id,
            "liveUrl": self.handle.live_url,
            "taskStatusApiUrl": self.status_url,
            "task": self.handle.task,
            "model": self.handle.model,
        }


@dataclass
class TaskRunResult:
    """Result of run-to-completion."""

    launch: TaskLaunch
    snapshot: TaskSnapshot
    summary: str
    polls: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def handle(self) -> TaskHandle:
        return self.launch.handle
