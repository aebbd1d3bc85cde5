"""Error types for Browser Use Live.

Every failure that can happen while starting or tracking a task is a
BrowserUseAPIError. None of them are retried; callers surface the message.
"""

from typing import Any, Optional


class BrowserUseAPIError(Exception):
    """Base exception for Browser Use Cloud errors"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class MissingCredentialError(BrowserUseAPIError):
    """The API key is not configured. Raised before any network call."""

    def __init__(self, env_var: str = "BROWSER_USE_API_KEY"):
        self.env_var = env_var
        super().__init__(f"{env_var} environment variable is not set")


class ProviderError(BrowserUseAPIError):
    """The provider answered with an explicit error payload."""


class TransportError(BrowserUseAPIError):
    """Non-2xx response or network failure."""


class MalformedResponseError(BrowserUseAPIError):
    """The provider's success envelope had no usable content."""


class TaskTimeoutError(BrowserUseAPIError):
    """Run-to-completion exceeded its configured wait bound."""

    def __init__(self, task_id: str, polls: int, elapsed: float):
        self.task_id = task_id
        self.polls = polls
        self.elapsed = elapsed
        super().__init__(
            f"Task {task_id} did not finish after {polls} polls ({elapsed:.1f}s)",
            details={"task_id": task_id, "polls": polls, "elapsed": elapsed},
        )


class ConfigurationError(BrowserUseAPIError):
    """An environment setting could not be parsed."""

    def __init__(self, name: str, value: str):
        self.name = name
        self.value = value
        super().__init__(
            f"Invalid value for {name}: {value!r}",
            details={"name": name, "value": value},
        )
