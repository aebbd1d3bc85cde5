"""API clients for Browser Use Cloud"""

from typing import Optional

from ..config import BrowserLiveConfig
from .base import BaseAPIClient
from .task_client import TaskAPIClient


def get_task_client(config: Optional[BrowserLiveConfig] = None) -> TaskAPIClient:
    """Build a task client from config (a fresh one per call; clients hold no state)"""
    config = config or BrowserLiveConfig.from_env()
    return TaskAPIClient(config.api_url, config.api_key, config.api_timeout)


__all__ = [
    "BaseAPIClient",
    "TaskAPIClient",
    "get_task_client",
]
