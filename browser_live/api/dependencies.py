"""FastAPI dependency providers"""

from ..config import BrowserLiveConfig
from ..services import TaskCoordinator


def get_config() -> BrowserLiveConfig:
    return BrowserLiveConfig.from_env()


def get_task_coordinator() -> TaskCoordinator:
    """A coordinator per request; it holds no state worth sharing"""
    return TaskCoordinator(get_config())
