"""Shared fixtures for Browser Use Live unit tests"""

from unittest.mock import AsyncMock

import pytest

from browser_live.config import BrowserLiveConfig
from browser_live.models import TaskHandle
from browser_live.services import TaskCoordinator


class FakeTaskClient:
    """Stands in for TaskAPIClient; records calls instead of making requests"""

    def __init__(self):
        self.start_task = AsyncMock()
        self.get_task_status = AsyncMock()
        self.entered = 0

    async def __aenter__(self):
        self.entered += 1
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None


@pytest.fixture
def config():
    """Config with a credential and no wait bounds"""
    return BrowserLiveConfig(
        api_key="test-key",
        api_url="https://api.browser-use.test/mcp",
        public_url="http://localhost:3000",
        poll_interval=4.0,
        otlp_endpoint=None,
    )


@pytest.fixture
def fake_client():
    client = FakeTaskClient()
    client.start_task.return_value = TaskHandle(
        task_id="t1",
        session_id="s1",
        live_url="https://live/t1",
        task="Go to example.com",
        model="browser-use-2.0",
    )
    return client


@pytest.fixture
def coordinator(config, fake_client):
    return TaskCoordinator(config=config, client_factory=lambda: fake_client)
