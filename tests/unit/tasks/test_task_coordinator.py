"""Unit tests for the task lifecycle coordinator"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from browser_live.config import BrowserLiveConfig
from browser_live.errors import (
    MalformedResponseError,
    MissingCredentialError,
    ProviderError,
    TaskTimeoutError,
    TransportError,
)
from browser_live.models import TaskOutcome, TaskSnapshot
from browser_live.services import (
    FAILURE_NO_OUTPUT_MESSAGE,
    SUCCESS_NO_OUTPUT_MESSAGE,
    TaskCoordinator,
    compose_summary,
)

SLEEP_TARGET = "browser_live.services.task_coordinator.asyncio.sleep"

PENDING = {"is_success": None}


class TestComposeSummary:
    def test_pending_has_no_summary(self):
        assert compose_summary(TaskSnapshot(TaskOutcome.PENDING)) is None

    def test_output_is_used_verbatim(self):
        snapshot = TaskSnapshot(TaskOutcome.SUCCEEDED, output="Top post: X")
        assert compose_summary(snapshot) == "Top post: X"

    def test_success_without_output(self):
        assert compose_summary(TaskSnapshot(TaskOutcome.SUCCEEDED)) == (
            SUCCESS_NO_OUTPUT_MESSAGE
        )

    def test_blank_output_counts_as_missing(self):
        snapshot = TaskSnapshot(TaskOutcome.SUCCEEDED, output="   \n")
        assert compose_summary(snapshot) == SUCCESS_NO_OUTPUT_MESSAGE

    def test_failure_prefers_provider_error(self):
        snapshot = TaskSnapshot(TaskOutcome.FAILED, error_message="Captcha blocked")
        assert compose_summary(snapshot) == "Captcha blocked"

    def test_failure_without_output_or_error(self):
        summary = compose_summary(TaskSnapshot(TaskOutcome.FAILED))
        assert summary == FAILURE_NO_OUTPUT_MESSAGE
        assert summary != ""


class TestStartTask:
    @pytest.mark.asyncio
    async def test_start_returns_launch_without_polling(self, coordinator, fake_client):
        launch = await coordinator.start_task("Go to example.com")

        fake_client.start_task.assert_awaited_once_with(
            "Go to example.com", "browser-use-2.0", 20
        )
        fake_client.get_task_status.assert_not_called()
        assert launch.widget_props() == {
            "taskId": "t1",
            "sessionId": "s1",
            "liveUrl": "https://live/t1",
            "taskStatusApiUrl": "http://localhost:3000/api/task/t1",
            "task": "Go to example.com",
            "model": "browser-use-2.0",
        }
        assert launch.message == (
            "Browser task started!\nTask ID: t1\nLive view: https://live/t1"
        )

    @pytest.mark.asyncio
    async def test_missing_credential_makes_no_request(self, fake_client):
        factory_calls = []

        def factory():
            factory_calls.append(1)
            return fake_client

        coordinator = TaskCoordinator(
            config=BrowserLiveConfig(api_key=""), client_factory=factory
        )

        with pytest.raises(MissingCredentialError, match="BROWSER_USE_API_KEY"):
            await coordinator.start_task("Go to example.com")

        assert factory_calls == []
        fake_client.start_task.assert_not_called()

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self, coordinator, fake_client):
        fake_client.start_task.side_effect = ProviderError("Invalid API key")

        with pytest.raises(ProviderError, match="Invalid API key"):
            await coordinator.start_task("x")


class TestRunTask:
    @pytest.mark.asyncio
    async def test_polls_until_resolved(self, coordinator, fake_client):
        fake_client.get_task_status.side_effect = [
            PENDING,
            PENDING,
            PENDING,
            {"is_success": True, "task_output": "Top post: X", "total_steps": 7},
        ]

        with patch(SLEEP_TARGET, new_callable=AsyncMock) as mock_sleep:
            result = await coordinator.run_task("Go to example.com")

        assert result.summary == "Top post: X"
        assert result.snapshot.total_steps == 7
        assert result.snapshot.is_success is True
        assert result.polls == 4
        assert fake_client.get_task_status.await_count == 4
        assert mock_sleep.await_count == 3
        assert all(call.args == (4.0,) for call in mock_sleep.await_args_list)
        assert result.metadata == {"task": "Go to example.com", "model": "browser-use-2.0"}

    @pytest.mark.asyncio
    async def test_returns_on_first_resolved_poll_without_sleeping(
        self, coordinator, fake_client
    ):
        fake_client.get_task_status.return_value = {"is_success": False}

        with patch(SLEEP_TARGET, new_callable=AsyncMock) as mock_sleep:
            result = await coordinator.run_task("x")

        mock_sleep.assert_not_called()
        assert result.polls == 1
        assert result.snapshot.is_success is False
        assert result.summary == FAILURE_NO_OUTPUT_MESSAGE

    @pytest.mark.asyncio
    async def test_uses_explicit_poll_interval(self, coordinator, fake_client):
        fake_client.get_task_status.side_effect = [PENDING, {"is_success": True}]

        with patch(SLEEP_TARGET, new_callable=AsyncMock) as mock_sleep:
            result = await coordinator.run_task("x", poll_interval=0.5)

        mock_sleep.assert_awaited_once_with(0.5)
        assert result.summary == SUCCESS_NO_OUTPUT_MESSAGE

    @pytest.mark.asyncio
    async def test_poll_error_aborts_without_retry(self, coordinator, fake_client):
        fake_client.get_task_status.side_effect = [
            PENDING,
            TransportError("API request failed: 503", status_code=503),
            {"is_success": True},
        ]

        with patch(SLEEP_TARGET, new_callable=AsyncMock):
            with pytest.raises(TransportError, match="503"):
                await coordinator.run_task("x")

        assert fake_client.get_task_status.await_count == 2

    @pytest.mark.asyncio
    async def test_non_boolean_indicator_aborts_polling(self, coordinator, fake_client):
        fake_client.get_task_status.side_effect = [
            PENDING,
            {"is_success": "true", "task_output": "Top post: X"},
            {"is_success": True},
        ]

        with patch(SLEEP_TARGET, new_callable=AsyncMock):
            with pytest.raises(MalformedResponseError, match="is_success"):
                await coordinator.run_task("x")

        assert fake_client.get_task_status.await_count == 2

    @pytest.mark.asyncio
    async def test_structured_provider_error_becomes_text_summary(
        self, coordinator, fake_client
    ):
        fake_client.get_task_status.return_value = {
            "is_success": False,
            "error": {"code": "captcha"},
        }

        result = await coordinator.run_task("x")

        assert result.summary == "{'code': 'captcha'}"
        assert isinstance(result.summary, str)

    @pytest.mark.asyncio
    async def test_max_polls_bound(self, coordinator, fake_client):
        fake_client.get_task_status.return_value = PENDING

        with patch(SLEEP_TARGET, new_callable=AsyncMock) as mock_sleep:
            with pytest.raises(TaskTimeoutError) as exc_info:
                await coordinator.run_task("x", max_polls=3)

        assert exc_info.value.polls == 3
        assert exc_info.value.task_id == "t1"
        assert mock_sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_max_wait_bound(self, config, fake_client):
        ticks = iter([0.0, 0.0, 4.0, 8.0])
        coordinator = TaskCoordinator(
            config=config,
            client_factory=lambda: fake_client,
            clock=lambda: next(ticks),
        )
        fake_client.get_task_status.return_value = PENDING

        with patch(SLEEP_TARGET, new_callable=AsyncMock):
            with pytest.raises(TaskTimeoutError):
                await coordinator.run_task("x", max_wait=10)

        assert fake_client.get_task_status.await_count == 3

    @pytest.mark.asyncio
    async def test_unbounded_by_default(self, coordinator, fake_client):
        fake_client.get_task_status.side_effect = [PENDING] * 50 + [{"is_success": True}]

        with patch(SLEEP_TARGET, new_callable=AsyncMock):
            result = await coordinator.run_task("x")

        assert result.polls == 51

    @pytest.mark.asyncio
    async def test_cancellation_stops_polling(self, config, fake_client):
        fake_client.get_task_status.return_value = PENDING
        coordinator = TaskCoordinator(config=config, client_factory=lambda: fake_client)

        runner = asyncio.create_task(coordinator.run_task("x", poll_interval=0.01))
        await asyncio.sleep(0.05)
        runner.cancel()

        with pytest.raises(asyncio.CancelledError):
            await runner

        polls = fake_client.get_task_status.await_count
        await asyncio.sleep(0.03)
        assert fake_client.get_task_status.await_count == polls


class TestCheckTask:
    @pytest.mark.asyncio
    async def test_single_query(self, coordinator, fake_client):
        fake_client.get_task_status.return_value = {"is_success": None, "total_steps": 2}

        snapshot = await coordinator.check_task("t1")

        fake_client.get_task_status.assert_awaited_once_with("t1")
        fake_client.start_task.assert_not_called()
        assert snapshot.done is False
        assert snapshot.total_steps == 2

    @pytest.mark.asyncio
    async def test_check_requires_credential(self, fake_client):
        coordinator = TaskCoordinator(
            config=BrowserLiveConfig(api_key=""), client_factory=lambda: fake_client
        )

        with pytest.raises(MissingCredentialError):
            await coordinator.check_task("t1")

        fake_client.get_task_status.assert_not_called()
