"""Unit tests for task status normalization"""

import pytest

from browser_live.errors import MalformedResponseError
from browser_live.models import TaskOutcome
from browser_live.normalizer import normalize_status


class TestPendingStatus:
    """A missing or null success indicator always means pending"""

    @pytest.mark.parametrize(
        "raw",
        [
            {},
            {"is_success": None},
            {"is_success": None, "task_output": "partial text", "total_steps": 3},
            {"task_output": "done?", "total_steps": 12},
        ],
    )
    def test_null_indicator_is_pending(self, raw):
        snapshot = normalize_status(raw)
        assert snapshot.outcome is TaskOutcome.PENDING
        assert snapshot.done is False
        assert snapshot.is_success is None

    def test_pending_keeps_step_count(self):
        snapshot = normalize_status({"is_success": None, "total_steps": 5})
        assert snapshot.total_steps == 5


class TestResolvedStatus:
    """A boolean indicator always means done"""

    def test_success(self):
        snapshot = normalize_status(
            {"is_success": True, "task_output": "Top post: X", "total_steps": 7}
        )
        assert snapshot.done is True
        assert snapshot.is_success is True
        assert snapshot.output == "Top post: X"
        assert snapshot.total_steps == 7

    def test_failure(self):
        snapshot = normalize_status({"is_success": False, "task_output": None})
        assert snapshot.done is True
        assert snapshot.is_success is False
        assert snapshot.output is None

    @pytest.mark.parametrize("indicator", [True, False])
    def test_done_iff_indicator_not_null(self, indicator):
        assert normalize_status({"is_success": indicator}).done is True
        assert normalize_status({"is_success": None}).done is False

    @pytest.mark.parametrize("indicator", ["true", "false", 1, 0, "", [], {}])
    def test_non_boolean_indicator_is_rejected(self, indicator):
        with pytest.raises(MalformedResponseError) as exc_info:
            normalize_status({"is_success": indicator, "total_steps": 4})

        assert "is_success" in exc_info.value.message
        assert exc_info.value.details["is_success"] == indicator


class TestFieldDefaults:
    def test_total_steps_defaults_to_zero(self):
        assert normalize_status({"is_success": True}).total_steps == 0

    def test_invalid_total_steps_becomes_zero(self):
        assert normalize_status({"total_steps": "many"}).total_steps == 0
        assert normalize_status({"total_steps": -3}).total_steps == 0

    def test_non_string_output_is_stringified(self):
        snapshot = normalize_status({"is_success": True, "task_output": 42})
        assert snapshot.output == "42"

    def test_provider_error_text_is_kept(self):
        snapshot = normalize_status({"is_success": False, "error": "Captcha blocked"})
        assert snapshot.error_message == "Captcha blocked"

    def test_non_string_error_is_stringified(self):
        snapshot = normalize_status(
            {"is_success": False, "error": {"code": "captcha", "retry": False}}
        )
        assert snapshot.error_message == "{'code': 'captcha', 'retry': False}"
        assert snapshot.to_dict()["error"] == snapshot.error_message

    def test_empty_error_is_dropped(self):
        assert normalize_status({"is_success": False, "error": ""}).error_message is None


def test_normalize_is_idempotent():
    """Same payload in, equal snapshot and wire shape out"""
    raw = {"is_success": True, "task_output": "ok", "total_steps": 2}
    first = normalize_status(raw)
    second = normalize_status(raw)
    assert first == second
    assert first.to_dict() == second.to_dict()
