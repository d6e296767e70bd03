from unittest.mock import MagicMock, patch

import pytest

from splashy.errors import error_handler
from splashy.errors import report_prompt
from splashy.prompts import Decision
from splashy.prompts import ScriptedPrompter


@pytest.fixture
def sink():
    return MagicMock(return_value="event-1234")


def test_error_handler_saves_last_error(context, sink):
    prompter = ScriptedPrompter()

    error_handler(ValueError("bad value"), context, prompter=prompter, sink=sink)

    assert context.settings.get("lastError") == {"type": "ValueError", "message": "bad value"}
    assert prompter.asked == []
    sink.assert_not_called()


@patch("splashy.errors.logger", autospec=True)
def test_error_handler_logs(fake_logger, context, sink):
    error_handler(RuntimeError("boom"), context, prompter=ScriptedPrompter(), sink=sink)

    fake_logger.error.assert_called_once()


def test_error_handler_asks_before_reporting(context, sink):
    context.settings.set("shouldReportErrors", True)
    prompter = ScriptedPrompter()
    error = RuntimeError("boom")

    error_handler(error, context, prompter=prompter, sink=sink)

    assert prompter.asked == [Decision.REPORT_ERROR]
    sink.assert_called_once_with(error)
    assert context.settings.get("lastEventId") == "event-1234"


def test_error_handler_report_declined(context, sink):
    context.settings.set("shouldReportErrors", True)
    prompter = ScriptedPrompter({Decision.REPORT_ERROR: False})

    error_handler(RuntimeError("boom"), context, prompter=prompter, sink=sink)

    sink.assert_not_called()
    assert context.settings.get("lastEventId") is None


def test_error_handler_reports_automatically(context, sink):
    context.settings.set("shouldReportErrorsAutomatically", True)
    prompter = ScriptedPrompter()

    error_handler(RuntimeError("boom"), context, prompter=prompter, sink=sink)

    assert prompter.asked == []
    assert context.settings.get("lastEventId") == "event-1234"


def test_report_prompt_returns_event_id(context, sink):
    assert report_prompt(KeyError("x"), context, prompter=ScriptedPrompter(), sink=sink) == (
        "event-1234"
    )
