import logging
from threading import Event, Thread
from typing import List

import pytest

from ignoreglob.utils.logging import TRACE, LoggingDescriptor


class Walker:
    _logger = LoggingDescriptor()


def test_logger_name_is_derived_from_owner_class() -> None:
    assert Walker._logger.name == f"{__name__}.Walker"


def test_explicit_logger_name() -> None:
    assert LoggingDescriptor(name="ignoreglob.test").name == "ignoreglob.test"


def test_lazy_message_is_not_evaluated_when_level_is_disabled(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger=Walker._logger.name)
    calls: List[str] = []

    def message() -> str:
        calls.append("called")
        return "expensive"

    Walker._logger.trace(message)
    Walker._logger.debug(message)

    assert calls == ["called"]
    assert caplog.messages == ["expensive"]


def test_trace_level_is_registered(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(TRACE, logger=Walker._logger.name)

    Walker._logger.trace(lambda: "details")

    assert logging.getLevelName(TRACE) == "TRACE"
    assert caplog.records[0].levelno == TRACE


def test_measure_time_logs_start_and_end(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger=Walker._logger.name)

    with Walker._logger.measure_time(lambda: "walk"):
        pass

    assert caplog.messages[0] == "Start walk"
    assert caplog.messages[1].startswith("End walk took ")


def test_measure_time_indents_nested_messages(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger=Walker._logger.name)

    with Walker._logger.measure_time("outer", context_name="walk"):
        Walker._logger.debug("inside", context_name="walk")

    inside = next(r for r in caplog.records if r.getMessage() == "inside")
    assert inside.indent == "  "


def test_measure_time_depth_is_kept_per_thread(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger=Walker._logger.name)
    entered = Event()
    logged = Event()

    def other() -> None:
        entered.wait(10)
        Walker._logger.debug("other thread", context_name="walk")
        logged.set()

    thread = Thread(target=other)
    thread.start()

    with Walker._logger.measure_time("outer", context_name="walk"):
        entered.set()
        assert logged.wait(10)

    thread.join(10)

    record = next(r for r in caplog.records if r.getMessage() == "other thread")
    assert not hasattr(record, "indent")
