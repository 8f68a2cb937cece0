import logging
from datetime import datetime, timezone

from pickup_hub.log_handler import LogHandler, format_log_message
from pickup_hub.model import LogMessage


def _message(**overrides):
    values = dict(
        caught_time=datetime(2024, 3, 4, 5, 6, 7, tzinfo=timezone.utc),
        method="POST",
        url="/pickpoint",
        body="body",
        login="admin",
    )
    values.update(overrides)
    return LogMessage(**values)


def test_format_layout():
    text = format_log_message(_message())
    assert text.startswith("New Request:\n\tCaught: ")
    assert text.endswith("\tMethod: POST\tPath: /pickpoint\tlogin: admin\tBody: body")


def test_format_includes_time():
    message = _message()
    assert str(message.caught_time) in format_log_message(message)


def test_format_uses_path_only():
    text = format_log_message(_message(method="GET", url="/pickpoint/10?verbose=1"))
    assert "\tPath: /pickpoint/10\t" in text
    assert "verbose" not in text


def test_handle_round_trip(caplog):
    message = _message()
    handler = LogHandler()
    with caplog.at_level(logging.INFO, logger="pickup_hub.log_handler"):
        result = handler.handle(message.to_json().encode("utf-8"))
    assert result == format_log_message(message)
    assert result in caplog.text


def test_handle_invalid_record(caplog):
    handler = LogHandler()
    with caplog.at_level(logging.INFO, logger="pickup_hub.log_handler"):
        result = handler.handle(b"not json at all")
    assert result is None
    assert "invalid kafka message" in caplog.text


def test_handle_rejects_non_object():
    assert LogHandler().handle(b"[1, 2]") is None