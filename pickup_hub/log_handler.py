"""Consumer-side handler that writes received request descriptions to the log."""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from pickup_hub.model import InvalidKafkaMessageError, LogMessage

logger = logging.getLogger(__name__)


def format_log_message(log_message: LogMessage) -> str:
    """Human-readable description of one logged request."""
    path = urlsplit(log_message.url).path
    return (
        "New Request:\n"
        f"\tCaught: {log_message.caught_time}\tMethod: {log_message.method}"
        f"\tPath: {path}\tlogin: {log_message.login}\tBody: {log_message.body}"
    )


class LogHandler:
    """Decodes consumed records and logs them."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._logger = log if log is not None else logger

    def handle(self, value: bytes | str) -> str | None:
        """Log a record's description and return it; invalid records yield None."""
        try:
            message = LogMessage.from_json(value)
        except InvalidKafkaMessageError as exc:
            self._logger.warning("%s", exc)
            return None
        text = format_log_message(message)
        self._logger.info("%s", text)
        return text