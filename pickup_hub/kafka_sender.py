"""Publishing of incoming HTTP request descriptions to a message broker."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from pickup_hub.model import (
    EmptyBodyRequestError,
    EmptyRequestError,
    LogMessage,
    RequestMessage,
)

ANY_PARTITION = -1
_HEADERS = [(b"test-header", b"test-value")]


@dataclass
class ProducerMessage:
    """A record ready to be handed to a synchronous producer."""

    topic: str
    value: bytes
    key: bytes
    partition: int = ANY_PARTITION
    headers: list[tuple[bytes, bytes]] = field(default_factory=list)


class Producer(Protocol):
    def send_sync_message(self, message: ProducerMessage) -> tuple[int, int]: ...


def to_log_message(message: RequestMessage) -> LogMessage:
    """Describe a caught request as a log message.

    Raises EmptyRequestError without a request and EmptyBodyRequestError
    when the request carries no body at all.
    """
    request = message.request
    if request is None:
        raise EmptyRequestError()
    if request.body is None:
        raise EmptyBodyRequestError()
    return LogMessage(
        caught_time=message.caught_time,
        method=request.method,
        url=request.url,
        body=request.body.decode("utf-8", errors="replace"),
        login=request.login,
    )


class KafkaSender:
    """Sends request descriptions to one topic through a producer."""

    def __init__(self, producer: Producer, topic: str) -> None:
        self._producer = producer
        self.topic = topic

    def build_message(self, message: RequestMessage) -> ProducerMessage:
        log_message = to_log_message(message)
        return ProducerMessage(
            topic=self.topic,
            value=log_message.to_json().encode("utf-8"),
            key=log_message.method.encode("utf-8"),
            partition=ANY_PARTITION,
            headers=list(_HEADERS),
        )

    def send_message(self, message: RequestMessage) -> None:
        """Build the record and send it; producer errors propagate."""
        self._producer.send_sync_message(self.build_message(message))