import json
from datetime import datetime, timezone

import pytest

from pickup_hub.model import (
    CacheMissedError,
    Cover,
    EmptyBodyRequestError,
    EmptyRequestError,
    ExcessWeightError,
    InvalidEnvironmentError,
    InvalidInputError,
    InvalidKafkaMessageError,
    LogMessage,
    ObjectNotFoundError,
    PickPoint,
    ServiceError,
)


@pytest.mark.parametrize(
    "error_class, message",
    [
        (ObjectNotFoundError, "object not found"),
        (InvalidEnvironmentError, "invalid environment"),
        (InvalidInputError, "invalid input"),
        (ExcessWeightError, "excess weight"),
        (InvalidKafkaMessageError, "invalid kafka message"),
        (EmptyRequestError, "empty request"),
        (EmptyBodyRequestError, "empty body request"),
        (CacheMissedError, "cache missed"),
    ],
)
def test_error_messages(error_class, message):
    error = error_class()
    assert str(error) == message
    assert isinstance(error, ServiceError)


def test_service_error_custom_message():
    assert str(ServiceError("boom")) == "boom"


def test_cover_values():
    assert Cover("box") is Cover.BOX
    assert str(Cover.BAG) == "bag"
    assert Cover.FILM == "film"


def test_pickpoint_to_dict_omits_zero_id():
    point = PickPoint(name="Chertanovo", address="street", contact="c")
    assert "id" not in point.to_dict()
    assert list(PickPoint(id=5, name="n").to_dict()) == ["id", "name", "address", "contact"]


def test_pickpoint_round_trip():
    point = PickPoint(id=100, name="Chertanovo", address="Chertanovskaya street, 8", contact="+7(999)888-77-66")
    assert PickPoint.from_dict(point.to_dict()) == point


def test_pickpoint_from_dict_ignores_unknown_keys():
    point = PickPoint.from_dict({"id": 100, "name": "Chertanovo", "contacts": "x"})
    assert point == PickPoint(id=100, name="Chertanovo")


def test_pickpoint_from_dict_matches_keys_case_insensitively():
    assert PickPoint.from_dict({"Name": "Chertanovo"}).name == "Chertanovo"


@pytest.mark.parametrize("data", [{"id": "100"}, {"name": 5}, {"id": True}, ["name"], "text"])
def test_pickpoint_from_dict_rejects_bad_data(data):
    with pytest.raises(ValueError):
        PickPoint.from_dict(data)


def test_log_message_round_trip():
    message = LogMessage(
        caught_time=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
        method="POST",
        url="/pickpoint",
        body="bad request",
        login="admin",
    )
    assert LogMessage.from_json(message.to_json()) == message
    assert LogMessage.from_json(message.to_json().encode()) == message


def test_log_message_json_keys():
    data = json.loads(LogMessage(method="GET").to_json())
    assert set(data) == {"time", "method", "url", "body", "login"}
    assert data["method"] == "GET"


@pytest.mark.parametrize("raw", ["not json", "[1, 2]", '{"method": 5}', '{"time": "yesterday"}'])
def test_log_message_from_invalid_json(raw):
    with pytest.raises(InvalidKafkaMessageError):
        LogMessage.from_json(raw)