import json
from dataclasses import dataclass

import pytest

from movieapi.responses import json_error, json_fail, json_success


def body_of(response):
    return json.loads(response.get_data(as_text=True))


def test_success_envelope():
    response = json_success(200, {"title": "Heat"})
    assert response.status_code == 200
    assert response.mimetype == "application/json"
    assert body_of(response) == {"status": "success", "data": {"title": "Heat"}}


def test_fail_envelope():
    response = json_fail(400, "bad input")
    assert response.status_code == 400
    assert body_of(response) == {"status": "fail", "data": "bad input"}


def test_error_envelope_carries_code():
    response = json_error(500, "boom")
    assert response.status_code == 500
    assert body_of(response) == {"status": "error", "message": "boom", "code": 500}


@dataclass
class Sample:
    movie_id: str
    tags: list


def test_dataclasses_are_serialised():
    response = json_success(200, [Sample("31", ["a", "b"])])
    assert body_of(response)["data"] == [{"movie_id": "31", "tags": ["a", "b"]}]


class WithJson:
    def to_json(self):
        return {"userId": "7"}


def test_to_json_hook_is_used():
    assert body_of(json_success(200, WithJson()))["data"] == {"userId": "7"}


def test_unserialisable_data_raises():
    with pytest.raises(TypeError):
        json_success(200, object())