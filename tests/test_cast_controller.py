import csv
import json
import logging

import pytest
from flask import Flask

from movieapi import constants
from movieapi.cast import CastModel
from movieapi.cast_controller import CastController

CAST_ONE = "[{'credit_id': 'c1', 'id': 7, 'character': 'Hero', 'name': 'Ann'}]"
CAST_TWO = "[{'credit_id': 'c2', 'id': 7, 'character': 'Villain', 'name': 'Ann'}]"
CREW = "[{'credit_id': 'k1', 'id': 9, 'name': 'Dan', 'department': 'Directing', 'job': 'Director'}]"


@pytest.fixture
def credits_path(tmp_path):
    path = tmp_path / "credits.csv"
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(["cast", "crew", "id"])
        writer.writerow([CAST_ONE, CREW, "1"])
        writer.writerow([CAST_TWO, CREW, "2"])
    return path


@pytest.fixture
def model(credits_path):
    return CastModel(credits_path)


@pytest.fixture
def controller(model):
    return CastController(logging.getLogger("test.cast_controller"), model)


@pytest.fixture
def app():
    return Flask(__name__)


def test_list_cast_members(controller):
    resp = controller.list_cast_members("1")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "success"
    assert body["data"] == [
        {"credit_id": "c1", "id": 7, "character": "Hero", "name": "Ann"}
    ]


def test_list_cast_members_unknown_movie(controller):
    resp = controller.list_cast_members("99")
    assert resp.status_code == 500
    body = resp.get_json()
    assert body["status"] == "error"
    assert body["message"] == constants.LOAD_CREDITS_ERROR


def test_list_cast_members_bad_id(controller):
    resp = controller.list_cast_members("abc")
    assert resp.status_code == 500
    assert resp.get_json()["message"] == constants.LOAD_CREDITS_ERROR


def test_list_movies_by_cast_id(controller):
    resp = controller.list_movies_by_cast_id("7")
    assert resp.status_code == 200
    assert sorted(resp.get_json()["data"]) == [1, 2]


def test_list_movies_by_unknown_cast(controller):
    resp = controller.list_movies_by_cast_id("12345")
    assert resp.status_code == 500
    assert resp.get_json()["message"] == constants.LOAD_CREDITS_ERROR


def test_update_cast_member(app, controller, model):
    with app.test_request_context(
        "/movies/1/casts/7", method="PUT", data=json.dumps({"name": "Bea"})
    ):
        resp = controller.update_cast_member("1", "7")
    assert resp.status_code == 200
    assert resp.get_json()["data"] == constants.UPDATE_CAST_SUCCESS
    assert model.cast_data[1][0].name == "Bea"
    assert model.cast_data[1][0].character == "Hero"


def test_update_cast_member_case_insensitive_keys(app, controller, model):
    with app.test_request_context(
        "/movies/1/casts/7", method="PUT", data=json.dumps({"Character": "Sidekick"})
    ):
        resp = controller.update_cast_member("1", "7")
    assert resp.status_code == 200
    assert model.cast_data[1][0].character == "Sidekick"


def test_update_cast_member_invalid_json(app, controller):
    with app.test_request_context("/movies/1/casts/7", method="PUT", data="not json"):
        resp = controller.update_cast_member("1", "7")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == constants.INVALID_REQUEST_BODY


@pytest.mark.parametrize("payload", [{"id": "x"}, {"id": 1.5}, {"name": 3}, [1, 2]])
def test_update_cast_member_wrong_types(app, controller, payload):
    with app.test_request_context(
        "/movies/1/casts/7", method="PUT", data=json.dumps(payload)
    ):
        resp = controller.update_cast_member("1", "7")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == constants.INVALID_REQUEST_BODY


def test_update_unknown_cast_member(app, controller):
    with app.test_request_context(
        "/movies/1/casts/500", method="PUT", data=json.dumps({"name": "Bea"})
    ):
        resp = controller.update_cast_member("1", "500")
    assert resp.status_code == 500
    assert resp.get_json()["message"] == constants.UPDATE_CAST_ERROR