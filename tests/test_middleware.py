import collections
import logging
import types

import pytest
from flask import Flask, Response

from movieapi.config import AppConfig
from movieapi.middleware import Middleware, install_log_handler, status_class
from movieapi.responses import json_fail, json_success


class _RequestsCounter:
    def __init__(self):
        self.counts = collections.Counter()

    def with_label_values(self, *labels):
        return types.SimpleNamespace(inc=lambda: self.counts.update([labels]))


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def handler():
    return _ListHandler()


@pytest.fixture
def counter():
    return _RequestsCounter()


@pytest.fixture
def client(handler, counter):
    logger = logging.getLogger("test.middleware.requests")
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    metrics = types.SimpleNamespace(requests_metrics=counter)

    app = Flask(__name__)
    app.add_url_rule("/ok", "ok", lambda: json_success(200, "ok"))
    app.add_url_rule(
        "/missing", "missing", lambda: json_fail(404, "gone"), methods=["GET", "POST"]
    )
    app.add_url_rule("/plain", "plain", lambda: Response("hi", mimetype="text/plain"))
    app.add_url_rule("/docs", "docs", lambda: json_success(200, "docs"))
    install_log_handler(app, logger, metrics)
    return app.test_client()


@pytest.mark.parametrize(
    "code, label",
    [(200, "2xx"), (299, "2xx"), (301, "3xx"), (404, "4xx"), (500, "5xx"), (503, "5xx")],
)
def test_status_class(code, label):
    assert status_class(code) == label


def test_status_class_informational_is_uncounted():
    assert status_class(101) is None


def test_success_logged_at_debug(client, handler, counter):
    resp = client.get("/ok")
    assert resp.status_code == 200
    assert len(handler.records) == 1
    record = handler.records[0]
    assert record.levelno == logging.DEBUG
    assert record.getMessage() == "Handled successful request"
    assert record.fields["status"] == 200
    assert record.fields["method"] == "GET"
    assert counter.counts[("2xx",)] == 1


def test_failure_logged_at_error(client, handler, counter):
    resp = client.get("/missing")
    assert resp.status_code == 404
    assert [r.levelno for r in handler.records] == [logging.ERROR]
    assert handler.records[0].getMessage() == "handled error request"
    assert counter.counts[("4xx",)] == 1


def test_unknown_route_counted(client, counter):
    resp = client.get("/nowhere")
    assert resp.status_code == 404
    assert counter.counts[("4xx",)] == 1


def test_text_response_counted_but_not_logged(client, handler, counter):
    resp = client.get("/plain")
    assert resp.get_data(as_text=True) == "hi"
    assert handler.records == []
    assert counter.counts[("2xx",)] == 1


def test_ignored_path_not_logged(client, handler, counter):
    resp = client.get("/docs")
    assert resp.get_json()["data"] == "docs"
    assert handler.records == []
    assert counter.counts[("2xx",)] == 1


def test_request_body_recorded(client, handler):
    resp = client.post("/missing", data="payload")
    assert resp.status_code == 404
    errors = [r for r in handler.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert errors[0].fields["request"] in ("payload", "")
    assert errors[0].fields["method"] == "POST"


def test_middleware_holds_settings():
    config = AppConfig(port=":8080")
    logger = logging.getLogger("test.middleware")
    middleware = Middleware(config, logger)
    assert middleware.config.port == ":8080"
    assert middleware.logger is logger