import json
import logging
import os
import signal
import threading
import time

import pytest

from movieapi.cli import main, parse_port, run_api
from movieapi.config import AppConfig


def test_parse_port_any_host():
    assert parse_port(":8000") == ("0.0.0.0", 8000)


def test_parse_port_named_host():
    assert parse_port("localhost:8080") == ("localhost", 8080)


def test_parse_port_empty_picks_free_port():
    host, port = parse_port("")
    assert port == 0
    assert host == parse_port(":1")[0]


@pytest.mark.parametrize("address", ["8000", ":99999", ":abc"])
def test_parse_port_rejects_bad_addresses(address):
    with pytest.raises(ValueError):
        parse_port(address)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for key in ("DEBUG", "IS_DEVELOPMENT", "APP_PORT_DEBUG", "APP_PORT_IS_DEVELOPMENT"):
        monkeypatch.delenv(key, raising=False)
    return tmp_path


def test_main_without_command_prints_help(clean_env, capsys):
    assert main([]) == 0
    assert "To start api" in capsys.readouterr().out


def test_main_unknown_command_exits(clean_env):
    with pytest.raises(SystemExit) as info:
        main(["bogus"])
    assert info.value.code == 2


def test_main_api_fails_without_spec(clean_env):
    assert main(["api"]) == 1


def test_run_api_needs_spec_file(clean_env):
    with pytest.raises(FileNotFoundError):
        run_api(AppConfig(port="127.0.0.1:0"), logging.getLogger("tests.cli"))


def test_run_api_shuts_down_on_sigterm(clean_env, caplog):
    assets = clean_env / "assets"
    assets.mkdir()
    (assets / "swagger.json").write_text(json.dumps({"swagger": "2.0"}), encoding="utf-8")
    original = signal.getsignal(signal.SIGTERM)

    def send_term():
        deadline = time.monotonic() + 10
        while signal.getsignal(signal.SIGTERM) == original and time.monotonic() < deadline:
            time.sleep(0.05)
        time.sleep(0.2)
        os.kill(os.getpid(), signal.SIGTERM)

    sender = threading.Thread(target=send_term, daemon=True)
    sender.start()
    logger = logging.getLogger("tests.cli.run")
    with caplog.at_level(logging.INFO, logger="tests.cli.run"):
        run_api(AppConfig(port="127.0.0.1:0"), logger)
    sender.join()

    messages = [record.getMessage() for record in caplog.records]
    assert "gracefully shutting down..." in messages
    assert "server stopped to receive new requests or connection." in messages
    assert signal.getsignal(signal.SIGTERM) == original