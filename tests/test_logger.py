import json

from movieapi.logger import new_root_logger


def read_entry(capsys):
    return json.loads(capsys.readouterr().out.strip())


def test_production_logger_writes_json(capsys):
    logger = new_root_logger(False, False)
    logger.info("hello", extra={"fields": {"id": "42"}})
    entry = read_entry(capsys)
    assert entry["level"] == "info"
    assert entry["msg"] == "hello"
    assert entry["id"] == "42"
    assert "logger" not in entry
    assert "test_logger.py:" in entry["caller"]


def test_debug_is_suppressed_without_debug_flag(capsys):
    logger = new_root_logger(False, False)
    logger.debug("hidden")
    assert capsys.readouterr().out == ""


def test_debug_flag_enables_debug(capsys):
    logger = new_root_logger(True, False)
    logger.debug("shown")
    entry = read_entry(capsys)
    assert entry["level"] == "debug"
    assert entry["msg"] == "shown"


def test_development_uses_console_layout(capsys):
    logger = new_root_logger(False, True)
    logger.warning("careful")
    parts = capsys.readouterr().out.rstrip("\n").split("\t")
    assert parts[-1] == "careful"
    assert parts[1].startswith("\x1b[")
    assert "WARN" in parts[1]


def test_debug_development_keeps_json_with_coloured_level(capsys):
    logger = new_root_logger(True, True)
    logger.info("coloured")
    entry = read_entry(capsys)
    assert entry["msg"] == "coloured"
    assert entry["level"].startswith("\x1b[")


def test_errors_carry_stacktrace(capsys):
    logger = new_root_logger(False, False)
    logger.error("bad")
    entry = read_entry(capsys)
    assert entry["msg"] == "bad"
    assert "test_logger.py" in entry["stacktrace"]


def test_child_logger_name_is_reported(capsys):
    logger = new_root_logger(False, False)
    logger.getChild("http").info("request")
    entry = read_entry(capsys)
    assert entry["logger"] == "http"