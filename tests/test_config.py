import pytest

from movieapi.config import AppConfig, get_config, get_config_by_name


def test_values_are_read_from_mapping():
    environ = {
        "APP_PORT": ":8080",
        "APP_ENV": "staging",
        "DEBUG": "true",
        "IS_DEVELOPMENT": "0",
        "MOVIES": "data/movies.csv",
        "CREDITS": "data/credits.csv",
        "RATINGS": "data/ratings.csv",
    }
    cfg = get_config(environ)
    assert cfg == AppConfig(
        is_development=False,
        debug=True,
        env="staging",
        port=":8080",
        movies="data/movies.csv",
        credits="data/credits.csv",
        ratings="data/ratings.csv",
    )


def test_prefixed_key_takes_precedence():
    cfg = get_config({"APP_PORT_MOVIES": "first.csv", "MOVIES": "second.csv"})
    assert cfg.movies == "first.csv"


def test_missing_values_fall_back_to_defaults():
    assert get_config({}) == AppConfig()


def test_invalid_boolean_is_rejected():
    with pytest.raises(ValueError, match="DEBUG"):
        get_config({"DEBUG": "maybe"})


def test_empty_boolean_is_rejected():
    with pytest.raises(ValueError):
        get_config({"IS_DEVELOPMENT": ""})


def test_process_environment_used_without_mapping(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("APP_PORT", ":9000")
    monkeypatch.setenv("DEBUG", "T")
    cfg = get_config()
    assert cfg.port == ":9000"
    assert cfg.debug is True


def test_dotenv_file_is_loaded(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("RATINGS", "unused")
    monkeypatch.delenv("RATINGS")
    monkeypatch.setenv("APP_PORT_RATINGS", "unused")
    monkeypatch.delenv("APP_PORT_RATINGS")
    (tmp_path / ".env").write_text("RATINGS=from_dotenv.csv\n")
    assert get_config().ratings == "from_dotenv.csv"


def test_get_config_by_name_reads_dotenv(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MOVIEAPI_SAMPLE_KEY", "unused")
    monkeypatch.delenv("MOVIEAPI_SAMPLE_KEY")
    (tmp_path / ".env").write_text("MOVIEAPI_SAMPLE_KEY=from-dotenv\n")
    assert get_config_by_name("MOVIEAPI_SAMPLE_KEY") == "from-dotenv"


def test_get_config_by_name_prefers_existing_environment(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MOVIEAPI_SAMPLE_KEY", "from-env")
    (tmp_path / ".env").write_text("MOVIEAPI_SAMPLE_KEY=from-dotenv\n")
    assert get_config_by_name("MOVIEAPI_SAMPLE_KEY") == "from-env"


def test_get_config_by_name_requires_dotenv(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError):
        get_config_by_name("ANYTHING")