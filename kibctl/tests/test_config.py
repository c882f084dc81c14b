from pathlib import Path

import pytest
from pydantic import ValidationError

from kibctl.config import LogLevel, Settings, load_settings
from kibctl.errors import ConfigurationError

ENV_VARS = (
    "KIBANA_HOST", "HOST", "KIBANA_USERNAME", "USERNAME",
    "KIBANA_PASSWORD", "PASSWORD", "KIBCTL_VERBOSE", "KIBCTL_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the tests
    monkeypatch.chdir(tmp_path)


def test_settings_read_kibana_prefixed_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("KIBANA_HOST", "https://kibana.example.com:5601/")
    monkeypatch.setenv("KIBANA_USERNAME", "elastic")
    monkeypatch.setenv("KIBANA_PASSWORD", "changeme")

    settings = load_settings()

    assert settings.host == "https://kibana.example.com:5601"
    assert settings.username == "elastic"
    assert settings.password.get_secret_value() == "changeme"
    assert settings.auth == ("elastic", "changeme")


def test_settings_read_plain_environment_names(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("HOST", "http://localhost:5601")
    monkeypatch.setenv("USERNAME", "admin")
    monkeypatch.setenv("PASSWORD", "pw")

    settings = load_settings()

    assert settings.host == "http://localhost:5601"
    assert settings.username == "admin"


def test_command_line_overrides_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("KIBANA_HOST", "http://from-env:5601")
    monkeypatch.setenv("KIBANA_USERNAME", "env-user")

    settings = load_settings(host="http://from-cli:5601", username=None, verbose=True)

    assert settings.host == "http://from-cli:5601"
    assert settings.username == "env-user"
    assert settings.verbose is True


def test_settings_read_dotenv_file(tmp_path: Path):
    (tmp_path / ".env").write_text("KIBANA_HOST=http://dotenv:5601\nKIBCTL_LOG_LEVEL=INFO\n")

    settings = load_settings()

    assert settings.host == "http://dotenv:5601"
    assert settings.log_level == LogLevel.INFO


def test_host_without_scheme_is_rejected():
    with pytest.raises(ValidationError):
        Settings(host="kibana:5601")


def test_defaults():
    settings = load_settings()
    assert settings.host is None
    assert settings.verbose is False
    assert settings.log_level == LogLevel.DEBUG
    assert settings.auth is None


@pytest.mark.parametrize(
    "values, message",
    [
        ({}, "kibana host not defined"),
        ({"host": "http://k:5601"}, "kibana username not defined"),
        ({"host": "http://k:5601", "username": "u"}, "kibana password not defined"),
        ({"host": "http://k:5601", "username": "u", "password": ""}, "kibana password not defined"),
    ],
)
def test_require_credentials_reports_first_missing_value(values, message):
    with pytest.raises(ConfigurationError, match=message) as excinfo:
        load_settings(**values).require_credentials()
    assert excinfo.value.exit_code == 1


def test_require_host_ignores_missing_credentials():
    settings = load_settings(host="http://k:5601")
    assert settings.require_host() == "http://k:5601"
