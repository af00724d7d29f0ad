"""Tests for QCDNSettings environment resolution and credential checks."""

import logging

import pytest

from apps.cdn.config import QCDNSettings
from apps.cdn.exceptions import QCDNConfigError

QCDN_ENV_VARS = (
    "QCDN_ENVTYPE",
    "QCDN_USERNAME",
    "QCDN_PASSWORD",
    "QCDN_XAPI_TOKEN",
    "QCDN_HTTP_TIMEOUT",
    "QCDN_ACCEPTANCE_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in QCDN_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestFromEnv:
    """Tests for reading QCDN_* variables."""

    def test_defaults(self):
        settings = QCDNSettings.from_env()

        assert settings.env_type == "prod"
        assert not settings.env_type_explicit
        assert settings.http_timeout == 40
        assert settings.acceptance_timeout == 180
        assert settings.poll_interval == 3

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("QCDN_ENVTYPE", "stage")
        monkeypatch.setenv("QCDN_USERNAME", "ops@example.com")
        monkeypatch.setenv("QCDN_PASSWORD", "pw")
        monkeypatch.setenv("QCDN_ACCEPTANCE_TIMEOUT", "60")

        settings = QCDNSettings.from_env()

        assert settings.env_type == "stage"
        assert settings.env_type_explicit
        assert settings.username == "ops@example.com"
        assert settings.password == "pw"
        assert settings.acceptance_timeout == 60

    def test_explicit_values_win(self, monkeypatch):
        monkeypatch.setenv("QCDN_XAPI_TOKEN", "from-env")
        monkeypatch.setenv("QCDN_ENVTYPE", "dev")

        settings = QCDNSettings.from_env(xapi_token="explicit", env_type="prestg")

        assert settings.xapi_token == "explicit"
        assert settings.env_type == "prestg"

    def test_none_overrides_are_ignored(self, monkeypatch):
        monkeypatch.setenv("QCDN_XAPI_TOKEN", "from-env")

        settings = QCDNSettings.from_env(xapi_token=None)

        assert settings.xapi_token == "from-env"

    def test_unknown_environment_type(self, monkeypatch):
        monkeypatch.setenv("QCDN_ENVTYPE", "qa")

        with pytest.raises(QCDNConfigError):
            QCDNSettings.from_env()


class TestValidateCredentials:
    """Tests for configure-time credential checks."""

    def test_api_key_is_enough(self):
        QCDNSettings(xapi_token="key").validate_credentials()

    @pytest.mark.parametrize("username", ["ops@qwilt.com", "alice"])
    def test_api_key_ignores_leftover_username(self, username):
        QCDNSettings(xapi_token="key", username=username).validate_credentials()

    def test_missing_api_key_logs_warning(self, caplog):
        settings = QCDNSettings(username="ops@example.com", password="pw")

        with caplog.at_level(logging.WARNING, logger="apps.cdn.config"):
            settings.validate_credentials()

        assert "No Qwilt CDN API key" in caplog.text

    def test_missing_username(self):
        with pytest.raises(QCDNConfigError) as exc_info:
            QCDNSettings().validate_credentials()

        assert "QCDN_USERNAME" in str(exc_info.value)

    def test_missing_password(self):
        with pytest.raises(QCDNConfigError) as exc_info:
            QCDNSettings(username="ops@example.com").validate_credentials()

        assert "QCDN_PASSWORD" in str(exc_info.value)

    def test_internal_user_needs_environment(self):
        settings = QCDNSettings(username="dev@qwilt.com", password="pw")

        with pytest.raises(QCDNConfigError) as exc_info:
            settings.validate_credentials()

        assert "QCDN_ENVTYPE" in str(exc_info.value)

    def test_internal_user_with_environment(self, monkeypatch):
        monkeypatch.setenv("QCDN_ENVTYPE", "dev")

        settings = QCDNSettings.from_env(username="dev@qwilt.com", password="pw")

        settings.validate_credentials()
        assert settings.env_type == "dev"
