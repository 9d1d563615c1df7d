import pytest
from pydantic import ValidationError

from vellum.config import VellumSettings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("VELLUM_LOG_LEVEL", "VELLUM_RETRY_MAX_ATTEMPTS", "VELLUM_RETRY_DELAY"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = VellumSettings()

    assert settings.log_level == "INFO"
    assert settings.retry_max_attempts == 1
    assert settings.retry_delay == 0.0


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("VELLUM_LOG_LEVEL", "debug")
    monkeypatch.setenv("VELLUM_RETRY_MAX_ATTEMPTS", "3")
    monkeypatch.setenv("VELLUM_RETRY_DELAY", "0.25")

    settings = VellumSettings()

    assert settings.log_level == "DEBUG"
    assert settings.retry_max_attempts == 3
    assert settings.retry_delay == 0.25


def test_rejects_unknown_log_level():
    with pytest.raises(ValidationError, match="Unknown log level"):
        VellumSettings(log_level="chatty")


@pytest.mark.parametrize("attempts", [0, -1])
def test_rejects_non_positive_attempts(attempts):
    with pytest.raises(ValidationError):
        VellumSettings(retry_max_attempts=attempts)


def test_rejects_negative_delay():
    with pytest.raises(ValidationError):
        VellumSettings(retry_delay=-0.5)
