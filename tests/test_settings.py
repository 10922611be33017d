from live_quiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from live_quiz.utils.settings import ServerSettings


def test_defaults_without_environment(monkeypatch):
    for name in ("LIVE_QUIZ_HOST", "LIVE_QUIZ_PORT", "LIVE_QUIZ_PUBLIC_HOST", "LIVE_QUIZ_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = ServerSettings(_env_file=None)

    assert settings.host == DEFAULT_HOST
    assert settings.port == DEFAULT_PORT
    assert settings.public_host is None
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LIVE_QUIZ_PORT", "8080")
    monkeypatch.setenv("LIVE_QUIZ_PUBLIC_HOST", "quiz.example.com")

    settings = ServerSettings(_env_file=None)

    assert settings.port == 8080
    assert settings.public_host == "quiz.example.com"
