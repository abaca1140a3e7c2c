import pytest

from backend.app.config import load_settings

ENV_VARS = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GOOGLE_PROJECT_ID",
    "GOOGLE_LOCATION",
    "GOOGLE_APPLICATION_CREDENTIALS_B64",
    "GEMINI_MODEL",
    "ADVENTURE_MODE",
    "PROMPT_STYLE",
    "LOG_LEVEL",
    "HOST",
    "PORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = load_settings()

    assert settings.mode == "async"
    assert settings.prompt_style == "detailed"
    assert settings.model == "gemini-2.5-pro"
    assert settings.location == "us-central1"
    assert settings.port == 3000
    assert settings.api_key is None
    assert not settings.use_vertex


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "fallback-key")
    monkeypatch.setenv("GOOGLE_PROJECT_ID", "tavern")
    monkeypatch.setenv("ADVENTURE_MODE", "SYNC")
    monkeypatch.setenv("PROMPT_STYLE", "brief")
    monkeypatch.setenv("PORT", "8080")

    settings = load_settings()

    assert settings.api_key == "fallback-key"
    assert settings.use_vertex
    assert settings.mode == "sync"
    assert settings.prompt_style == "brief"
    assert settings.port == 8080


def test_gemini_key_takes_precedence(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "primary")
    monkeypatch.setenv("GOOGLE_API_KEY", "fallback")
    assert load_settings().api_key == "primary"


@pytest.mark.parametrize("name,value", [("ADVENTURE_MODE", "batch"), ("PROMPT_STYLE", "epic")])
def test_invalid_choices_are_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        load_settings()
