from app.config import DEFAULT_GEMINI_MODEL, load_settings


def test_defaults(monkeypatch):
    for name in (
        "GEMINI_API_KEY",
        "API_KEY",
        "GEMINI_MODEL",
        "GEMINI_BASE_URL",
        "GEMINI_TIMEOUT",
        "LOG_LEVEL",
        "CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.gemini_api_key is None
    assert settings.gemini_model == DEFAULT_GEMINI_MODEL
    assert settings.gemini_timeout == 30.0
    assert settings.log_level == "INFO"
    assert settings.cors_origins == ("*",)


def test_api_key_fallback_and_overrides(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "legacy-key")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173, https://planner.test")
    monkeypatch.setenv("GEMINI_BASE_URL", "https://proxy.test/v1beta/")

    settings = load_settings()

    assert settings.gemini_api_key == "legacy-key"
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ("http://localhost:5173", "https://planner.test")
    assert settings.gemini_base_url == "https://proxy.test/v1beta"


def test_gemini_key_wins(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "new-key")
    monkeypatch.setenv("API_KEY", "legacy-key")

    assert load_settings().gemini_api_key == "new-key"
