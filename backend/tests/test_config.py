import pytest

from snapsolve.api import dependencies
from snapsolve.core.config import _normalize_prefix, _parse_positive_int, get_settings
from snapsolve.infra.llm.gemini import GeminiVisionLLM
from snapsolve.infra.llm.mock import MockVisionLLM


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    dependencies.get_llm.cache_clear()
    yield
    get_settings.cache_clear()
    dependencies.get_llm.cache_clear()


def test_parse_positive_int_falls_back_on_bad_values():
    assert _parse_positive_int(None, default=60) == 60
    assert _parse_positive_int(" ", default=60) == 60
    assert _parse_positive_int("abc", default=60) == 60
    assert _parse_positive_int("-4", default=60) == 60
    assert _parse_positive_int("15", default=60) == 15


def test_normalize_prefix():
    assert _normalize_prefix("api/mcq/") == "/api/mcq"
    assert _normalize_prefix("/") == ""


def test_settings_read_environment(monkeypatch, fresh_settings):
    monkeypatch.setenv("SNAPSOLVE_CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("SNAPSOLVE_RENDER_WORKERS", "nope")
    monkeypatch.setenv("SNAPSOLVE_MAX_MEDIA_BYTES", "1000")

    settings = get_settings()

    assert settings.cors_origins == ["http://a.test", "http://b.test"]
    assert settings.render_workers == 2
    assert settings.max_media_bytes == 1000
    assert settings.api_prefix == "/api/mcq"


def test_mock_backend_is_default(fresh_settings):
    assert isinstance(dependencies.get_llm(), MockVisionLLM)


def test_gemini_backend_selected_with_key(monkeypatch, fresh_settings):
    monkeypatch.setenv("SNAPSOLVE_LLM_BACKEND", "gemini")
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-test")

    llm = dependencies.get_llm()

    assert isinstance(llm, GeminiVisionLLM)
    assert llm.model_name == "gemini-test"
    assert llm.timeout_seconds == 5


def test_gemini_backend_without_key_fails_fast(monkeypatch, fresh_settings):
    monkeypatch.setenv("SNAPSOLVE_LLM_BACKEND", "gemini")
    monkeypatch.setenv("GEMINI_API_KEY", "")

    with pytest.raises(RuntimeError, match="GEMINI_API_KEY"):
        dependencies.get_llm()
