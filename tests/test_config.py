import pytest

import config
from exceptions import ConfigurationError


def setup_function(function):
    config.get_settings.cache_clear()


def teardown_function(function):
    config.get_settings.cache_clear()


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)


def test_get_settings_reads_env(monkeypatch):
    monkeypatch.setenv("MAPBOX_TOKEN", "sk.server")
    monkeypatch.setenv("MAPBOX_PUBLIC_TOKEN", "pk.public")
    monkeypatch.setenv("EVALUATOR_URL", "http://localhost:9000/")
    monkeypatch.setenv("PORT", "9100")
    monkeypatch.setenv("REQUEST_TIMEOUT", "2.5")

    settings = config.get_settings()

    assert settings.mapbox_token == "sk.server"
    assert settings.mapbox_public_token == "pk.public"
    assert settings.evaluator_url == "http://localhost:9000"
    assert settings.port == 9100
    assert settings.request_timeout == 2.5
    assert settings.require_server_token() == "sk.server"
    assert settings.require_public_token() == "pk.public"


def test_public_token_falls_back_to_legacy_name(monkeypatch):
    monkeypatch.delenv("MAPBOX_PUBLIC_TOKEN", raising=False)
    monkeypatch.setenv("NEXT_PUBLIC_MAPBOX_TOKEN", "pk.legacy")

    assert config.get_settings().mapbox_public_token == "pk.legacy"


def test_missing_tokens_warn_and_fail_when_required(monkeypatch, caplog):
    for name in ("MAPBOX_TOKEN", "MAPBOX_PUBLIC_TOKEN", "NEXT_PUBLIC_MAPBOX_TOKEN"):
        monkeypatch.delenv(name, raising=False)

    with caplog.at_level("WARNING"):
        settings = config.get_settings()

    assert "MAPBOX_TOKEN is not set" in " ".join(caplog.messages)
    assert "MAPBOX_PUBLIC_TOKEN is not set" in " ".join(caplog.messages)
    with pytest.raises(ConfigurationError):
        settings.require_server_token()
    with pytest.raises(ConfigurationError):
        settings.require_public_token()


def test_source_color_follows_threshold():
    assert config.Config.get_source_color(100) == config.Config.NEAR_SOURCE_COLOR
    assert config.Config.get_source_color(5000) == config.Config.FAR_SOURCE_COLOR
    assert config.Config.get_source_color(None) == config.Config.UNKNOWN_SOURCE_COLOR
