"""Tests for configuration loading"""
import pytest

from core.config import CONFIG_MAP, DEFAULT_SESSION_TTL_MS, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("APP_ENV", "PORT", "API_KEY", "SESSION_TTL_MS"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_to_development():
    config = load_config()

    assert config.name == "development"
    assert config.port == 3000
    assert config.api_key == "dev-experience-api-key"
    assert config.session_ttl_ms == DEFAULT_SESSION_TTL_MS


@pytest.mark.parametrize(
    "env, port, ttl_ms",
    [
        ("dev", 3000, 5 * 60 * 1000),
        ("staging", 4000, 3 * 60 * 1000),
        ("PRE-PROD", 4000, 3 * 60 * 1000),
        ("preprod", 4000, 3 * 60 * 1000),
        ("prod", 3000, 2 * 60 * 1000),
        ("production", 3000, 2 * 60 * 1000),
    ],
)
def test_named_profiles(env, port, ttl_ms):
    config = load_config(env)

    assert config.name == env.lower()
    assert config.port == port
    assert config.session_ttl_ms == ttl_ms


@pytest.mark.parametrize("env", ["development", "preprod", "production"])
def test_every_profile_has_an_api_key(env):
    assert load_config(env).api_key


def test_production_key_defaults_when_unset():
    assert load_config("production").api_key == "prod-experience-api-key"


@pytest.mark.parametrize("raw", ["", "   "])
def test_blank_api_key_keeps_profile_key(monkeypatch, raw):
    monkeypatch.setenv("API_KEY", raw)

    assert load_config("production").api_key == "prod-experience-api-key"


def test_unknown_profile_falls_back_to_development():
    config = load_config("qa")

    assert config.port == 3000
    assert config.api_key == "dev-experience-api-key"


def test_app_env_selects_profile(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")

    assert load_config().name == "production"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("API_KEY", "secret")
    monkeypatch.setenv("SESSION_TTL_MS", "1500")

    config = load_config("development")

    assert config.port == 9000
    assert config.api_key == "secret"
    assert config.session_ttl_ms == 1500


@pytest.mark.parametrize("raw", ["", "abc", "0", "-10"])
def test_bad_ttl_falls_back_to_default(monkeypatch, raw):
    monkeypatch.setenv("SESSION_TTL_MS", raw)

    assert load_config().session_ttl_ms == DEFAULT_SESSION_TTL_MS


def test_loaded_config_is_a_copy():
    config = load_config("development")
    config.api_key = "changed"

    assert CONFIG_MAP["development"].api_key == "dev-experience-api-key"


def test_bad_ttl_keeps_profile_ttl(monkeypatch):
    monkeypatch.setenv("SESSION_TTL_MS", "abc")

    assert load_config("preprod").session_ttl_ms == 3 * 60 * 1000
