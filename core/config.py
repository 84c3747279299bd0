"""
Application Configuration

Named profiles (development / preprod / production) with environment
overrides. Read once at app construction; nothing else in core touches
os.environ for configuration.

Environment variables:
- APP_ENV: profile name (default: development)
- PORT: listen port
- API_KEY: shared secret expected in the x-api-key header (blank keeps the profile key)
- SESSION_TTL_MS: lifetime of a cart session in milliseconds
"""

import os
from dataclasses import dataclass, replace

DEFAULT_SESSION_TTL_MS = 5 * 60 * 1000  # 5 minutes


@dataclass
class AppConfig:
    name: str
    port: int
    api_key: str
    session_ttl_ms: int = DEFAULT_SESSION_TTL_MS


_DEVELOPMENT = AppConfig(
    name="development",
    port=3000,
    api_key="dev-experience-api-key",
)

_PREPROD = AppConfig(
    name="preprod",
    port=4000,
    api_key="preprod-experience-api-key",
    session_ttl_ms=3 * 60 * 1000,
)

_PRODUCTION = AppConfig(
    name="production",
    port=3000,
    api_key="prod-experience-api-key",
    session_ttl_ms=2 * 60 * 1000,
)

CONFIG_MAP: dict[str, AppConfig] = {
    "development": _DEVELOPMENT,
    "dev": _DEVELOPMENT,
    "pre-prod": _PREPROD,
    "preprod": _PREPROD,
    "staging": _PREPROD,
    "production": _PRODUCTION,
    "prod": _PRODUCTION,
}


def _parse_positive_int(raw: str | None, fallback: int) -> int:
    if raw is None or raw.strip() == "":
        return fallback
    try:
        value = int(raw)
    except ValueError:
        return fallback
    return value if value > 0 else fallback


def load_config(env: str | None = None) -> AppConfig:
    """
    Build the effective config for the given profile name.

    Args:
        env: Profile name; defaults to the APP_ENV environment variable

    Returns:
        A fresh AppConfig; callers may mutate it freely
    """
    if env is None:
        env = os.environ.get("APP_ENV", "development")
    normalized = env.strip().lower()
    base = CONFIG_MAP.get(normalized, _DEVELOPMENT)

    # A blank API_KEY must not switch auth off
    api_key = os.environ.get("API_KEY", "").strip() or base.api_key

    return replace(
        base,
        name=normalized,
        port=_parse_positive_int(os.environ.get("PORT"), base.port),
        api_key=api_key,
        session_ttl_ms=_parse_positive_int(os.environ.get("SESSION_TTL_MS"), base.session_ttl_ms),
    )


__all__ = ["AppConfig", "CONFIG_MAP", "DEFAULT_SESSION_TTL_MS", "load_config"]
