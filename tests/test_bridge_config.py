"""
Tests for bridge configuration.

Verifies that:
- AUTH_API_BASE is normalized (no trailing slash)
- Cookies are Secure only in production unless overridden
- Upstream timeout defaults to 10s and is clamped to 1-120s
"""

from __future__ import annotations

import os
from unittest.mock import patch

from authbridge.auth.config import DEFAULT_API_BASE, load_bridge_config


def _load(env: dict):  # type: ignore[no-untyped-def]
    with patch.dict(os.environ, env, clear=True):
        load_bridge_config.cache_clear()
        return load_bridge_config()


def test_defaults() -> None:
    cfg = _load({})
    assert cfg.api_base == DEFAULT_API_BASE
    assert cfg.app_env == "development"
    assert cfg.is_production is False
    assert cfg.cookie_secure is False
    assert cfg.session_secret is None
    assert cfg.session_ttl_seconds == 60 * 60 * 24 * 7
    assert cfg.upstream_timeout_seconds == 10.0


def test_api_base_trailing_slash_is_stripped() -> None:
    cfg = _load({"AUTH_API_BASE": "https://auth.example.com/api/v1/"})
    assert cfg.api_base == "https://auth.example.com/api/v1"
    assert cfg.upstream_url("/auth/sign-in") == "https://auth.example.com/api/v1/auth/sign-in"


def test_production_enables_secure_cookies() -> None:
    cfg = _load({"APP_ENV": "Production"})
    assert cfg.is_production is True
    assert cfg.cookie_secure is True


def test_cookie_secure_override() -> None:
    assert _load({"APP_ENV": "production", "AUTH_COOKIE_SECURE": "0"}).cookie_secure is False
    assert _load({"APP_ENV": "development", "AUTH_COOKIE_SECURE": "yes"}).cookie_secure is True


def test_timeout_bounds() -> None:
    assert _load({"AUTH_UPSTREAM_TIMEOUT_SECONDS": "0.1"}).upstream_timeout_seconds == 1.0
    assert _load({"AUTH_UPSTREAM_TIMEOUT_SECONDS": "600"}).upstream_timeout_seconds == 120.0
    assert _load({"AUTH_UPSTREAM_TIMEOUT_SECONDS": "30"}).upstream_timeout_seconds == 30.0
    assert _load({"AUTH_UPSTREAM_TIMEOUT_SECONDS": "invalid"}).upstream_timeout_seconds == 10.0


def test_session_ttl_floor() -> None:
    assert _load({"AUTH_SESSION_TTL_SECONDS": "5"}).session_ttl_seconds == 60
    assert _load({"AUTH_SESSION_TTL_SECONDS": "3600"}).session_ttl_seconds == 3600
