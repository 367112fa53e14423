from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

DEFAULT_API_BASE = "http://localhost:8000/api/v1"
DEFAULT_SESSION_TTL_SECONDS = 60 * 60 * 24 * 7  # matches the upstream cookie lifetime
DEFAULT_UPSTREAM_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class BridgeConfig:
    # Upstream authentication API
    api_base: str
    upstream_timeout_seconds: float

    # Runtime environment (development|production)
    app_env: str

    # Cookie/session configuration
    cookie_secure: bool
    session_secret: Optional[str]  # Required for signing the local session record
    session_ttl_seconds: int

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    def upstream_url(self, path: str) -> str:
        return f"{self.api_base}/{path.lstrip('/')}"


def _parse_timeout(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_UPSTREAM_TIMEOUT_SECONDS
    return min(max(value, 1.0), 120.0)


@lru_cache(maxsize=1)
def load_bridge_config() -> BridgeConfig:
    """
    Load bridge configuration from environment variables.

    Cookies are `Secure` only in production unless AUTH_COOKIE_SECURE says otherwise.
    """
    api_base = (os.getenv("AUTH_API_BASE", "") or "").strip().rstrip("/") or DEFAULT_API_BASE
    app_env = (os.getenv("APP_ENV", "") or "development").strip().lower() or "development"

    cookie_secure_env = (os.getenv("AUTH_COOKIE_SECURE", "") or "").strip().lower()
    if cookie_secure_env in ("1", "true", "yes", "on"):
        cookie_secure = True
    elif cookie_secure_env in ("0", "false", "no", "off"):
        cookie_secure = False
    else:
        cookie_secure = app_env == "production"

    ttl_raw = (os.getenv("AUTH_SESSION_TTL_SECONDS", "") or "").strip() or str(DEFAULT_SESSION_TTL_SECONDS)
    try:
        ttl = int(float(ttl_raw))
    except ValueError:
        ttl = DEFAULT_SESSION_TTL_SECONDS
    if ttl <= 60:
        ttl = 60

    timeout_raw = (os.getenv("AUTH_UPSTREAM_TIMEOUT_SECONDS", "") or "").strip()

    return BridgeConfig(
        api_base=api_base,
        upstream_timeout_seconds=_parse_timeout(timeout_raw) if timeout_raw else DEFAULT_UPSTREAM_TIMEOUT_SECONDS,
        app_env=app_env,
        cookie_secure=cookie_secure,
        session_secret=(os.getenv("AUTH_SESSION_SECRET", "") or "").strip() or None,
        session_ttl_seconds=ttl,
    )
