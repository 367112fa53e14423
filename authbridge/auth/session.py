from __future__ import annotations

import json
from dataclasses import asdict
from typing import Optional, Protocol

from fastapi import Request, Response
from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer

from authbridge.auth.config import BridgeConfig
from authbridge.auth.models import SessionUser

SESSION_SALT = "authbridge-local-session-v1"


def session_cookie_name(cfg: BridgeConfig) -> str:
    # `__Host-` requires Secure + Path=/ + no Domain; browsers may reject it on HTTP.
    return "__Host-bridge_session" if cfg.cookie_secure else "bridge_session"


class SessionStore(Protocol):
    """Local session record storage, independent of the upstream token."""

    def set_session(self, response: Response, user: SessionUser) -> None: ...

    def clear_session(self, response: Response) -> None: ...

    def get_session(self, request: Request) -> Optional[SessionUser]: ...


def _serializer(cfg: BridgeConfig) -> Optional[URLSafeTimedSerializer]:
    if not cfg.session_secret:
        return None
    return URLSafeTimedSerializer(secret_key=cfg.session_secret, salt=SESSION_SALT)


def encode_session(cfg: BridgeConfig, user: SessionUser) -> Optional[str]:
    s = _serializer(cfg)
    if s is None:
        return None
    raw = json.dumps({"user": asdict(user)}, separators=(",", ":"), sort_keys=True)
    return s.dumps(raw)


def decode_session(cfg: BridgeConfig, value: str | None) -> Optional[SessionUser]:
    if not value:
        return None
    s = _serializer(cfg)
    if s is None:
        return None
    try:
        raw = s.loads(value, max_age=cfg.session_ttl_seconds)
        data = json.loads(raw)
    except (BadSignature, BadTimeSignature, ValueError):
        return None
    if not isinstance(data, dict) or not isinstance(data.get("user"), dict):
        return None
    return SessionUser(authenticated=bool(data["user"].get("authenticated")))


def session_cookie_kwargs(cfg: BridgeConfig, value: str) -> dict:
    return {
        "key": session_cookie_name(cfg),
        "value": value,
        "max_age": cfg.session_ttl_seconds,
        "httponly": True,
        "secure": cfg.cookie_secure,
        "samesite": "lax",
        "path": "/",
    }


def clear_session_cookie_kwargs(cfg: BridgeConfig) -> dict:
    return {
        "key": session_cookie_name(cfg),
        "httponly": True,
        "secure": cfg.cookie_secure,
        "samesite": "lax",
        "path": "/",
    }


class SignedCookieSessionStore:
    """Keeps the session record in a signed cookie (no server-side storage)."""

    def __init__(self, cfg: BridgeConfig) -> None:
        self._cfg = cfg

    def set_session(self, response: Response, user: SessionUser) -> None:
        value = encode_session(self._cfg, user)
        if value is None:
            raise RuntimeError("Session signing is not configured (AUTH_SESSION_SECRET)")
        response.set_cookie(**session_cookie_kwargs(self._cfg, value))

    def clear_session(self, response: Response) -> None:
        response.delete_cookie(**clear_session_cookie_kwargs(self._cfg))

    def get_session(self, request: Request) -> Optional[SessionUser]:
        return decode_session(self._cfg, request.cookies.get(session_cookie_name(self._cfg)))


def get_session_store(cfg: BridgeConfig) -> SessionStore:
    """Seam for swapping the session backend later (e.g., Redis-backed)."""
    return SignedCookieSessionStore(cfg)
