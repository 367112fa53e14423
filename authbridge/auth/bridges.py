"""
Auth bridges: adapt client requests into upstream auth API calls and back.

Each bridge validates its body before any I/O, makes at most one upstream call and
never retries. Only logout is allowed to swallow upstream failures.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from fastapi import Response
from pydantic import BaseModel

from authbridge.auth.config import BridgeConfig
from authbridge.auth.cookies import (
    UPSTREAM_SESSION_COOKIE,
    clear_upstream_cookie_kwargs,
    extract_upstream_session,
    upstream_cookie_kwargs,
)
from authbridge.auth.errors import BridgeError, TransportError, UnexpectedError, UpstreamAuthError
from authbridge.auth.models import (
    SessionUser,
    SignInRequest,
    SignUpCompleteRequest,
    SignUpResendRequest,
    SignUpStartRequest,
    SignUpVerifyRequest,
    parse_body,
)
from authbridge.auth.session import SessionStore
from authbridge.auth.upstream import best_effort, post_json, set_cookie_headers

logger = logging.getLogger(__name__)


def sign_in(cfg: BridgeConfig, payload: Any, response: Response, store: SessionStore) -> Dict[str, Any]:
    """
    Sign in upstream, re-issue the upstream session cookie locally and open a local session.
    """
    body = parse_body(SignInRequest, payload)
    if not cfg.session_secret:
        raise UnexpectedError("Session signing is not configured (AUTH_SESSION_SECRET)")

    try:
        res = post_json(cfg, "/auth/sign-in", {"email": body.email, "password": body.password})
    except requests.RequestException as e:
        logger.warning("Sign in failed: upstream unreachable: %s", str(e))
        raise TransportError(str(e) or "Failed to sign in") from e

    if not res.ok:
        error_text = res.text
        logger.warning("Sign in failed: %d %s", res.status_code, error_text)
        raise UpstreamAuthError(error_text or "Failed to sign in", status_code=res.status_code)

    token = extract_upstream_session(set_cookie_headers(res))
    if token is not None:
        response.set_cookie(**upstream_cookie_kwargs(cfg, token))
    else:
        logger.warning("Sign in succeeded but upstream sent no %s cookie", UPSTREAM_SESSION_COOKIE)

    store.set_session(response, SessionUser(authenticated=True))
    return {"success": True}


def _json_or_empty(res: requests.Response) -> Any:
    try:
        return res.json()
    except ValueError:
        return {}


def _error_message(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    message = data.get("message")
    # Upstream error envelope: {"status": 409, "error": {"message": ..., "code": ...}}
    if not message and isinstance(data.get("error"), dict):
        message = data["error"].get("message")
    return str(message) if message else None


def _relay(cfg: BridgeConfig, path: str, body: BaseModel, default_message: str) -> Any:
    """POST `body` upstream and hand back the upstream JSON body unchanged."""
    try:
        try:
            res = post_json(cfg, path, body.model_dump(mode="json"))
        except requests.RequestException as e:
            raise TransportError(str(e) or default_message) from e

        logger.info("Upstream %s responded %d", path, res.status_code)
        if not res.ok:
            error_data = _json_or_empty(res)
            message = _error_message(error_data) or default_message
            logger.warning("Upstream %s failed: %d %s", path, res.status_code, message)
            raise UpstreamAuthError(message, status_code=res.status_code)

        return res.json()
    except BridgeError:
        raise
    except Exception as e:
        logger.exception("Unexpected error relaying %s", path)
        raise UnexpectedError(str(e) or default_message) from e


def sign_up_start(cfg: BridgeConfig, payload: Any) -> Any:
    body = parse_body(SignUpStartRequest, payload)
    return _relay(cfg, "/sign-up/start", body, "Failed to start sign up")


def sign_up_verify(cfg: BridgeConfig, payload: Any) -> Any:
    body = parse_body(SignUpVerifyRequest, payload)
    return _relay(cfg, "/sign-up/verify-otp", body, "Failed to verify OTP")


def sign_up_resend(cfg: BridgeConfig, payload: Any) -> Any:
    body = parse_body(SignUpResendRequest, payload)
    return _relay(cfg, "/sign-up/resend-otp", body, "Failed to resend OTP")


def sign_up_complete(cfg: BridgeConfig, payload: Any) -> Any:
    body = parse_body(SignUpCompleteRequest, payload)
    return _relay(cfg, "/sign-up/complete", body, "Failed to complete sign up")


def _notify_upstream_logout(cfg: BridgeConfig, token: str) -> None:
    res = post_json(cfg, "/auth/logout", headers={"Cookie": f"{UPSTREAM_SESSION_COOKIE}={token}"})
    if not res.ok:
        logger.warning("Upstream logout responded %d (ignored)", res.status_code)


def logout(cfg: BridgeConfig, token: Optional[str], response: Response, store: SessionStore) -> Dict[str, Any]:
    """
    Log out locally, telling upstream when we hold its cookie.

    Local cleanup always happens; upstream being down must not keep a user signed in.
    """
    if token:
        best_effort("Upstream logout", _notify_upstream_logout, cfg, token)
    else:
        logger.debug("No %s cookie; skipping upstream logout", UPSTREAM_SESSION_COOKIE)

    response.delete_cookie(**clear_upstream_cookie_kwargs(cfg))
    store.clear_session(response)
    return {"success": True}
