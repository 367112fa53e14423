"""Outbound calls to the upstream authentication API."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

import requests

from authbridge.auth.config import BridgeConfig

logger = logging.getLogger(__name__)


def post_json(
    cfg: BridgeConfig,
    path: str,
    payload: Optional[Dict[str, Any]] = None,
    **kwargs: Any,
) -> requests.Response:
    """
    POST to `<api_base>/<path>` with an explicit timeout.

    Non-success responses are returned as-is; callers map them. Transport failures
    (connection errors, timeouts) raise `requests.RequestException`.
    """
    headers = kwargs.pop("headers", {})
    if payload is not None:
        headers.setdefault("Content-Type", "application/json")
        kwargs["json"] = payload

    kwargs["headers"] = headers
    kwargs.setdefault("timeout", cfg.upstream_timeout_seconds)

    url = cfg.upstream_url(path)
    logger.debug("Calling upstream POST %s", url)
    response = requests.request("POST", url, **kwargs)
    logger.debug("Upstream POST %s -> %d", url, response.status_code)
    return response


def set_cookie_headers(response: requests.Response) -> List[str]:
    """
    Return every `set-cookie` header of an upstream response.

    urllib3 keeps repeated headers apart (`raw.headers.getlist`); `response.headers`
    only offers the comma-joined form. Prefer the former when it is available.
    """
    raw_headers = getattr(getattr(response, "raw", None), "headers", None)
    getlist = getattr(raw_headers, "getlist", None)
    if callable(getlist):
        values = [v for v in getlist("set-cookie") if isinstance(v, str)]
        if values:
            return values
    joined = response.headers.get("set-cookie")
    return [joined] if joined else []


def best_effort(description: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> bool:
    """
    Run a side call whose failure must never reach the caller.

    Returns True when `fn` completed without raising. Failures are logged only.
    """
    try:
        fn(*args, **kwargs)
        return True
    except Exception as e:
        logger.warning("%s failed (ignored): %s", description, str(e))
        return False
