from __future__ import annotations

from typing import Iterable, List, Optional, Union

from authbridge.auth.config import BridgeConfig

UPSTREAM_SESSION_COOKIE = "x-authenticated"


def split_set_cookie(values: Union[str, Iterable[str], None]) -> List[str]:
    """
    Flatten `set-cookie` header value(s) into individual cookie strings.

    Accepts the comma-joined single header as well as a list of headers. `Expires=`
    dates also contain commas; the fragments they produce never start with a cookie
    name we look for, so they are harmless.
    """
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    out: List[str] = []
    for value in values:
        for segment in (value or "").split(","):
            segment = segment.strip()
            if segment:
                out.append(segment)
    return out


def extract_cookie(values: Union[str, Iterable[str], None], name: str) -> Optional[str]:
    """Return the value of cookie `name` from `set-cookie` header(s), attributes dropped."""
    found: Optional[str] = None
    for segment in split_set_cookie(values):
        name_value = segment.split(";", 1)[0]
        key, sep, value = name_value.partition("=")
        if not sep or key.strip() != name:
            continue
        # Last one wins, like a browser applying the headers in order.
        found = value.strip()
    return found


def extract_upstream_session(values: Union[str, Iterable[str], None]) -> Optional[str]:
    return extract_cookie(values, UPSTREAM_SESSION_COOKIE)


def upstream_cookie_kwargs(cfg: BridgeConfig, value: str) -> dict:
    return {
        "key": UPSTREAM_SESSION_COOKIE,
        "value": value,
        "httponly": True,
        "secure": cfg.cookie_secure,
        "samesite": "lax",
        "path": "/",
    }


def clear_upstream_cookie_kwargs(cfg: BridgeConfig) -> dict:
    return {
        "key": UPSTREAM_SESSION_COOKIE,
        "httponly": True,
        "secure": cfg.cookie_secure,
        "samesite": "lax",
        "path": "/",
    }
