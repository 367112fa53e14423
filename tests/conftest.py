"""
Pytest config.

Tests import the local `authbridge/` package from the repo root, whether or not the
project was installed, and run against a fake upstream (no network).
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import pytest
import requests
from requests.structures import CaseInsensitiveDict


def _ensure_repo_root_on_syspath() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


_ensure_repo_root_on_syspath()

API_BASE = "http://upstream.test/api/v1"
SESSION_SECRET = "test-secret-key-for-testing-purposes-only"


@pytest.fixture(autouse=True)
def _bridge_env(monkeypatch: pytest.MonkeyPatch):
    """
    Pin a development config for every test.

    `load_bridge_config` is cached; clear it around each test so env changes apply.
    """
    from authbridge.auth.config import load_bridge_config

    monkeypatch.setenv("AUTH_API_BASE", API_BASE)
    monkeypatch.setenv("AUTH_SESSION_SECRET", SESSION_SECRET)
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.delenv("AUTH_COOKIE_SECURE", raising=False)
    monkeypatch.delenv("AUTH_SESSION_TTL_SECONDS", raising=False)
    monkeypatch.delenv("AUTH_UPSTREAM_TIMEOUT_SECONDS", raising=False)
    load_bridge_config.cache_clear()
    yield
    load_bridge_config.cache_clear()


def upstream_response(
    status: int = 200,
    body: Any = None,
    *,
    text: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> requests.Response:
    """Build a real `requests.Response` as the upstream would return it."""
    r = requests.Response()
    r.status_code = status
    if text is not None:
        r._content = text.encode("utf-8")
    elif body is not None:
        r._content = json.dumps(body).encode("utf-8")
    else:
        r._content = b""
    r.encoding = "utf-8"
    r.headers = CaseInsensitiveDict(headers or {})
    r.url = API_BASE
    return r


def set_cookie_lines(resp) -> list[str]:  # type: ignore[no-untyped-def]
    """All `set-cookie` headers of a TestClient response."""
    return resp.headers.get_list("set-cookie")


def cookie_line(resp, name: str) -> Optional[str]:  # type: ignore[no-untyped-def]
    for line in set_cookie_lines(resp):
        if line.split("=", 1)[0] == name:
            return line
    return None
