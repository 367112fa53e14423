"""
Auth bridge HTTP server.

Backend-for-frontend endpoints that forward sign-in, sign-up and logout to the upstream
auth API and keep a local session cookie in sync with the upstream one.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict

from fastapi import Body, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from authbridge.auth import bridges
from authbridge.auth.config import load_bridge_config
from authbridge.auth.cookies import UPSTREAM_SESSION_COOKIE
from authbridge.auth.errors import BridgeError
from authbridge.auth.session import get_session_store

logger = logging.getLogger(__name__)

app = FastAPI(title="Auth bridge")


@app.exception_handler(BridgeError)
async def _bridge_error_handler(request: Request, exc: BridgeError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers={"Cache-Control": "no-store"})


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed JSON never reaches a bridge; report it like any other bad input.
    return JSONResponse(status_code=400, content={"statusCode": 400, "message": "Invalid request body"})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming HTTP requests."""
    start_time = time.time()
    logger.debug("%s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.debug("%s %s - %d (%.3fs)", request.method, request.url.path, response.status_code, process_time)
        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.exception("%s %s - ERROR after %.3fs: %s", request.method, request.url.path, process_time, str(e))
        raise


@app.get("/healthz")
def healthz() -> Dict[str, Any]:
    return {"ok": True}


@app.post("/api/auth/sign-in")
def auth_sign_in(response: Response, payload: Any = Body(None)) -> Dict[str, Any]:
    cfg = load_bridge_config()
    response.headers["Cache-Control"] = "no-store"
    return bridges.sign_in(cfg, payload, response, get_session_store(cfg))


@app.post("/api/auth/sign-up/start")
def auth_sign_up_start(payload: Any = Body(None)) -> Any:
    return bridges.sign_up_start(load_bridge_config(), payload)


@app.post("/api/auth/sign-up/verify-otp")
def auth_sign_up_verify(payload: Any = Body(None)) -> Any:
    return bridges.sign_up_verify(load_bridge_config(), payload)


@app.post("/api/auth/sign-up/resend-otp")
def auth_sign_up_resend(payload: Any = Body(None)) -> Any:
    return bridges.sign_up_resend(load_bridge_config(), payload)


@app.post("/api/auth/sign-up/complete")
def auth_sign_up_complete(payload: Any = Body(None)) -> Any:
    return bridges.sign_up_complete(load_bridge_config(), payload)


@app.post("/api/auth/logout")
def auth_logout(request: Request, response: Response) -> Dict[str, Any]:
    cfg = load_bridge_config()
    response.headers["Cache-Control"] = "no-store"
    token = request.cookies.get(UPSTREAM_SESSION_COOKIE)
    return bridges.logout(cfg, token, response, get_session_store(cfg))


@app.get("/api/auth/session")
def auth_session(request: Request, response: Response) -> Dict[str, Any]:
    """Report whether the caller holds a valid local session. Never calls upstream."""
    cfg = load_bridge_config()
    response.headers["Cache-Control"] = "no-store"
    user = get_session_store(cfg).get_session(request)
    return {"authenticated": bool(user and user.authenticated)}


def run(host: str = "0.0.0.0", port: int = 8080) -> None:
    import uvicorn

    # Configure logging for the application
    log_level = os.getenv("LOG_LEVEL", "info").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    # Map Python logging levels to uvicorn log levels
    uvicorn_log_level = (
        log_level.lower() if log_level.lower() in ["critical", "error", "warning", "info", "debug", "trace"] else "info"
    )

    cfg = load_bridge_config()
    logger.info(
        "Starting auth bridge on %s:%d (api_base=%s env=%s log_level=%s)",
        host,
        port,
        cfg.api_base,
        cfg.app_env,
        log_level,
    )
    uvicorn.run(app, host=host, port=port, log_level=uvicorn_log_level)
