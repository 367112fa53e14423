from __future__ import annotations


class BridgeError(Exception):
    """An auth bridge failure that maps to an HTTP status for the caller."""

    default_status = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code if status_code is not None else self.default_status)

    def to_dict(self) -> dict:
        return {"statusCode": self.status_code, "message": self.message}


class ValidationError(BridgeError):
    """Malformed input, raised before any upstream call."""

    default_status = 400


class UpstreamAuthError(BridgeError):
    """Upstream answered with a non-success status; carries that status."""


class TransportError(BridgeError):
    """Upstream could not be reached (connection error, timeout)."""


class UnexpectedError(BridgeError):
    """Anything else; wrapped so the caller still gets a status code."""
