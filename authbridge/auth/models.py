from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Type, TypeVar

from pydantic import BaseModel, EmailStr, Field
from pydantic import ValidationError as PydanticValidationError

from authbridge.auth.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=8)


class SignUpStartRequest(BaseModel):
    email: EmailStr


class SignUpVerifyRequest(BaseModel):
    token: str
    otp: str = Field(..., min_length=6, max_length=6)


class SignUpResendRequest(BaseModel):
    token: str


class SignUpCompleteRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=20)
    password: str = Field(..., min_length=8)
    token: str


@dataclass(frozen=True)
class SessionUser:
    """Local session record; the upstream owns the real identity."""

    authenticated: bool = False


def parse_body(model: Type[ModelT], payload: Any) -> ModelT:
    """
    Validate a raw JSON body against `model`.

    Raises ValidationError naming the offending fields, so callers fail before any I/O.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        fields = sorted({".".join(str(p) for p in err.get("loc", ())) or "body" for err in e.errors()})
        raise ValidationError(f"Invalid request body: {', '.join(fields)}") from e
