"""Domain-level request contracts shared by multiple layers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator

PASSWORD_MIN_LENGTH = 6
# bcrypt only reads the first 72 bytes of its input
PASSWORD_MAX_BYTES = 72


class AuthAction(str, Enum):
    signup = "signup"
    login = "login"
    admin_login = "adminLogin"


@dataclass(slots=True)
class Credentials:
    """Raw credentials as submitted; nothing here has been validated yet."""

    email: str
    password: str
    full_name: str | None = None
    mobile_phone: str | None = None


def _check_password_policy(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"password must not exceed {PASSWORD_MAX_BYTES} bytes")
    if not any(ch.isalpha() for ch in value):
        raise ValueError("password must contain a letter")
    if not any(ch.isdigit() for ch in value):
        raise ValueError("password must contain a digit")
    return value


class SignupForm(BaseModel):
    """Validated signup input."""

    full_name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
    email: EmailStr
    mobile_phone: Annotated[
        str,
        StringConstraints(
            strip_whitespace=True,
            min_length=3,
            max_length=20,
            pattern=r"^[0-9+() -]*[0-9][0-9+() -]*$",
        ),
    ]
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_BYTES)

    @field_validator("password")
    @classmethod
    def check_password_policy(cls, value: str) -> str:
        return _check_password_policy(value)


class LoginForm(BaseModel):
    """Validated login input; only the shape is checked, not the policy."""

    email: EmailStr
    password: str = Field(..., min_length=1)
