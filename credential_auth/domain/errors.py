"""Tagged error types raised by the authentication workflows."""

from __future__ import annotations

from enum import Enum


class AuthErrorKind(str, Enum):
    validation = "validation"
    duplicate_email = "duplicate_email"
    user_not_found = "user_not_found"
    invalid_password = "invalid_password"
    store_unavailable = "store_unavailable"


class AuthError(Exception):
    """Base class for authentication failures.

    ``field`` names the credential the failure is about. It is set for domain
    failures (duplicate email, unknown user, wrong password) and ``None`` for
    malformed input and infrastructure failures, so callers can tell a
    field-level error from a form-level one without parsing messages.
    """

    kind: AuthErrorKind
    default_message: str = "Authentication failed."
    default_field: str | None = None

    def __init__(self, message: str | None = None, *, field: str | None = None) -> None:
        self.message = message or self.default_message
        self.field = field if field is not None else self.default_field
        super().__init__(self.message)

    @property
    def field_errors(self) -> dict[str, str] | None:
        """Return ``{field: message}`` for field-level failures, else ``None``."""
        if self.field is None:
            return None
        return {self.field: self.message}


class ValidationError(AuthError):
    kind = AuthErrorKind.validation
    default_message = "Invalid input. Please check the provided data."


class DuplicateEmailError(AuthError):
    kind = AuthErrorKind.duplicate_email
    default_message = "Email already exists."
    default_field = "email"


class UserNotFoundError(AuthError):
    kind = AuthErrorKind.user_not_found
    default_message = "User not found."
    default_field = "email"


class InvalidPasswordError(AuthError):
    kind = AuthErrorKind.invalid_password
    default_message = "Invalid password."
    default_field = "password"


class StoreUnavailableError(AuthError):
    kind = AuthErrorKind.store_unavailable
    default_message = "Credential store unavailable."
