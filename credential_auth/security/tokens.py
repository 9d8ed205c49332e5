"""Signing and verification of session tokens."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any

import jwt

RESERVED_CLAIMS = ("iss", "iat", "exp")


class SessionTokenCodec:
    """Encode session token claims as HS256 JWTs and decode them back.

    Parameters
    ----------
    secret:
        Signing secret; supplied by configuration at process start.
    issuer:
        Value written to and required in the ``iss`` claim.
    ttl_seconds:
        Lifetime of an issued token.
    """

    algorithm = "HS256"

    def __init__(self, secret: str, *, issuer: str, ttl_seconds: int) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self._issuer = issuer
        self._ttl_seconds = ttl_seconds

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def encode(self, claims: dict[str, Any]) -> tuple[str, datetime]:
        """Sign ``claims`` and return the token with its expiry time.

        Returns
        -------
        tuple[str, datetime]
            The encoded JWT string and the UTC instant it stops being valid.
        """
        now = int(time.time())
        expires_at = now + self._ttl_seconds
        payload: dict[str, Any] = {
            **claims,
            "iss": self._issuer,
            "iat": now,
            "exp": expires_at,
        }
        token = jwt.encode(payload, self._secret, algorithm=self.algorithm)
        return token, datetime.fromtimestamp(expires_at, tz=timezone.utc)

    def decode(self, token: str) -> tuple[dict[str, Any], datetime]:
        """Verify ``token`` and return its claims, minus the registered ones, with its expiry.

        Raises
        ------
        jwt.PyJWTError
            Propagated when the token is malformed, expired, or signed by
            another issuer or secret.
        """
        payload = jwt.decode(
            token,
            self._secret,
            algorithms=[self.algorithm],
            issuer=self._issuer,
            options={"require": list(RESERVED_CLAIMS)},
        )
        claims = {key: value for key, value in payload.items() if key not in RESERVED_CLAIMS}
        return claims, datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
