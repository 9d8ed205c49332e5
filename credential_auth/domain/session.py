"""Token enrichment and session projection applied after authentication."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from .account import Principal

Token = dict[str, Any]

ENRICHED_CLAIMS = ("id", "is_admin", "mobile_phone")


@dataclass(slots=True, frozen=True)
class SessionUser:
    id: str | None = None
    name: str | None = None
    email: str | None = None
    mobile_phone: str | None = None
    is_admin: bool | None = None


@dataclass(slots=True, frozen=True)
class Session:
    """Outward view of a signed-in user."""

    user: SessionUser = field(default_factory=SessionUser)
    expires: datetime | None = None


def seed_token(principal: Principal) -> Token:
    """Return the base claims every freshly issued token starts from."""
    return {"sub": principal.id, "name": principal.name, "email": principal.email}


def seed_session(token: Token, expires: datetime | None = None) -> Session:
    return Session(
        user=SessionUser(name=token.get("name"), email=token.get("email")),
        expires=expires,
    )


class TokenEnricher:
    """Copies principal claims into a token once, at sign-in.

    A token without claims is uninitialized; after a merge with a principal it
    is enriched. Later merges carry no principal and hand the token back
    untouched, which is how the claims persist for the session's lifetime.
    """

    def merge(self, token: Token, principal: Principal | None) -> Token:
        if principal is None:
            return token
        enriched = dict(token)
        enriched["id"] = principal.id
        enriched["is_admin"] = principal.is_admin
        enriched["mobile_phone"] = principal.mobile_phone
        return enriched


class SessionProjector:
    """Copies token claims onto the session's user."""

    def project(self, session: Session, token: Token | None) -> Session:
        if token is None:
            return session
        user = replace(
            session.user,
            id=token.get("id"),
            mobile_phone=token.get("mobile_phone"),
            is_admin=token.get("is_admin"),
        )
        return replace(session, user=user)
