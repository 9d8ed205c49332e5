from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class NewAccount:
    """Account fields supplied at signup, before the store assigns an id."""

    email: str
    full_name: str
    mobile_phone: str
    password_hash: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class Account:
    """Persisted credential record for a single partition."""

    id: str
    email: str
    full_name: str
    mobile_phone: str
    password_hash: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class Principal:
    """Authenticated identity handed to the session layer.

    ``is_admin`` stays ``None`` for principals minted by signup, which never
    make an admin claim either way.
    """

    id: str
    email: str
    name: str
    mobile_phone: str | None = None
    is_admin: bool | None = None
