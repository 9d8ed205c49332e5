"""Tests for token enrichment, session projection, and the token codec."""

from __future__ import annotations

import time
from datetime import datetime, timezone

import jwt
import pytest

from credential_auth.domain.account import Principal
from credential_auth.domain.session import (
    Session,
    SessionProjector,
    SessionUser,
    TokenEnricher,
    seed_session,
    seed_token,
)
from credential_auth.security.tokens import SessionTokenCodec

SECRET = "test-secret-with-enough-bytes-for-hs256"


@pytest.fixture()
def codec() -> SessionTokenCodec:
    return SessionTokenCodec(SECRET, issuer="credential-auth.test", ttl_seconds=60)


def test_merge_copies_principal_claims():
    principal = Principal(id="u1", email="a@x.com", name="A B", mobile_phone="123", is_admin=True)
    token = seed_token(principal)

    enriched = TokenEnricher().merge(token, principal)

    assert enriched == {
        "sub": "u1",
        "name": "A B",
        "email": "a@x.com",
        "id": "u1",
        "is_admin": True,
        "mobile_phone": "123",
    }
    assert "id" not in token


def test_merge_without_principal_is_identity():
    principal = Principal(id="u1", email="a@x.com", name="A B", mobile_phone="123", is_admin=False)
    enricher = TokenEnricher()
    enriched = enricher.merge(seed_token(principal), principal)
    snapshot = dict(enriched)

    again = enricher.merge(enriched, None)

    assert again is enriched
    assert again == snapshot


def test_merge_of_signup_principal_keeps_absent_claims_absent():
    principal = Principal(id="u2", email="b@x.com", name="B C")

    enriched = TokenEnricher().merge({}, principal)

    assert enriched["is_admin"] is None
    assert enriched["mobile_phone"] is None


def test_project_copies_token_fields():
    token = {"id": "u1", "mobile_phone": "123", "is_admin": False, "name": "A B"}
    session = Session(user=SessionUser(name="A B", email="a@x.com"))

    projected = SessionProjector().project(session, token)

    assert projected.user.id == token["id"]
    assert projected.user.mobile_phone == token["mobile_phone"]
    assert projected.user.is_admin is token["is_admin"]
    assert projected.user.email == "a@x.com"
    assert session.user.id is None


def test_project_propagates_missing_fields_as_none():
    session = Session(user=SessionUser(id="stale", is_admin=True))

    projected = SessionProjector().project(session, {})

    assert projected.user == SessionUser()


def test_project_without_token_returns_session():
    session = Session(user=SessionUser(id="u1"))
    assert SessionProjector().project(session, None) is session


def test_codec_round_trips_claims(codec):
    principal = Principal(id="u1", email="a@x.com", name="A B", mobile_phone="123", is_admin=False)
    claims = TokenEnricher().merge(seed_token(principal), principal)

    token, expires = codec.encode(claims)
    decoded, decoded_expires = codec.decode(token)

    assert decoded == claims
    assert decoded_expires == expires
    assert expires > datetime.now(timezone.utc)

    session = SessionProjector().project(seed_session(decoded, decoded_expires), decoded)
    assert session.user.id == "u1"
    assert session.user.name == "A B"
    assert session.expires == expires


def test_codec_rejects_foreign_secret(codec):
    token, _ = codec.encode({"id": "u1"})
    other = SessionTokenCodec(SECRET + "-other", issuer="credential-auth.test", ttl_seconds=60)

    with pytest.raises(jwt.InvalidSignatureError):
        other.decode(token)


def test_codec_rejects_foreign_issuer(codec):
    token = jwt.encode(
        {"id": "u1", "iss": "someone-else", "iat": int(time.time()), "exp": int(time.time()) + 60},
        SECRET,
        algorithm="HS256",
    )

    with pytest.raises(jwt.InvalidIssuerError):
        codec.decode(token)


def test_codec_rejects_expired_token():
    expired = SessionTokenCodec(SECRET, issuer="credential-auth.test", ttl_seconds=-10)
    token, _ = expired.encode({"id": "u1"})

    with pytest.raises(jwt.ExpiredSignatureError):
        expired.decode(token)


def test_codec_requires_secret():
    with pytest.raises(ValueError):
        SessionTokenCodec("", issuer="x", ttl_seconds=60)
