"""HTTP route definitions for the credential authentication service."""

from __future__ import annotations

import logging
from datetime import datetime

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, ConfigDict, Field

from ..domain.account import Principal
from ..domain.contracts import AuthAction, Credentials
from ..domain.errors import AuthError, AuthErrorKind
from ..domain.service import CredentialAuthenticator
from ..domain.session import (
    Session,
    SessionProjector,
    TokenEnricher,
    seed_session,
    seed_token,
)
from ..security.tokens import SessionTokenCodec

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1")

_STATUS_BY_KIND = {
    AuthErrorKind.validation: status.HTTP_400_BAD_REQUEST,
    AuthErrorKind.duplicate_email: status.HTTP_409_CONFLICT,
    AuthErrorKind.user_not_found: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.invalid_password: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.store_unavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CredentialsRequest(CamelModel):
    """Credentials body; shape is checked by the authenticator, not here."""

    email: str | None = None
    password: str | None = None
    full_name: str | None = Field(default=None, alias="fullName")
    mobile_phone: str | None = Field(default=None, alias="mobilePhone")

    def to_domain(self) -> Credentials:
        return Credentials(
            email=self.email or "",
            password=self.password or "",
            full_name=self.full_name,
            mobile_phone=self.mobile_phone,
        )


class PrincipalResponse(CamelModel):
    """Serialised representation of a `Principal`."""

    id: str
    email: str
    name: str
    mobile_phone: str | None = Field(default=None, alias="mobilePhone")
    is_admin: bool | None = Field(default=None, alias="isAdmin")

    @classmethod
    def from_domain(cls, principal: Principal) -> "PrincipalResponse":
        return cls(
            id=principal.id,
            email=principal.email,
            name=principal.name,
            mobile_phone=principal.mobile_phone,
            is_admin=principal.is_admin,
        )


class SessionUserResponse(CamelModel):
    id: str | None = None
    name: str | None = None
    email: str | None = None
    mobile_phone: str | None = Field(default=None, alias="mobilePhone")
    is_admin: bool | None = Field(default=None, alias="isAdmin")


class SessionResponse(CamelModel):
    """Session object exposed to callers."""

    user: SessionUserResponse
    expires: datetime | None = None

    @classmethod
    def from_domain(cls, session: Session) -> "SessionResponse":
        user = session.user
        return cls(
            user=SessionUserResponse(
                id=user.id,
                name=user.name,
                email=user.email,
                mobile_phone=user.mobile_phone,
                is_admin=user.is_admin,
            ),
            expires=session.expires,
        )


class SignInResponse(BaseModel):
    """Response returned after a successful signup or login."""

    principal: PrincipalResponse
    session: SessionResponse
    token: str


class SessionRequest(BaseModel):
    """JSON body carrying a previously issued token."""

    token: str


def get_authenticator(request: Request) -> CredentialAuthenticator:
    """Resolve the `CredentialAuthenticator` stored on the FastAPI application state."""
    authenticator: CredentialAuthenticator = request.app.state.authenticator
    return authenticator


def get_token_codec(request: Request) -> SessionTokenCodec:
    codec: SessionTokenCodec = request.app.state.token_codec
    return codec


def get_enricher(request: Request) -> TokenEnricher:
    return request.app.state.token_enricher


def get_projector(request: Request) -> SessionProjector:
    return request.app.state.session_projector


@router.post(
    "/auth/{action}",
    response_model=SignInResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
def sign_in(
    action: AuthAction,
    payload: CredentialsRequest,
    authenticator: CredentialAuthenticator = Depends(get_authenticator),
    codec: SessionTokenCodec = Depends(get_token_codec),
    enricher: TokenEnricher = Depends(get_enricher),
    projector: SessionProjector = Depends(get_projector),
) -> SignInResponse:
    """Authenticate the credentials for ``action`` and issue a session token."""
    try:
        principal = authenticator.authenticate(action, payload.to_domain())
    except AuthError as exc:
        raise _http_error_from_auth_error(exc) from exc

    claims = enricher.merge(seed_token(principal), principal)
    token, expires = codec.encode(claims)
    session = projector.project(seed_session(claims, expires), claims)
    return SignInResponse(
        principal=PrincipalResponse.from_domain(principal),
        session=SessionResponse.from_domain(session),
        token=token,
    )


@router.post(
    "/session",
    response_model=SessionResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
def read_session(
    payload: SessionRequest,
    codec: SessionTokenCodec = Depends(get_token_codec),
    enricher: TokenEnricher = Depends(get_enricher),
    projector: SessionProjector = Depends(get_projector),
) -> SessionResponse:
    """Project a previously issued token into the caller-facing session."""
    try:
        claims, expires = codec.decode(payload.token)
    except jwt.PyJWTError as exc:
        logger.info("session token rejected: %s", exc)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid token") from exc

    claims = enricher.merge(claims, None)
    session = projector.project(seed_session(claims, expires), claims)
    return SessionResponse.from_domain(session)


def _http_error_from_auth_error(exc: AuthError) -> HTTPException:
    status_code = _STATUS_BY_KIND.get(exc.kind, status.HTTP_400_BAD_REQUEST)
    if exc.kind is AuthErrorKind.store_unavailable:
        return HTTPException(status_code=status_code, detail={"message": "Service unavailable."})
    field_errors = exc.field_errors
    if field_errors is not None:
        return HTTPException(status_code=status_code, detail={"errors": field_errors})
    return HTTPException(status_code=status_code, detail={"message": exc.message})
