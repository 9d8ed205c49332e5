"""Credential authenticator orchestrating validation, hashing, and persistence."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import ValidationError as SchemaError

from .account import NewAccount, Principal
from .contracts import AuthAction, Credentials, LoginForm, SignupForm
from .errors import (
    DuplicateEmailError,
    InvalidPasswordError,
    UserNotFoundError,
    ValidationError,
)
from ..repository import CredentialStore, CredentialStores
from ..security.passwords import PasswordHasher

logger = logging.getLogger(__name__)

SIGNUP_INVALID_MESSAGE = "Invalid input. Please check the provided data."
LOGIN_INVALID_MESSAGE = "Invalid login credentials."


class CredentialAuthenticator:
    """Signup and login workflows over the regular and privileged partitions."""

    def __init__(self, hasher: PasswordHasher, stores: CredentialStores) -> None:
        """Store the hasher and partitions used by every authentication call."""
        self._hasher = hasher
        self._stores = stores

    def authenticate(self, action: AuthAction, credentials: Credentials) -> Principal:
        """Run ``action`` against ``credentials`` and return the resulting principal.

        Raises an ``AuthError`` subclass on failure; nothing is retried.
        """
        action = AuthAction(action)
        if action is AuthAction.signup:
            return self._signup(credentials)
        return self._login(credentials, admin=action is AuthAction.admin_login)

    def _signup(self, credentials: Credentials) -> Principal:
        try:
            form = SignupForm(
                full_name=credentials.full_name,
                email=credentials.email,
                mobile_phone=credentials.mobile_phone,
                password=credentials.password,
            )
        except SchemaError as exc:
            logger.warning("signup rejected: %d invalid field(s)", exc.error_count())
            raise ValidationError(SIGNUP_INVALID_MESSAGE) from exc

        store = self._stores.regular
        if store.find_by_email(form.email) is not None:
            logger.warning("signup rejected: email already registered")
            raise DuplicateEmailError()

        # a concurrent signup can still win the race; the store's insert
        # raises DuplicateEmailError in that case
        account_id = store.insert(
            NewAccount(
                email=form.email,
                full_name=form.full_name,
                mobile_phone=form.mobile_phone,
                password_hash=self._hasher.hash(form.password),
                created_at=datetime.now(timezone.utc),
            )
        )
        logger.info("account created id=%s", account_id)
        return Principal(id=account_id, email=form.email, name=form.full_name)

    def _login(self, credentials: Credentials, *, admin: bool) -> Principal:
        try:
            form = LoginForm(email=credentials.email, password=credentials.password)
        except SchemaError as exc:
            logger.warning("login rejected: %d invalid field(s)", exc.error_count())
            raise ValidationError(LOGIN_INVALID_MESSAGE) from exc

        store: CredentialStore = self._stores.privileged if admin else self._stores.regular
        account = store.find_by_email(form.email)
        if account is None:
            self._hasher.burn(form.password)
            logger.warning("login rejected: unknown email (admin=%s)", admin)
            raise UserNotFoundError()

        if not self._hasher.verify(form.password, account.password_hash):
            logger.warning("login rejected: bad password for id=%s (admin=%s)", account.id, admin)
            raise InvalidPasswordError()

        logger.info("login succeeded id=%s admin=%s", account.id, admin)
        return Principal(
            id=account.id,
            email=account.email,
            name=account.full_name,
            mobile_phone=account.mobile_phone,
            is_admin=admin,
        )
