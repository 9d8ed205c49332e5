from __future__ import annotations

import os

import pytest

from credential_auth.config import Settings, get_settings


@pytest.mark.skipif("AUTH_SECRET" in os.environ, reason="secret overridden by environment")
def test_default_token_secret():
    assert Settings().token_secret == "dev-secret-change-me-before-deploying"
    # HS256 keys shorter than the digest size draw warnings from PyJWT
    assert len(get_settings().token_secret.encode("utf-8")) >= 32


def test_settings_are_cached():
    assert get_settings() is get_settings()
