"""Unit tests for authentication providers."""

from __future__ import annotations

from tests.fakes import FakeRequest
from webstore.core.auth import AnonymousAuthProvider, JWTAuthProvider, build_auth_provider
from webstore.core.config import Settings
from webstore.core.security import create_access_token, extract_token_from_header

SECRET = "test-secret"


def _bearer(claims: dict, secret: str = SECRET) -> FakeRequest:
    token = create_access_token(claims, secret)
    return FakeRequest(headers={"Authorization": f"Bearer {token}"})


def test_jwt_provider_prefers_username_claim() -> None:
    """The username claim names the user."""
    provider = JWTAuthProvider(SECRET)

    assert provider.current_user(_bearer({"sub": "42", "username": "jan"})) == "jan"


def test_jwt_provider_falls_back_to_subject() -> None:
    """Without a username the subject is used."""
    provider = JWTAuthProvider(SECRET)

    assert provider.current_user(_bearer({"sub": "42"})) == "42"


def test_jwt_provider_ignores_bad_tokens() -> None:
    """Tokens signed with another key yield no user."""
    provider = JWTAuthProvider(SECRET)

    assert provider.current_user(_bearer({"sub": "42"}, secret="other")) is None
    assert provider.current_user(FakeRequest()) is None


def test_extract_token_requires_bearer_scheme() -> None:
    """Only bearer authorization headers carry tokens."""
    assert extract_token_from_header("Bearer abc") == "abc"
    assert extract_token_from_header("Basic abc") is None
    assert extract_token_from_header(None) is None


def test_build_auth_provider_follows_settings() -> None:
    """JWT auth is enabled only when a secret is configured."""
    assert isinstance(build_auth_provider(Settings(_env_file=None)), AnonymousAuthProvider)
    assert isinstance(build_auth_provider(Settings(_env_file=None, jwt_secret=SECRET)), JWTAuthProvider)
