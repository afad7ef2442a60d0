"""
Credential providers for the admin API client.

The identity provider owns sign-in, session refresh and token issuance. The
client only ever asks a provider for the current bearer token right before
each request, so freshness is entirely the provider's concern.
"""

from typing import Callable, Optional
from pydantic import BaseModel

from config.settings import settings

# Zero-argument callable returning the current bearer token, or None when signed out
TokenProvider = Callable[[], Optional[str]]


class IdentityProfile(BaseModel):
    """Profile of the signed-in identity, as reported by the identity provider."""
    external_id: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


def static_token_provider(token: Optional[str]) -> TokenProvider:
    """Provider that always returns the same token (CLI, tests)."""
    def get_token() -> Optional[str]:
        return token or None
    return get_token


def settings_token_provider() -> TokenProvider:
    """Provider backed by API_TOKEN, read at call time so a reloaded .env is honoured."""
    def get_token() -> Optional[str]:
        return settings.API_TOKEN or None
    return get_token


class SessionTokenProvider:
    """
    Mutable provider for an interactive session.

    The Streamlit sidebar stores whatever token the identity provider handed
    out; signing out clears it.

    Usage:
        provider = SessionTokenProvider()
        client = ApiClient(settings.API_URL, provider)
        provider.set_token(token_from_identity_provider)
    """

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def set_token(self, token: Optional[str]) -> None:
        self._token = token.strip() if token else None

    def clear(self) -> None:
        self._token = None

    @property
    def is_signed_in(self) -> bool:
        return bool(self._token)

    def __call__(self) -> Optional[str]:
        return self._token or None
