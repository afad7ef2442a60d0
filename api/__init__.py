"""
Admin API access layer.

Contains the authenticated HTTP client, its error types and the credential
providers it is constructed with. Payload schemas live in api.models.
"""

from api.client import ApiClient, ApiError, ApiTransportError, FileUpload
from api.auth import (
    IdentityProfile,
    SessionTokenProvider,
    TokenProvider,
    settings_token_provider,
    static_token_provider,
)

__all__ = [
    "ApiClient",
    "ApiError",
    "ApiTransportError",
    "FileUpload",
    "IdentityProfile",
    "SessionTokenProvider",
    "TokenProvider",
    "settings_token_provider",
    "static_token_provider",
]
