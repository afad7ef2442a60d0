"""
Unit tests for the session bootstrap and the pre-signup access check.

Run: pytest tests/unit/test_auth_service.py -v
"""

import sys
from pathlib import Path

# Add project root to Python path (for direct invocation)
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import httpx
import pytest

from api.auth import IdentityProfile
from services.auth_service import (
    AUTH_KEY,
    CHECK_DOMAIN_DENIED_MESSAGE,
    CHECK_DOMAIN_FAILED_MESSAGE,
    DOMAIN_NOT_AUTHORIZED_MESSAGE,
    NO_EMAIL_MESSAGE,
    SUPERADMIN_REQUIRED_MESSAGE,
    AuthState,
)


@pytest.fixture
def profile():
    return IdentityProfile(external_id="clerk_u1", email="ada@acme.com", first_name="Ada", last_name="Lovelace")


# ---------------------------------------------------------------------------
# load_or_register
# ---------------------------------------------------------------------------

class TestLoadOrRegister:

    def test_existing_superadmin_gets_access(self, fake_api, services, payloads, profile):
        fake_api.route("GET", "/api/auth/me", json={"user": payloads.user(role="superadmin")})

        state = services.auth.load_or_register(profile, require_superadmin=True)

        assert state.has_access
        assert state.is_superadmin
        assert fake_api.calls("POST") == []

    def test_missing_user_is_registered(self, fake_api, services, payloads, profile):
        fake_api.route("GET", "/api/auth/me", status=404, json={"error": "User not found"})
        fake_api.route("POST", "/api/auth/register", status=201,
                       json={"message": "User registered", "user": payloads.user(role="superadmin")})

        state = services.auth.load_or_register(profile, require_superadmin=True)

        body = fake_api.body(fake_api.calls("POST", "/api/auth/register")[0])
        assert body == {"email": "ada@acme.com", "firstName": "Ada", "lastName": "Lovelace"}
        assert state.db_user["email"] == "ada@acme.com"
        assert state.has_access

    def test_registration_invalidates_current_user(self, fake_api, services, payloads, profile):
        fake_api.route("GET", "/api/auth/me", status=404, json={"error": "User not found"})
        fake_api.route("POST", "/api/auth/register", status=201,
                       json={"message": "User registered", "user": payloads.user()})

        services.auth.load_or_register(profile)

        assert services.cache.get_state(AUTH_KEY).invalidated

    def test_profile_without_email_is_rejected(self, fake_api, services):
        fake_api.route("GET", "/api/auth/me", status=401, json={"error": "Unauthorized"})

        state = services.auth.load_or_register(IdentityProfile(external_id="clerk_x"))

        assert state.error == NO_EMAIL_MESSAGE
        assert fake_api.calls("POST") == []

    @pytest.mark.parametrize("body", [
        {"error": "Email domain not authorized"},
        {"error": "Forbidden", "code": "DOMAIN_NOT_AUTHORIZED"},
        {"error": "DOMAIN_NOT_AUTHORIZED"},
    ])
    def test_unauthorized_domain_gets_friendly_message(self, fake_api, services, profile, body):
        fake_api.route("GET", "/api/auth/me", status=404, json={"error": "User not found"})
        fake_api.route("POST", "/api/auth/register", status=403, json=body)

        state = services.auth.load_or_register(profile)

        assert state.error == DOMAIN_NOT_AUTHORIZED_MESSAGE
        assert not state.has_access

    def test_other_registration_errors_use_server_message(self, fake_api, services, profile):
        fake_api.route("GET", "/api/auth/me", status=404, json={"error": "User not found"})
        fake_api.route("POST", "/api/auth/register", status=500, json={"error": "Database unavailable"})

        state = services.auth.load_or_register(profile)

        assert state.error == "Database unavailable"

    def test_admin_is_blocked_when_superadmin_required(self, fake_api, services, payloads, profile):
        fake_api.route("GET", "/api/auth/me", json={"user": payloads.user(role="admin")})

        state = services.auth.load_or_register(profile, require_superadmin=True)

        assert state.role_error == SUPERADMIN_REQUIRED_MESSAGE
        assert state.error is None
        assert state.is_admin
        assert not state.has_access

    def test_admin_allowed_when_superadmin_not_required(self, fake_api, services, payloads, profile):
        fake_api.route("GET", "/api/auth/me", json={"user": payloads.user(role="admin")})

        state = services.auth.load_or_register(profile, require_superadmin=False)

        assert state.has_access

    def test_auth_state_without_user_has_no_role(self):
        state = AuthState()
        assert state.role is None
        assert not state.is_admin
        assert not state.has_access


# ---------------------------------------------------------------------------
# check_access
# ---------------------------------------------------------------------------

class TestCheckAccess:

    def test_allowed_domain(self, fake_api, services):
        fake_api.route("POST", "/api/auth/check-domain",
                       json={"allowed": True, "message": "Welcome", "companyName": "Acme"})

        result = services.auth.check_access("ada@acme.com")

        assert result.allowed
        assert result.company_name == "Acme"
        assert fake_api.body(fake_api.requests[0]) == {"email": "ada@acme.com"}

    def test_denial_message_is_shown_verbatim(self, fake_api, services):
        fake_api.route("POST", "/api/auth/check-domain", status=403,
                       json={"allowed": False, "message": "Acme has not enabled self-signup"})

        result = services.auth.check_access("ada@acme.com")

        assert not result.allowed
        assert result.message == "Acme has not enabled self-signup"

    def test_denial_without_message_uses_fallback(self, fake_api, services):
        fake_api.route("POST", "/api/auth/check-domain", json={"allowed": False})

        result = services.auth.check_access("ada@acme.com")

        assert result.message == CHECK_DOMAIN_DENIED_MESSAGE

    def test_network_failure_asks_to_retry(self, fake_api, services):
        fake_api.route("POST", "/api/auth/check-domain", raises=httpx.ConnectError("offline"))

        result = services.auth.check_access("ada@acme.com")

        assert not result.allowed
        assert result.message == CHECK_DOMAIN_FAILED_MESSAGE

    def test_malformed_email_never_reaches_server(self, fake_api, services):
        result = services.auth.check_access("not-an-email")

        assert not result.allowed
        assert fake_api.requests == []
