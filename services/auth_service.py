"""
Session bootstrap and access checks.

The identity provider signs people in; this service maps the signed-in
identity to a CMS user record, registering it on first visit, and decides
whether that user may use the console.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ValidationError

from api.auth import IdentityProfile
from api.client import ApiClient, ApiError, ApiTransportError
from api.models.auth_schemas import (
    AuthMeResponse,
    CheckDomainInput,
    CheckDomainResponse,
    RegisterUserInput,
    RegisterUserResponse,
)
from api.models.common_schemas import dump_input
from api.models.user_schemas import UserRole
from config.settings import settings
from services.base_service import ResourceService
from services.query_cache import QueryCache, QueryState

logger = logging.getLogger(__name__)

AUTH_KEY = ("auth", "me")

NO_EMAIL_MESSAGE = "No email address found"
DOMAIN_NOT_AUTHORIZED_MESSAGE = "Your email domain is not authorized. Please contact us for access."
SUPERADMIN_REQUIRED_MESSAGE = (
    "You need Super Admin access to use the CMS. Contact an administrator to upgrade your role."
)
CHECK_DOMAIN_DENIED_MESSAGE = "This email domain is not authorized. Please contact us to get access."
CHECK_DOMAIN_FAILED_MESSAGE = "Unable to verify access. Please try again."


class AuthState(BaseModel):
    """
    Outcome of the session bootstrap.

    `error` blocks the whole console (unauthorized domain, registration
    failure). `role_error` is separate: the user exists but lacks the role the
    console requires.
    """
    db_user: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    role_error: Optional[str] = None

    @property
    def role(self) -> Optional[UserRole]:
        if not self.db_user:
            return None
        try:
            return UserRole(self.db_user.get("role"))
        except ValueError:
            return None

    @property
    def is_superadmin(self) -> bool:
        return self.role == UserRole.SUPERADMIN

    @property
    def is_admin(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.SUPERADMIN)

    @property
    def has_access(self) -> bool:
        return bool(self.db_user) and not self.error and not self.role_error


class AccessCheck(BaseModel):
    """Result of the pre-signup domain check."""
    allowed: bool
    message: Optional[str] = None
    company_name: Optional[str] = None


def is_domain_not_authorized(error: ApiError) -> bool:
    return (
        "not authorized" in error.message
        or "DOMAIN_NOT_AUTHORIZED" in error.message
        or error.code == "DOMAIN_NOT_AUTHORIZED"
    )


class AuthService(ResourceService):
    """
    Queries:
        current_user()

    Mutations:
        register(data), check_domain(email)

    Flows:
        load_or_register(profile), check_access(email)
    """

    def __init__(self, api: ApiClient, cache: QueryCache):
        super().__init__(api, cache)
        self.register = self._mutation(self._register, lambda variables: [AUTH_KEY])
        self.check_domain = self._mutation(self._check_domain, lambda variables: [])

    def current_user(self) -> QueryState:
        return self._query(
            AUTH_KEY,
            lambda: self.api.get("/api/auth/me", schema=AuthMeResponse),
            stale_time=settings.AUTH_STALE_SECONDS,
        )

    def _register(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dump_input(self._validated(RegisterUserInput, data))
        return self.api.post("/api/auth/register", payload, schema=RegisterUserResponse)

    def _check_domain(self, email: str) -> Dict[str, Any]:
        payload = dump_input(CheckDomainInput(email=email))
        return self.api.post("/api/auth/check-domain", payload, schema=CheckDomainResponse)

    # ============ FLOWS ============

    def load_or_register(self, profile: IdentityProfile,
                         require_superadmin: Optional[bool] = None) -> AuthState:
        """
        Resolve the CMS user for a signed-in identity.

        1. GET /api/auth/me; any failure there counts as "not registered yet"
        2. Otherwise POST /api/auth/register with the identity's email and names
        3. Apply the role requirement (superadmin when configured)
        """
        if require_superadmin is None:
            require_superadmin = settings.REQUIRE_SUPERADMIN

        me = self.current_user()
        user = me.data.get("user") if me.is_success and isinstance(me.data, dict) else None

        if not user:
            if not profile.email:
                return AuthState(error=NO_EMAIL_MESSAGE)

            try:
                registered = self.register.mutate(data={
                    "email": profile.email,
                    "first_name": profile.first_name,
                    "last_name": profile.last_name,
                })
            except ApiError as exc:
                logger.warning(f"Registration failed for {profile.email}: {exc.message}")
                if is_domain_not_authorized(exc):
                    return AuthState(error=DOMAIN_NOT_AUTHORIZED_MESSAGE)
                return AuthState(error=exc.message)
            except ValidationError as exc:
                logger.warning(f"Registration rejected locally for {profile.email}: {exc.error_count()} issues")
                return AuthState(error=f"Invalid email address: {profile.email}")

            user = registered.get("user") if isinstance(registered, dict) else None
            if not user:
                return AuthState()
            logger.info(f"Registered CMS user {profile.email}")

        state = AuthState(db_user=user)
        if require_superadmin and not state.is_superadmin:
            state = state.model_copy(update={"role_error": SUPERADMIN_REQUIRED_MESSAGE})
        return state

    def check_access(self, email: str) -> AccessCheck:
        """
        Pre-signup domain check for the public check-access page.

        Denials are reported with the server's message verbatim when it sends
        one. Transport failures and malformed emails report a retry message.
        """
        try:
            data = self.check_domain.mutate(email=email)
        except ApiTransportError:
            return AccessCheck(allowed=False, message=CHECK_DOMAIN_FAILED_MESSAGE)
        except ApiError as exc:
            data = exc.payload if isinstance(exc.payload, dict) else {}
        except ValidationError:
            return AccessCheck(allowed=False, message=CHECK_DOMAIN_DENIED_MESSAGE)

        if not isinstance(data, dict):
            return AccessCheck(allowed=False, message=CHECK_DOMAIN_FAILED_MESSAGE)

        if data.get("allowed"):
            return AccessCheck(allowed=True, message=data.get("message"), company_name=data.get("companyName"))
        return AccessCheck(allowed=False, message=data.get("message") or CHECK_DOMAIN_DENIED_MESSAGE)
