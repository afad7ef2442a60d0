"""
Per-session wiring for the Streamlit UI.

Each browser session gets its own token provider, ApiClient, QueryCache and
Services bundle, kept in st.session_state so they survive reruns. Nothing is
shared across sessions: the cache holds data fetched with one user's token.
"""

from typing import Any, Optional

import streamlit as st
from pydantic import ValidationError

from api.auth import IdentityProfile, SessionTokenProvider
from api.client import ApiClient, ApiError
from config.settings import settings
from services import Mutation, MutationInProgress, QueryCache, Services
from services.auth_service import AuthState


def get_token_provider() -> SessionTokenProvider:
    if "token_provider" not in st.session_state:
        st.session_state.token_provider = SessionTokenProvider(settings.API_TOKEN)
    return st.session_state.token_provider


def get_services() -> Services:
    """Create (once per session) and return the Services bundle."""
    if "services" not in st.session_state:
        client = ApiClient.from_settings(get_token_provider())
        st.session_state.services = Services(client, QueryCache())
    return st.session_state.services


def get_profile() -> IdentityProfile:
    if "profile" not in st.session_state:
        st.session_state.profile = IdentityProfile()
    return st.session_state.profile


def get_auth_state() -> Optional[AuthState]:
    return st.session_state.get("auth_state")


def sign_in(token: str, profile: IdentityProfile) -> AuthState:
    """Store the identity's token and resolve its CMS user."""
    get_token_provider().set_token(token)
    st.session_state.profile = profile

    services = get_services()
    services.cache.clear()
    auth_state = services.auth.load_or_register(profile)
    st.session_state.auth_state = auth_state
    return auth_state


def sign_out() -> None:
    get_token_provider().clear()
    get_services().cache.clear()
    close_question_editor()
    for key in ("auth_state", "profile"):
        st.session_state.pop(key, None)


# ============ VIEW LIFETIME ============

QUESTION_EDITOR_KEY = "question_editor"


def close_question_editor() -> None:
    """Discard the open video's question editor (drafts, focus, errors)."""
    editor = st.session_state.pop(QUESTION_EDITOR_KEY, None)
    if editor is not None:
        editor.close()


def enter_page(name: str) -> None:
    """
    Record the page being rendered.

    Switching pages unmounts whatever view was open, so page-local editors
    do not survive a visit elsewhere.
    """
    if st.session_state.get("current_page") != name:
        close_question_editor()
    st.session_state.current_page = name


def show_api_error(error: Exception, prefix: str = "") -> None:
    """Render a failed action inline, annotating fields when details exist."""
    if isinstance(error, ValidationError):
        st.error(f"{prefix}Please fix the highlighted fields.")
        for issue in error.errors(include_url=False):
            field = ".".join(str(part) for part in issue["loc"])
            st.caption(f"• **{field}**: {issue['msg']}")
        return

    if isinstance(error, ApiError):
        st.error(f"{prefix}{error.message}")
        for field, detail in error.field_errors().items():
            st.caption(f"• **{field}**: {detail}")
        return

    st.error(f"{prefix}{error}")


def require_access() -> AuthState:
    """
    Gate for every page except check-access.

    Stops the script with a dedicated screen when the session is signed out,
    the domain is not authorized or the role is insufficient.
    """
    auth_state = get_auth_state()
    if auth_state is None:
        st.warning("Please sign in from the home page.")
        st.stop()

    if auth_state.error or not auth_state.db_user:
        st.title("Access Denied")
        st.error(auth_state.error or "Unable to verify your account.")
        st.markdown(f"Need access? Contact [{settings.SUPPORT_EMAIL}](mailto:{settings.SUPPORT_EMAIL}).")
        st.stop()

    if auth_state.role_error:
        st.title("Insufficient Permissions")
        st.warning(auth_state.role_error)
        st.markdown(f"Signed in as **{auth_state.db_user.get('email', '')}**")
        st.stop()

    return auth_state


def run_action(mutation: Mutation, success_message: Optional[str] = None, **variables) -> Any:
    """
    Run a mutation from a button or form handler.

    Returns the mutation's result, or None after rendering the failure inline.
    """
    try:
        result = mutation.mutate(**variables)
    except MutationInProgress:
        st.info("Still working on the previous request...")
        return None
    except (ApiError, ValidationError) as exc:
        show_api_error(exc)
        return None

    if success_message:
        st.toast(success_message)
    return result
