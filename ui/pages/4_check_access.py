"""
Public access check.

Before signing up, a visitor confirms their email domain belongs to a
company. Allowed emails are remembered for the sign-up form; denials show
the server's message as-is.
"""

import sys
from pathlib import Path

# Add parent directory to path
root_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(root_dir))

import streamlit as st

from api.auth import IdentityProfile
from config.settings import settings
from ui.state import enter_page, get_services

# Page configuration
st.set_page_config(
    page_title="Check Access",
    page_icon="🔑",
    layout="centered"
)


def show_signup(email):
    """Sign-up step, pre-filled with the checked email."""
    st.success(f"**{email}** is authorized. Continue to sign up.")
    st.session_state.profile = IdentityProfile(email=email)
    st.markdown("Create your account with the identity provider, then sign in from the home page.")
    if st.button("Check a different email"):
        st.session_state.pop("signup_email", None)
        st.rerun()


def main():
    enter_page("check_access")
    st.title("🔑 Check Access")
    st.markdown("Enter your work email to see whether your organization uses the CMS.")

    signup_email = st.session_state.get("signup_email")
    if signup_email:
        show_signup(signup_email)
        return

    services = get_services()
    with st.form("check_access_form"):
        email = st.text_input("Work email", placeholder="you@company.com")
        submitted = st.form_submit_button("Check Access", type="primary",
                                          disabled=services.auth.check_domain.is_pending)

    if submitted and email.strip():
        with st.spinner("Checking..."):
            result = services.auth.check_access(email.strip())
        if result.allowed:
            st.session_state.signup_email = email.strip()
            st.rerun()
        else:
            st.error(result.message)
            st.caption(f"Questions? Contact {settings.SUPPORT_EMAIL}.")


if __name__ == "__main__":
    main()
