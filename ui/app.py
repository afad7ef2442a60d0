"""
Streamlit admin console for the training video CMS.

Home page: sign-in, session bootstrap and the statistics dashboard.
Companies, users, videos and the public access check live under ui/pages/.
"""

import sys
from pathlib import Path

# Add parent directory to path so we can import from the root
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

import streamlit as st

from api.auth import IdentityProfile
from api.models.stats_schemas import StatsPeriod
from ui.state import enter_page, get_auth_state, get_profile, get_services, require_access, sign_in, sign_out
from utils.display import user_display_name
from utils.logging_config import configure_logging

configure_logging()

# Page configuration
st.set_page_config(
    page_title="Video CMS",
    page_icon="🎬",
    layout="wide"
)

PERIOD_LABELS = {
    StatsPeriod.LAST_7_DAYS: "Last 7 days",
    StatsPeriod.LAST_30_DAYS: "Last 30 days",
    StatsPeriod.LAST_90_DAYS: "Last 90 days",
}


def render_sign_in():
    """Sidebar form taking the identity provider's token and profile."""
    st.sidebar.subheader("Sign in")
    profile = get_profile()
    with st.sidebar.form("sign_in_form"):
        token = st.text_input("Session token", type="password",
                              help="Bearer token issued by the identity provider")
        email = st.text_input("Email", value=profile.email or "")
        col1, col2 = st.columns(2)
        with col1:
            first_name = st.text_input("First name", value=profile.first_name or "")
        with col2:
            last_name = st.text_input("Last name", value=profile.last_name or "")
        submitted = st.form_submit_button("Sign in", type="primary")

    if submitted:
        with st.spinner("Loading your account..."):
            sign_in(token, IdentityProfile(
                email=email.strip() or None,
                first_name=first_name.strip() or None,
                last_name=last_name.strip() or None,
            ))
        st.rerun()


def render_account(auth_state):
    user = auth_state.db_user or {}
    st.sidebar.markdown(f"**{user_display_name(user)}**")
    st.sidebar.caption(f"{user.get('email', '')} · {user.get('role', '')}")
    if st.sidebar.button("Sign out"):
        sign_out()
        st.rerun()


def render_dashboard():
    services = get_services()

    st.title("Dashboard")

    period = st.selectbox(
        "Period",
        options=list(PERIOD_LABELS.keys()),
        format_func=lambda value: PERIOD_LABELS[value],
        index=1,
    )

    state = services.stats.stats(period)
    if state.is_loading:
        st.info("Loading statistics...")
        return
    if state.is_error and not state.data:
        st.error(f"Failed to load statistics: {state.error}")
        return

    stats = state.data or {}
    totals = stats.get("totals", {})

    cols = st.columns(5)
    for col, (label, key) in zip(cols, [
        ("Users", "users"),
        ("Companies", "companies"),
        ("Videos", "videos"),
        ("Questions", "questions"),
        ("Answers", "answers"),
    ]):
        with col:
            st.metric(label, totals.get(key, 0))

    st.markdown("---")

    roles = stats.get("roleBreakdown", {})
    st.subheader("Users by role")
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Users", roles.get("user", 0))
    with col2:
        st.metric("Admins", roles.get("admin", 0))
    with col3:
        st.metric("Super Admins", roles.get("superadmin", 0))

    st.subheader("Growth")
    growth = stats.get("growth", {})
    for key in ("users", "companies", "videos", "questions"):
        series = growth.get(key)
        if not series:
            continue
        with st.expander(f"{series.get('label', key.title())}: {series.get('total', 0)} new"):
            points = series.get("data") or []
            if points:
                st.line_chart(points, x="date", y="count")
            else:
                st.caption("No activity in this period.")


def main():
    """Main Streamlit app."""
    enter_page("home")
    st.sidebar.title("🎬 Video CMS")
    st.sidebar.markdown("---")

    auth_state = get_auth_state()
    if auth_state is None:
        render_sign_in()
        st.title("Video CMS Admin")
        st.markdown("""
        Sign in with your identity provider token to manage companies, users,
        videos and quizzes.

        New here? Use **Check Access** in the sidebar to confirm your email
        domain is authorized before signing up.
        """)
        return

    render_account(auth_state)
    require_access()
    render_dashboard()


if __name__ == "__main__":
    main()
