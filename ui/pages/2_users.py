"""
Users management UI.

Filter users by company and role, create users, and open a user to change
their role or delete them.
"""

import sys
from pathlib import Path

# Add parent directory to path
root_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(root_dir))

import streamlit as st

from api.models.user_schemas import UserRole
from ui.components.confirm import confirm_button
from ui.state import enter_page, get_services, require_access, run_action, show_api_error
from utils.display import format_date, user_display_name, user_initial

# Page configuration
st.set_page_config(
    page_title="Users",
    page_icon="👥",
    layout="wide"
)

ROLE_LABELS = {
    UserRole.USER: "User",
    UserRole.ADMIN: "Admin",
    UserRole.SUPERADMIN: "Super Admin",
}


def get_company_options(services):
    """Map of company name -> id for selectors."""
    state = services.companies.companies()
    companies = (state.data or {}).get("companies", []) if isinstance(state.data, dict) else []
    return {company["name"]: company["id"] for company in companies}


def role_of(user):
    try:
        return UserRole(user.get("role"))
    except ValueError:
        return UserRole.USER


def matches_search(user, query):
    return (
        query in (user.get("email") or "").lower()
        or query in (user.get("firstName") or "").lower()
        or query in (user.get("lastName") or "").lower()
    )


def show_user_list(services, company_options):
    col1, col2, col3 = st.columns([2, 1, 2])
    with col1:
        company_name = st.selectbox("Company", ["All companies"] + list(company_options.keys()))
    with col2:
        role = st.selectbox("Role", [None] + list(UserRole),
                            format_func=lambda value: "All roles" if value is None else ROLE_LABELS[value])
    with col3:
        search = st.text_input("Search", placeholder="Name or email...")

    state = services.users.users(company_id=company_options.get(company_name), role=role)
    if state.is_loading:
        st.info("Loading users...")
        return
    if state.is_error and not state.data:
        show_api_error(state.error, "Failed to load users: ")
        return

    users = (state.data or {}).get("users", [])
    query = search.strip().lower()
    if query:
        users = [user for user in users if matches_search(user, query)]

    if not users:
        st.info("No users match these filters.")
        return

    st.caption(f"{len(users)} users")
    for user in users:
        company = user.get("company") or {}
        with st.expander(f"{user_initial(user)} · {user_display_name(user)} · {user['email']}"):
            col1, col2 = st.columns([3, 1])
            with col1:
                st.markdown(f"**Company:** {company.get('name', '—')}")
                st.markdown(f"**Role:** {ROLE_LABELS[role_of(user)]}")
            with col2:
                if st.button("Open", key=f"open_user_{user['id']}"):
                    st.session_state.selected_user_id = user["id"]
                    st.rerun()


def show_user_detail(services, user_id):
    if st.button("← Back to users"):
        st.session_state.selected_user_id = None
        st.rerun()

    state = services.users.user(user_id)
    if state.is_loading:
        st.info("Loading user...")
        return
    if state.is_error and not state.data:
        show_api_error(state.error, "Failed to load user: ")
        return

    user = (state.data or {}).get("user") or {}
    company = user.get("company") or {}
    st.title(f"{user_initial(user)} · {user_display_name(user)}")
    st.caption(user.get("email", ""))

    col1, col2 = st.columns(2)
    with col1:
        st.markdown(f"**Company:** {company.get('name', '—')}")
        st.markdown(f"**Joined:** {format_date(user.get('createdAt'))}")
        st.markdown(f"**Updated:** {format_date(user.get('updatedAt'), with_time=True)}")
    with col2:
        current_role = role_of(user)
        new_role = st.selectbox(
            "Role", list(UserRole), index=list(UserRole).index(current_role),
            format_func=lambda value: ROLE_LABELS[value], key=f"role_{user_id}",
        )
        if st.button("Update Role", key=f"update_role_{user_id}",
                     disabled=new_role == current_role or services.users.update_user_role.is_pending):
            if run_action(services.users.update_user_role, "Role updated",
                          user_id=user_id, data={"role": new_role}):
                st.rerun()

    st.subheader("Danger Zone")
    if confirm_button("Delete User", key=f"delete_user_{user_id}",
                      prompt=f"Delete {user.get('email', 'this user')}? This cannot be undone."):
        if run_action(services.users.delete_user, "User deleted", user_id=user_id):
            st.session_state.selected_user_id = None
            st.rerun()


def show_create_form(services, company_options):
    if not company_options:
        st.warning("Create a company first; every user belongs to one.")
        return

    with st.form("create_user_form", clear_on_submit=True):
        email = st.text_input("Email *")
        col1, col2 = st.columns(2)
        with col1:
            first_name = st.text_input("First name")
        with col2:
            last_name = st.text_input("Last name")
        col1, col2 = st.columns(2)
        with col1:
            company_name = st.selectbox("Company *", list(company_options.keys()))
        with col2:
            role = st.selectbox("Role", list(UserRole), format_func=lambda value: ROLE_LABELS[value])
        submitted = st.form_submit_button("Create User", type="primary",
                                          disabled=services.users.create_user.is_pending)

    if submitted:
        data = {
            "email": email.strip(),
            "role": role,
            "companyId": company_options[company_name],
        }
        # Blank names are left out rather than sent as ""
        if first_name.strip():
            data["firstName"] = first_name.strip()
        if last_name.strip():
            data["lastName"] = last_name.strip()
        if run_action(services.users.create_user, "User created", data=data):
            st.rerun()


def main():
    enter_page("users")
    require_access()
    services = get_services()

    user_id = st.session_state.get("selected_user_id")
    if user_id:
        show_user_detail(services, user_id)
        return

    st.title("👥 Users")
    company_options = get_company_options(services)

    tab1, tab2 = st.tabs(["All Users", "Create"])
    with tab1:
        show_user_list(services, company_options)
    with tab2:
        show_create_form(services, company_options)


if __name__ == "__main__":
    main()
