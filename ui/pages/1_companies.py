"""
Companies management UI.

Lists companies, creates new ones and edits a selected company: name,
timezone and the email domains that authorize self-registration.
"""

import sys
from pathlib import Path

# Add parent directory to path
root_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(root_dir))

import streamlit as st

from ui.components.confirm import confirm_button
from ui.state import enter_page, get_services, require_access, run_action, show_api_error
from utils.display import company_delete_state, company_user_count, format_date, user_display_name

# Page configuration
st.set_page_config(
    page_title="Companies",
    page_icon="🏢",
    layout="wide"
)

COMMON_TIMEZONES = [
    "UTC",
    "America/New_York",
    "America/Chicago",
    "America/Denver",
    "America/Los_Angeles",
    "Europe/London",
    "Europe/Berlin",
    "Asia/Jakarta",
    "Asia/Singapore",
    "Asia/Tokyo",
    "Australia/Sydney",
]


def timezone_index(value):
    return COMMON_TIMEZONES.index(value) if value in COMMON_TIMEZONES else 0


def show_company_list(services):
    state = services.companies.companies()
    if state.is_loading:
        st.info("Loading companies...")
        return
    if state.is_error and not state.data:
        show_api_error(state.error, "Failed to load companies: ")
        return

    companies = (state.data or {}).get("companies", [])
    if not companies:
        st.info("No companies yet. Create the first one in the Create tab.")
        return

    search = st.text_input("Search companies", placeholder="Filter by name or domain...")
    query = search.strip().lower()
    if query:
        companies = [
            company for company in companies
            if query in company["name"].lower()
            or any(query in domain["domain"] for domain in company.get("domains", []))
        ]

    st.dataframe(
        [
            {
                "Name": company["name"],
                "Domains": ", ".join(domain["domain"] for domain in company.get("domains", [])) or "—",
                "Users": company_user_count(company),
                "Timezone": company.get("timezone", "UTC"),
                "Created": format_date(company.get("createdAt")),
            }
            for company in companies
        ],
        use_container_width=True,
        hide_index=True,
    )

    options = {f"{company['name']} ({company['id'][:8]})": company["id"] for company in companies}
    selected = st.selectbox("Open company", options=["—"] + list(options.keys()), key="open_company")
    if selected != "—":
        st.session_state.selected_company_id = options[selected]
        st.rerun()


def show_create_form(services):
    with st.form("create_company_form", clear_on_submit=True):
        name = st.text_input("Company name *", max_chars=100)
        timezone = st.selectbox("Timezone", COMMON_TIMEZONES)
        submitted = st.form_submit_button("Create Company", type="primary",
                                          disabled=services.companies.create_company.is_pending)

    if submitted:
        result = run_action(services.companies.create_company, "Company created",
                            data={"name": name.strip(), "timezone": timezone})
        if result:
            company = result.get("company") or {}
            st.session_state.selected_company_id = company.get("id")
            st.rerun()


def show_company_detail(services, company_id):
    if st.button("← Back to companies"):
        st.session_state.selected_company_id = None
        st.session_state.open_company = "—"
        st.rerun()

    state = services.companies.company(company_id)
    if state.is_loading:
        st.info("Loading company...")
        return
    if state.is_error and not state.data:
        show_api_error(state.error, "Failed to load company: ")
        return

    company = (state.data or {}).get("company") or {}
    st.title(company.get("name", "Company"))
    st.caption(f"Created on {format_date(company.get('createdAt'))}")

    # Settings
    st.subheader("Company Details")
    with st.form("edit_company_form"):
        name = st.text_input("Company name", value=company.get("name", ""), max_chars=100)
        timezone = st.selectbox("Timezone", COMMON_TIMEZONES,
                                index=timezone_index(company.get("timezone", "UTC")))
        saved = st.form_submit_button("Save Changes", type="primary",
                                      disabled=services.companies.update_company.is_pending)
    if saved:
        changes = {}
        if name.strip() != company.get("name"):
            changes["name"] = name.strip()
        if timezone != company.get("timezone"):
            changes["timezone"] = timezone
        if not changes:
            st.info("No changes to save.")
        elif run_action(services.companies.update_company, "Company updated",
                        company_id=company_id, data=changes):
            st.rerun()

    # Domains
    st.subheader("Email Domains")
    st.caption("Users with these email domains can sign up under this company.")
    domains = company.get("domains", [])
    if not domains:
        st.info("No domains configured.")
    for domain in domains:
        col1, col2 = st.columns([4, 1])
        with col1:
            st.markdown(f"`{domain['domain']}`")
        with col2:
            if confirm_button(
                "Remove", key=f"remove_domain_{domain['id']}",
                prompt=(f'Are you sure you want to remove "{domain["domain"]}"? Users with this '
                        "email domain won't be able to sign up anymore."),
            ):
                if run_action(services.companies.remove_domain, "Domain removed",
                              company_id=company_id, domain_id=domain["id"]):
                    st.rerun()

    with st.form("add_domain_form", clear_on_submit=True):
        new_domain = st.text_input("Add domain", placeholder="example.com")
        added = st.form_submit_button("Add Domain", disabled=services.companies.add_domain.is_pending)
    if added and new_domain.strip():
        if run_action(services.companies.add_domain, "Domain added",
                      company_id=company_id, data={"domain": new_domain.strip()}):
            st.rerun()

    # Users
    users = company.get("users", [])
    st.subheader(f"Users ({company_user_count(company) or len(users)})")
    if users:
        st.dataframe(
            [{"Name": user_display_name(user), "Email": user["email"], "Role": user.get("role", "")}
             for user in users],
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.caption("No users in this company yet.")

    # Danger zone
    st.subheader("Danger Zone")
    st.caption("Deleting a company will remove all associated domains. Users will not be deleted "
               "but will no longer be associated with this company.")
    delete_state = company_delete_state(company)
    if not delete_state.allowed:
        st.button(delete_state.label, disabled=True, key="delete_company_disabled")
        st.caption(delete_state.reason)
    elif confirm_button(delete_state.label, key=f"delete_company_{company_id}",
                        prompt=f'Delete "{company.get("name")}"? This cannot be undone.'):
        if run_action(services.companies.delete_company, "Company deleted", company_id=company_id):
            st.session_state.selected_company_id = None
            st.session_state.open_company = "—"
            st.rerun()


def main():
    enter_page("companies")
    require_access()
    services = get_services()

    company_id = st.session_state.get("selected_company_id")
    if company_id:
        show_company_detail(services, company_id)
        return

    st.title("🏢 Companies")
    tab1, tab2 = st.tabs(["All Companies", "Create"])
    with tab1:
        show_company_list(services)
    with tab2:
        show_create_form(services)


if __name__ == "__main__":
    main()
