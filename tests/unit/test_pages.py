"""
Streamlit page tests.

Drives the real page scripts with streamlit's AppTest against the in-memory
API, with the Services bundle and a signed-in superadmin placed in session
state the way ui/state.py would.

Run: pytest tests/unit/test_pages.py -v
"""

import sys
from pathlib import Path

# Add project root to Python path (for direct invocation)
ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(ROOT))

import pytest
from streamlit.testing.v1 import AppTest

from services.auth_service import AuthState
from utils.display import VISIBLE_TO_EVERYONE

PAGES = ROOT / "ui" / "pages"


@pytest.fixture
def open_page(services, payloads):
    def open_page(filename, **session):
        app = AppTest.from_file(str(PAGES / filename), default_timeout=30)
        app.session_state["services"] = services
        app.session_state["auth_state"] = AuthState(db_user=payloads.user(role="superadmin"))
        for key, value in session.items():
            app.session_state[key] = value
        return app.run()
    return open_page


def button_labeled(app, label):
    return next(button for button in app.button if button.label == label)


# ---------------------------------------------------------------------------
# Videos page
# ---------------------------------------------------------------------------

@pytest.fixture
def video_api(fake_api, payloads):
    fake_api.route("GET", "/api/companies", json={"companies": [payloads.company()]})
    fake_api.route("GET", "/api/videos", json={"videos": [
        payloads.video("v1", company_id=None),
        payloads.video("v2", company_id=None),
    ]})
    for video_id in ("v1", "v2"):
        fake_api.route("GET", f"/api/videos/{video_id}", json={"video": payloads.video(video_id)})
    fake_api.route("GET", "/api/videos/v1/questions", json={"questions": [
        payloads.question("q1", order=0),
        payloads.question("q2", text="Where is the exit?", order=1),
    ]})
    fake_api.route("GET", "/api/videos/v2/questions", json={"questions": []})
    return fake_api


class TestVideosPage:

    def test_null_company_is_labelled_visible_to_everyone(self, open_page, video_api):
        app = open_page("3_videos.py")

        assert not app.exception
        assert any(VISIBLE_TO_EVERYONE in caption.value for caption in app.caption)

    def test_leaving_a_video_discards_its_question_editor(self, open_page, video_api):
        app = open_page("3_videos.py")
        app.button(key="open_v1").click().run()
        app.button(key="edit_q1").click().run()
        app.text_input(key="edit_q1_text_0").input("Unsaved local edit").run()
        assert app.session_state["question_editor"].editing_id == "q1"

        button_labeled(app, "← Back to videos").click().run()
        app.button(key="open_v1").click().run()

        editor = app.session_state["question_editor"]
        assert editor.editing_id is None
        assert editor.expanded == set()

    def test_switching_videos_starts_a_clean_editor(self, open_page, video_api, services):
        video_api.route("PUT", "/api/questions/q1", status=500, json={"error": "Database unavailable"})
        app = open_page("3_videos.py", selected_video_id="v1")
        app.button(key="edit_q1").click().run()
        app.button(key="save_q1").click().run()
        assert services.questions.update_question.error is not None

        button_labeled(app, "← Back to videos").click().run()
        app.button(key="open_v2").click().run()

        editor = app.session_state["question_editor"]
        assert editor.video_id == "v2"
        assert editor.save_error is None
        assert not any("Database unavailable" in error.value for error in app.error)

    def test_question_delete_has_no_confirm_step(self, open_page, video_api):
        video_api.route("DELETE", "/api/questions/q2", json={"message": "Question deleted"})
        app = open_page("3_videos.py", selected_video_id="v1")

        app.button(key="delete_q2").click().run()

        assert len(video_api.calls("DELETE", "/api/questions/q2")) == 1

    def test_untouched_publish_date_with_seconds_is_not_a_change(self, open_page, video_api, payloads):
        video_api.route("GET", "/api/videos/v1",
                        json={"video": payloads.video("v1", publish_date="2025-01-01T00:00:30.500Z")})
        app = open_page("3_videos.py", selected_video_id="v1")

        assert button_labeled(app, "Save Changes").disabled


# ---------------------------------------------------------------------------
# Companies page
# ---------------------------------------------------------------------------

class TestCompaniesPage:

    def test_company_with_users_cannot_be_deleted(self, open_page, fake_api, payloads):
        company = dict(payloads.company(users=3), users=[])
        fake_api.route("GET", "/api/companies/c1", json={"company": company})

        app = open_page("1_companies.py", selected_company_id="c1")

        button = app.button(key="delete_company_disabled")
        assert button.disabled
        assert button.label == "Cannot delete (3 users)"

    def test_empty_company_delete_needs_confirmation(self, open_page, fake_api, payloads):
        company = dict(payloads.company(users=0), users=[])
        fake_api.route("GET", "/api/companies/c1", json={"company": company})
        fake_api.route("DELETE", "/api/companies/c1", json={"message": "Company deleted"})

        app = open_page("1_companies.py", selected_company_id="c1")
        app.button(key="delete_company_c1").click().run()

        assert fake_api.calls("DELETE") == []
        assert any("cannot be undone" in warning.value for warning in app.warning)


# ---------------------------------------------------------------------------
# Users page
# ---------------------------------------------------------------------------

class TestUsersPage:

    def test_user_detail_reads_single_user(self, open_page, fake_api, payloads):
        fake_api.route("GET", "/api/users/u1", json={"user": payloads.user()})

        app = open_page("2_users.py", selected_user_id="u1")

        assert len(fake_api.calls("GET", "/api/users/u1")) == 1
        assert "Ada Lovelace" in app.title[0].value


# ---------------------------------------------------------------------------
# Check access page
# ---------------------------------------------------------------------------

class TestCheckAccessPage:

    def submit(self, app, email):
        app.text_input[0].input(email)
        button_labeled(app, "Check Access").click().run()
        return app

    def test_denial_shows_server_message_and_stays(self, open_page, fake_api):
        fake_api.route("POST", "/api/auth/check-domain", status=403,
                       json={"allowed": False, "message": "Acme has not enabled self-signup"})

        app = self.submit(open_page("4_check_access.py"), "ada@acme.com")

        assert [error.value for error in app.error] == ["Acme has not enabled self-signup"]
        assert not app.success
        assert "signup_email" not in app.session_state

    def test_allowed_email_switches_to_signup(self, open_page, fake_api):
        fake_api.route("POST", "/api/auth/check-domain",
                       json={"allowed": True, "companyName": "Acme"})

        app = self.submit(open_page("4_check_access.py"), "ada@acme.com")

        assert app.session_state["signup_email"] == "ada@acme.com"
        assert "ada@acme.com" in app.success[0].value
