"""
Unit tests for display helpers.

Run: pytest tests/unit/test_display.py -v
"""

import sys
from datetime import date, datetime, time, timezone
from pathlib import Path

# Add project root to Python path (for direct invocation)
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import pytest

from utils.display import (
    PUBLISHED,
    SCHEDULED,
    VISIBLE_TO_EVERYONE,
    combine_publish_date,
    company_delete_state,
    format_date,
    format_file_size,
    is_published,
    publish_status,
    user_display_name,
    user_initial,
    visibility_label,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestPublishStatus:

    @pytest.mark.parametrize("publish_date, expected", [
        ("2025-05-31T12:00:00.000Z", PUBLISHED),
        ("2025-06-01T12:00:00Z", PUBLISHED),
        ("2025-06-02T00:00:00.000Z", SCHEDULED),
        ("2025-06-01T11:00:00", PUBLISHED),
    ])
    def test_badge(self, publish_date, expected):
        assert publish_status(publish_date, now=NOW) == expected

    def test_is_published_defaults_to_current_time(self):
        assert is_published("2000-01-01T00:00:00Z")


class TestVisibility:

    def test_null_company_is_visible_to_everyone(self):
        assert visibility_label({"companyId": None, "company": None}) == VISIBLE_TO_EVERYONE

    def test_company_name_is_preferred(self):
        video = {"companyId": "c1", "company": {"id": "c1", "name": "Acme"}}
        assert visibility_label(video) == "Acme"

    def test_falls_back_to_company_id(self):
        assert visibility_label({"companyId": "c1"}) == "c1"


class TestCompanyDeleteState:

    def test_company_with_users_cannot_be_deleted(self, payloads):
        state = company_delete_state(payloads.company(users=3))

        assert not state.allowed
        assert state.label == "Cannot delete (3 users)"
        assert "3 active user(s)" in state.reason

    def test_empty_company_can_be_deleted(self, payloads):
        state = company_delete_state(payloads.company(users=0))
        assert state.allowed
        assert state.label == "Delete Company"

    def test_missing_count_counts_as_zero(self):
        assert company_delete_state({"name": "Acme"}).allowed


class TestUserDisplay:

    def test_full_name(self, payloads):
        assert user_display_name(payloads.user()) == "Ada Lovelace"

    def test_partial_name_falls_back_to_email_local_part(self):
        assert user_display_name({"firstName": "Ada", "lastName": None, "email": "ada.l@acme.com"}) == "ada.l"

    def test_initial(self):
        assert user_initial({"firstName": "ada"}) == "A"
        assert user_initial({"email": "bob@acme.com"}) == "B"
        assert user_initial({}) == "?"


class TestFormatting:

    def test_format_date(self):
        assert format_date("2025-03-04T14:05:00.000Z") == "Mar 4, 2025"
        assert format_date("2025-03-04T14:05:00.000Z", with_time=True) == "Mar 4, 2025, 2:05 PM"
        assert format_date("2025-03-04T00:30:00Z", with_time=True) == "Mar 4, 2025, 12:30 AM"

    def test_format_date_passes_through_garbage(self):
        assert format_date("soon") == "soon"
        assert format_date(None) == ""

    @pytest.mark.parametrize("size, expected", [
        (0, "0 Bytes"),
        (512, "512 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (5 * 1024 * 1024, "5 MB"),
    ])
    def test_format_file_size(self, size, expected):
        assert format_file_size(size) == expected


class TestCombinePublishDate:

    def test_new_date_is_minute_precision_utc(self):
        assert combine_publish_date(date(2025, 3, 4), time(14, 5, 59)) == "2025-03-04T14:05:00Z"

    def test_untouched_inputs_keep_original_seconds(self):
        original = "2025-01-01T00:00:30.500Z"
        assert combine_publish_date(date(2025, 1, 1), time(0, 0), original=original) == original

    def test_changed_minute_replaces_original(self):
        original = "2025-01-01T00:00:30.500Z"
        assert combine_publish_date(date(2025, 1, 1), time(0, 1), original=original) == "2025-01-01T00:01:00Z"

    def test_original_with_offset_is_compared_in_utc(self):
        original = "2025-01-01T02:00:45+02:00"
        assert combine_publish_date(date(2025, 1, 1), time(0, 0), original=original) == original
