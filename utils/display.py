"""
Display helpers shared by the Streamlit pages and the CLI.

All helpers take wire dicts (camelCase keys) as returned by ApiClient.
"""

from datetime import date, datetime, time, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel

PUBLISHED = "Published"
SCHEDULED = "Scheduled"
VISIBLE_TO_EVERYONE = "Visible to everyone"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_published(publish_date: str, now: Optional[datetime] = None) -> bool:
    """A video is live once its publish date is not in the future."""
    now = now or datetime.now(timezone.utc)
    return parse_timestamp(publish_date) <= now


def publish_status(publish_date: str, now: Optional[datetime] = None) -> str:
    return PUBLISHED if is_published(publish_date, now) else SCHEDULED


def combine_publish_date(day: date, moment: time, original: Optional[str] = None) -> str:
    """
    ISO-8601 UTC string from a date input and a minute-precision time input.

    When the inputs still show ``original`` to the minute, ``original`` is
    returned as-is so its seconds are not dropped on save.
    """
    if original:
        previous = parse_timestamp(original).astimezone(timezone.utc)
        if day == previous.date() and (moment.hour, moment.minute) == (previous.hour, previous.minute):
            return original
    combined = datetime.combine(day, moment.replace(second=0, microsecond=0), tzinfo=timezone.utc)
    return combined.isoformat().replace("+00:00", "Z")


def visibility_label(video: Dict[str, Any]) -> str:
    """
    Audience label for a video.

    A null companyId means the video is for everyone; it is never attributed
    to a single company.
    """
    if video.get("companyId") is None:
        return VISIBLE_TO_EVERYONE
    company = video.get("company") or {}
    return company.get("name") or video["companyId"]


class DeleteState(BaseModel):
    """Whether a company can be deleted, and the label for the delete button."""
    allowed: bool
    label: str
    reason: Optional[str] = None


def company_user_count(company: Dict[str, Any]) -> int:
    return int((company.get("_count") or {}).get("users") or 0)


def company_delete_state(company: Dict[str, Any]) -> DeleteState:
    """Companies with users cannot be deleted; the button says why."""
    users = company_user_count(company)
    if users > 0:
        return DeleteState(
            allowed=False,
            label=f"Cannot delete ({users} users)",
            reason=(
                f'Cannot delete "{company.get("name", "")}" because it has {users} active user(s). '
                "Remove all users first."
            ),
        )
    return DeleteState(allowed=True, label="Delete Company")


def user_display_name(user: Dict[str, Any]) -> str:
    """Full name when both parts exist, otherwise the email's local part."""
    first_name = user.get("firstName")
    last_name = user.get("lastName")
    if first_name and last_name:
        return f"{first_name} {last_name}"
    return (user.get("email") or "").split("@")[0]


def user_initial(user: Dict[str, Any]) -> str:
    source = user.get("firstName") or user.get("email") or "?"
    return source[0].upper()


def format_date(value: Optional[str], with_time: bool = False) -> str:
    """Short human date, e.g. 'Mar 4, 2025' or 'Mar 4, 2025, 2:05 PM'."""
    if not value:
        return ""
    try:
        parsed = parse_timestamp(value)
    except ValueError:
        return value
    date_part = f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"
    if not with_time:
        return date_part
    hour = parsed.hour % 12 or 12
    meridiem = "AM" if parsed.hour < 12 else "PM"
    return f"{date_part}, {hour}:{parsed.minute:02d} {meridiem}"


def format_file_size(size: int) -> str:
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {units[index]}"
