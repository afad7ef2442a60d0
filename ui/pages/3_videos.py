"""
Video library UI.

Upload videos, edit their metadata and audience, replace the file, delete,
and manage each video's quiz questions.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

# Add parent directory to path
root_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(root_dir))

import streamlit as st

from api.client import FileUpload
from ui.components.confirm import confirm_button
from ui.components.question_editor_view import get_question_editor, render_question_editor
from ui.state import (
    close_question_editor,
    enter_page,
    get_services,
    require_access,
    run_action,
    show_api_error,
)
from utils.display import (
    PUBLISHED,
    combine_publish_date,
    format_date,
    format_file_size,
    parse_timestamp,
    publish_status,
    visibility_label,
)

# Page configuration
st.set_page_config(
    page_title="Videos",
    page_icon="🎞️",
    layout="wide"
)

EVERYONE = "Everyone"
VIDEO_TYPES = ["mp4", "mov", "webm", "mkv", "avi", "m4v"]


def get_company_options(services):
    state = services.companies.companies()
    companies = (state.data or {}).get("companies", []) if isinstance(state.data, dict) else []
    return {company["name"]: company["id"] for company in companies}


def audience_selector(company_options, current_company_id=None, key="audience"):
    """Everyone vs one company; returns the companyId (None = everyone)."""
    names = [EVERYONE] + list(company_options.keys())
    current = next((name for name, cid in company_options.items() if cid == current_company_id), EVERYONE)
    choice = st.selectbox("Visible to", names, index=names.index(current), key=key)
    return company_options.get(choice)


def publish_date_inputs(initial=None, key="publish"):
    """Date + time inputs; returns an ISO-8601 UTC string."""
    start = parse_timestamp(initial).astimezone(timezone.utc) if initial else datetime.now(timezone.utc)
    col1, col2 = st.columns(2)
    with col1:
        day = st.date_input("Publish date", value=start.date(), key=f"{key}_date")
    with col2:
        moment = st.time_input("Publish time (UTC)", value=start.time().replace(second=0, microsecond=0),
                               key=f"{key}_time")
    return combine_publish_date(day, moment, original=initial)


def show_video_list(services):
    state = services.videos.videos()
    if state.is_loading:
        st.info("Loading videos...")
        return
    if state.is_error and not state.data:
        show_api_error(state.error, "Failed to load videos: ")
        return

    videos = (state.data or {}).get("videos", [])
    if not videos:
        st.info("No videos yet. Upload one in the Upload tab.")
        return

    for video in sorted(videos, key=lambda v: v.get("publishDate", ""), reverse=True):
        status = publish_status(video["publishDate"])
        badge = "🟢" if status == PUBLISHED else "🕒"
        col1, col2, col3, col4 = st.columns([5, 2, 3, 1])
        with col1:
            st.markdown(f"**{video['title']}**")
        with col2:
            st.markdown(f"{badge} {status}")
        with col3:
            st.caption(f"{visibility_label(video)} · {format_date(video['publishDate'], with_time=True)}")
        with col4:
            if st.button("Open", key=f"open_{video['id']}"):
                st.session_state.selected_video_id = video["id"]
                st.rerun()


def show_upload_form(services, company_options):
    uploaded_file = st.file_uploader("Video file *", type=VIDEO_TYPES)
    if uploaded_file is not None:
        st.caption(f"{uploaded_file.name} · {format_file_size(uploaded_file.size)}")

    title = st.text_input("Title *", max_chars=200)
    publish_date = publish_date_inputs(key="upload_publish")
    company_id = audience_selector(company_options, key="upload_audience")

    can_upload = uploaded_file is not None and title.strip() and not services.videos.upload_video.is_pending
    if st.button("Upload Video", type="primary", disabled=not can_upload):
        with st.spinner("Uploading..."):
            result = run_action(
                services.videos.upload_video, "Video uploaded",
                file=FileUpload.from_uploaded_file(uploaded_file),
                title=title.strip(),
                publish_date=publish_date,
                company_id=company_id,
            )
        if result:
            st.session_state.selected_video_id = (result.get("video") or {}).get("id")
            st.rerun()


def show_video_detail(services, video_id, company_options):
    if st.button("← Back to videos"):
        st.session_state.selected_video_id = None
        close_question_editor()
        st.rerun()

    state = services.videos.video(video_id)
    if state.is_loading:
        st.info("Loading video...")
        return
    if state.is_error and not state.data:
        show_api_error(state.error, "Failed to load video: ")
        return

    video = (state.data or {}).get("video") or {}
    status = publish_status(video["publishDate"])
    st.title(video.get("title", "Video"))
    st.caption(f"{status} · {visibility_label(video)} · {format_date(video['publishDate'], with_time=True)}")

    tab1, tab2, tab3 = st.tabs(["Details", "Questions", "File"])

    with tab1:
        st.video(video["url"])
        title = st.text_input("Title", value=video["title"], max_chars=200, key=f"title_{video_id}")
        publish_date = publish_date_inputs(video["publishDate"], key=f"publish_{video_id}")
        company_id = audience_selector(company_options, video.get("companyId"), key=f"audience_{video_id}")

        changes = {}
        if title.strip() != video["title"]:
            changes["title"] = title.strip()
        if parse_timestamp(publish_date) != parse_timestamp(video["publishDate"]):
            changes["publishDate"] = publish_date
        if company_id != video.get("companyId"):
            # Explicit None moves the video to everyone
            changes["companyId"] = company_id

        if st.button("Save Changes", type="primary",
                     disabled=not changes or services.videos.update_video.is_pending):
            if run_action(services.videos.update_video, "Video updated", video_id=video_id, data=changes):
                st.rerun()

        st.markdown("---")
        if confirm_button("Delete Video", key=f"delete_video_{video_id}",
                          prompt=f'Delete "{video["title"]}" and its questions? This cannot be undone.'):
            if run_action(services.videos.delete_video, "Video deleted", video_id=video_id):
                st.session_state.selected_video_id = None
                close_question_editor()
                st.rerun()

    with tab2:
        editor = get_question_editor(video_id, services.questions)
        render_question_editor(editor)

    with tab3:
        st.caption("Replacing the file keeps the title, audience, publish date and questions.")
        replacement = st.file_uploader("Replacement file", type=VIDEO_TYPES, key=f"replace_{video_id}")
        if st.button("Replace File", disabled=replacement is None
                     or services.videos.replace_video_file.is_pending):
            with st.spinner("Uploading replacement..."):
                if run_action(services.videos.replace_video_file, "Video file replaced",
                              video_id=video_id, file=FileUpload.from_uploaded_file(replacement)):
                    st.rerun()


def main():
    enter_page("videos")
    require_access()
    services = get_services()
    company_options = get_company_options(services)

    video_id = st.session_state.get("selected_video_id")
    if video_id:
        show_video_detail(services, video_id, company_options)
        return

    # No video open, so no question editor either
    close_question_editor()

    st.title("🎞️ Videos")
    tab1, tab2 = st.tabs(["Library", "Upload"])
    with tab1:
        show_video_list(services)
    with tab2:
        show_upload_form(services, company_options)


if __name__ == "__main__":
    main()
