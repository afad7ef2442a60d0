"""
Streamlit rendering for QuestionEditor.

All state lives on the editor; this module only draws it and forwards
clicks. Widget keys include the draft revision so inputs follow answers when
they are added, removed or moved.
"""

import streamlit as st

from ui.question_editor import QuestionEditor, RenderMode
from ui.state import QUESTION_EDITOR_KEY, close_question_editor, show_api_error


def get_question_editor(video_id, question_service):
    """
    Editor for the open video.

    Only one exists per session; opening a different video starts from a
    clean editor, and leaving the video view discards it.
    """
    editor = st.session_state.get(QUESTION_EDITOR_KEY)
    if editor is None or editor.video_id != video_id:
        close_question_editor()
        editor = QuestionEditor(video_id, question_service)
        st.session_state[QUESTION_EDITOR_KEY] = editor
    return editor


def render_draft_form(draft, key_prefix):
    """Inputs for a QuestionDraft; edits are applied to the draft in place."""
    text = st.text_input("Question Text", value=draft.text, key=f"{key_prefix}_text_{draft.revision}",
                         placeholder="Enter your question...")
    draft.set_text(text)

    header, add = st.columns([4, 1])
    with header:
        st.markdown("**Answers**")
    with add:
        if st.button("＋ Add Answer", key=f"{key_prefix}_add_{draft.revision}"):
            draft.add_answer()
            st.rerun()

    for index, answer in enumerate(draft.answers):
        key = f"{key_prefix}_{draft.revision}_{index}"
        col_correct, col_text, col_up, col_down, col_remove = st.columns([1, 8, 1, 1, 1])
        with col_correct:
            correct = st.checkbox("Correct", value=answer.is_correct, key=f"{key}_correct",
                                  label_visibility="collapsed",
                                  help="Mark as incorrect" if answer.is_correct else "Mark as correct")
            if correct != answer.is_correct:
                draft.toggle_answer_correct(index)
        with col_text:
            value = st.text_input(f"Answer {index + 1}", value=answer.text, key=f"{key}_text",
                                  label_visibility="collapsed", placeholder=f"Answer {index + 1}")
            draft.set_answer_text(index, value)
        with col_up:
            if st.button("↑", key=f"{key}_up", disabled=index == 0):
                draft.move_answer(index, index - 1)
                st.rerun()
        with col_down:
            if st.button("↓", key=f"{key}_down", disabled=index == len(draft.answers) - 1):
                draft.move_answer(index, index + 1)
                st.rerun()
        with col_remove:
            if len(draft.answers) > 2 and st.button("✕", key=f"{key}_remove"):
                draft.remove_answer(index)
                st.rerun()

    for message in draft.validation_messages():
        st.caption(f"• {message}")


def render_answers(question):
    for answer in sorted(question.get("answers", []), key=lambda a: a.get("order", 0)):
        marker = "✅" if answer.get("isCorrect") else "⚪"
        text = f"**{answer['text']}**" if answer.get("isCorrect") else answer["text"]
        st.markdown(f"{marker} {text}")


def render_question(editor, question, position, total):
    question_id = question["id"]
    answers = question.get("answers", [])
    correct = sum(1 for answer in answers if answer.get("isCorrect"))
    mode = editor.render_mode(question_id)

    with st.container(border=True):
        col_toggle, col_title, col_actions = st.columns([1, 8, 4])
        with col_toggle:
            arrow = "▾" if mode != RenderMode.COLLAPSED else "▸"
            if st.button(arrow, key=f"toggle_{question_id}", disabled=mode == RenderMode.EDIT):
                editor.toggle_expanded(question_id)
                st.rerun()
        with col_title:
            st.markdown(f"`Q{position + 1}` **{question['text']}**")
            st.caption(f"{len(answers)} answers • {correct} correct")
        with col_actions:
            up, down, edit, delete = st.columns(4)
            with up:
                if st.button("↑", key=f"q_up_{question_id}", disabled=position == 0):
                    if editor.move_question(question_id, -1):
                        st.rerun()
            with down:
                if st.button("↓", key=f"q_down_{question_id}", disabled=position == total - 1):
                    if editor.move_question(question_id, 1):
                        st.rerun()
            with edit:
                if st.button("Edit", key=f"edit_{question_id}", disabled=mode == RenderMode.EDIT):
                    editor.begin_edit(question)
                    st.rerun()
            with delete:
                # No confirmation for questions
                if st.button("🗑", key=f"delete_{question_id}", disabled=editor.is_deleting):
                    if editor.delete_question(question_id):
                        st.rerun()

        if mode == RenderMode.VIEW:
            render_answers(question)
        elif mode == RenderMode.EDIT:
            draft = editor.edit_draft
            render_draft_form(draft, key_prefix=f"edit_{question_id}")
            if editor.save_error:
                show_api_error(editor.save_error, "Failed to save question: ")
            cancel, save = st.columns(2)
            with cancel:
                if st.button("Cancel", key=f"cancel_{question_id}"):
                    editor.cancel_edit()
                    st.rerun()
            with save:
                if st.button("Save Changes", key=f"save_{question_id}", type="primary",
                             disabled=not draft.can_submit() or editor.is_saving):
                    if editor.save_edit():
                        st.rerun()


def render_new_question_form(editor):
    with st.container(border=True):
        st.markdown("**New Question**")
        render_draft_form(editor.new_draft, key_prefix="new_question")
        if editor.create_error:
            show_api_error(editor.create_error, "Failed to create question: ")
        cancel, create = st.columns(2)
        with cancel:
            if st.button("Cancel", key="cancel_new_question"):
                editor.cancel_adding()
                st.rerun()
        with create:
            if st.button("Add Question", key="create_question", type="primary",
                         disabled=not editor.new_draft.can_submit() or editor.is_creating):
                if editor.create_question():
                    st.rerun()


def render_question_editor(editor: QuestionEditor):
    """Full quiz editor for one video."""
    state = editor.questions_state()
    if state.is_loading:
        st.info("Loading questions...")
        return
    if state.is_error and not state.data:
        show_api_error(state.error, "Failed to load questions: ")
        return

    questions = sorted(editor.questions(), key=lambda q: q.get("order", 0))

    if editor.delete_error:
        show_api_error(editor.delete_error, "Failed to delete question: ")
    if editor.reorder_error:
        show_api_error(editor.reorder_error, "Failed to reorder questions: ")

    if not questions and not editor.is_adding_new:
        st.info("No questions yet. Add a quiz question viewers answer after watching.")

    for position, question in enumerate(questions):
        render_question(editor, question, position, len(questions))

    if editor.is_adding_new:
        render_new_question_form(editor)
    elif st.button("＋ Add Question", key="start_new_question"):
        editor.start_adding()
        st.rerun()
