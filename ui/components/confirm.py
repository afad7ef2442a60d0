"""Confirmation step for destructive actions."""

import streamlit as st


def confirm_button(label, key, prompt, disabled=False):
    """
    Two-step destructive action.

    The first click arms the confirmation; returns True only on the rerun in
    which the user clicks Confirm.
    """
    pending_key = f"confirm_{key}"
    if not st.session_state.get(pending_key):
        if st.button(label, key=key, disabled=disabled):
            st.session_state[pending_key] = True
            st.rerun()
        return False

    st.warning(prompt)
    col1, col2 = st.columns(2)
    with col1:
        confirmed = st.button("Confirm", key=f"{key}_yes", type="primary")
    with col2:
        if st.button("Cancel", key=f"{key}_no"):
            st.session_state[pending_key] = False
            st.rerun()
    if confirmed:
        st.session_state[pending_key] = False
    return confirmed
