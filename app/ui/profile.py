# app/ui/profile.py

import streamlit as st
from app.services.api import ApiError, Unauthorized


def profile_card(session):
    user = session.user or {}

    st.sidebar.markdown("## 👤 Profile")
    if user.get("avatar"):
        st.sidebar.image(user["avatar"], width=64)
    st.sidebar.markdown(f"**{user.get('name', '')}**  \n{user.get('email', '')}")

    # the toggle owns "edit_profile" once drawn; closing is requested for the next run
    if st.session_state.pop("close_profile_editor", False):
        st.session_state["edit_profile"] = False

    if not st.sidebar.toggle("Edit profile", key="edit_profile"):
        return

    with st.sidebar.form("profile_form"):
        name = st.text_input("Name", value=user.get("name", ""))
        email = st.text_input("Email", value=user.get("email", ""))
        avatar = st.text_input("Avatar URL", value=user.get("avatar") or "")
        submitted = st.form_submit_button("Save")

    if submitted:
        try:
            updated = session.api.update_profile(name=name, email=email, avatar=avatar)
        except Unauthorized:
            st.rerun()
        except ApiError as e:
            st.sidebar.error(e.message)
            for field, message in e.errors.items():
                st.sidebar.error(f"{field}: {message}")
        else:
            session.update_user(updated)
            st.session_state["close_profile_editor"] = True
            st.rerun()
