# app/ui/login.py

import streamlit as st
from app.forms import validate_login, validate_registration


def login_page(session):
    st.title("🔐 Sign in")

    if "show_register" not in st.session_state:
        st.session_state["show_register"] = False

    if st.session_state["show_register"]:
        show_register_form(session)
    else:
        show_login_form(session)


def _field_errors(errors):
    for field, message in errors.items():
        st.error(f"{field}: {message}")


def show_login_form(session):
    with st.form("login_form"):
        email = st.text_input("Email Address")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")

    if submitted:
        errors = validate_login(email, password)
        if errors:
            _field_errors(errors)
        else:
            with st.spinner("Signing in..."):
                result = session.login(email, password)
            if not result.success:
                st.error(f"❌ {result.message}")
            else:
                st.rerun()

    if st.button("Create an account"):
        st.session_state["show_register"] = True
        st.rerun()


def show_register_form(session):
    st.subheader("📝 Create Account")

    with st.form("register_form"):
        name = st.text_input("Full Name")
        email = st.text_input("Email Address")
        password = st.text_input("Password", type="password")
        confirm = st.text_input("Confirm Password", type="password")
        submitted = st.form_submit_button("Sign up")

    if submitted:
        errors = validate_registration(name, email, password, confirm)
        if errors:
            _field_errors(errors)
        else:
            with st.spinner("Creating account..."):
                result = session.register(name, email, password)
            if result.success:
                st.session_state["show_register"] = False
                st.rerun()
            else:
                st.error(f"❌ {result.message}")
                _field_errors(result.errors)

    if st.button("← Back to sign in"):
        st.session_state["show_register"] = False
        st.rerun()
