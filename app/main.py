# app/main.py

import os
import streamlit as st
from dotenv import load_dotenv
from streamlit_cookies_manager import EncryptedCookieManager

from app.services.api import ApiClient
from app.session import ClientSession
from app.ui.login import login_page
from app.ui.profile import profile_card
from app.ui.tasks import tasks_page


load_dotenv()

st.set_page_config(page_title="Task Manager", layout="wide")

cookies = EncryptedCookieManager(prefix="task-manager/", password=os.getenv("COOKIE_PASSWORD", ""))
if not cookies.ready():
    st.stop()


def get_session() -> ClientSession:
    """
    One ClientSession per browser session, restored from the cookie jar
    the first time the script runs. A finished background token check is
    applied at the top of every later run.
    """
    if "client_session" not in st.session_state:
        session = ClientSession(ApiClient(), cookies)
        session.init()
        st.session_state["client_session"] = session

    session = st.session_state["client_session"]
    # cookie writes only reach the browser from the script thread
    if session.apply_verification():
        st.rerun()
    return session


def main_page(session):
    profile_card(session)

    if st.sidebar.button("🔓 Sign out"):
        session.logout()
        session.teardown()
        st.session_state.clear()
        st.rerun()

    tasks_page(session)


session = get_session()
if session.is_authenticated:
    main_page(session)
else:
    login_page(session)
