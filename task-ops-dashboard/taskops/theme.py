import os

import streamlit as st
from streamlit.errors import StreamlitAPIException

THEME_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "assets", "dashboard.css")


def set_theme(
    page_title: str = "Task Operations Dashboard",
    page_icon: str = "🗂️",
    layout: str = "wide",
    initial_sidebar_state: str = "collapsed",
):
    """Configure the Streamlit page & inject the dashboard CSS.

    Safe to call at the top of every rerun: Streamlit only honours the first
    set_page_config, the CSS is (re)injected each time.
    """
    try:
        st.set_page_config(
            page_title=page_title,
            page_icon=page_icon,
            layout=layout,
            initial_sidebar_state=initial_sidebar_state,
        )
    except StreamlitAPIException:
        # Page config already set for this run.
        pass

    try:
        with open(THEME_FILE, "r", encoding="utf-8") as f:
            css = f.read()
            st.markdown(f"<style>{css}</style>", unsafe_allow_html=True)
    except FileNotFoundError:
        st.error(f"Theme file not found at {THEME_FILE}. Please check the file path.")
