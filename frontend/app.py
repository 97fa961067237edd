"""
Routing only.

All page logic lives in views/.  Run with:
  streamlit run frontend/app.py
"""

from __future__ import annotations

import os
import sys

# Make `frontend/` importable as a flat module path
APP_DIR = os.path.dirname(__file__)
if APP_DIR not in sys.path:
    sys.path.insert(0, APP_DIR)

import streamlit as st  # noqa: E402

from api_client import AdminApiClient  # noqa: E402
from components.sidebar import render_sidebar  # noqa: E402
from views import database_views, manage_data, query_explorer, tables  # noqa: E402


@st.cache_resource
def get_client() -> AdminApiClient:
    return AdminApiClient()


def main() -> None:
    st.set_page_config(page_title="DB Admin Console", layout="wide")
    client = get_client()
    view = render_sidebar(client)

    if view == "tables":
        tables.render(client)
    elif view == "views":
        database_views.render(client)
    elif view == "manage":
        manage_data.render(client)
    elif view == "queries":
        query_explorer.render(client)
    else:
        st.error("Unknown view")


if __name__ == "__main__":
    main()
