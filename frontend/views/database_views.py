from __future__ import annotations

import streamlit as st

from api_client import AdminApiClient, ApiClientError
from components.results import render_rows


def render(client: AdminApiClient) -> None:
    st.title("Database Views")
    try:
        views = client.fetch_views()
    except ApiClientError:
        st.error("Failed to load views. Please try again later.")
        return

    names = [v["table_name"] for v in views]
    view_name = st.selectbox("View", [""] + names, key="views_selected",
                             format_func=lambda n: n or "Select a view")
    if not view_name:
        return

    try:
        rows = client.fetch_view_data(view_name)
    except ApiClientError:
        st.error(f"Failed to load data for view: {view_name}")
        return
    render_rows(rows, f"No data found in the view: {view_name}")
