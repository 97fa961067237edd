from __future__ import annotations

import streamlit as st

from api_client import AdminApiClient, ApiClientError
from components.results import render_rows


def render(client: AdminApiClient) -> None:
    st.title("Database Tables")
    try:
        tables = client.fetch_tables()
    except ApiClientError:
        st.error("Failed to load tables. Please try again later.")
        return

    names = [t["table_name"] for t in tables]
    if not names:
        st.info("No tables found.")
        return

    table_name = st.selectbox("Table", names, key="tables_selected")
    try:
        rows = client.fetch_table_data(table_name)
    except ApiClientError:
        st.error(f"Failed to load data for table: {table_name}")
        return
    render_rows(rows, f"No data found in the table: {table_name}")
