from __future__ import annotations

import streamlit as st

from api_client import AdminApiClient, ApiClientError
from canned_queries import PREDEFINED_QUERIES, get_canned_query
from components.results import render_rows


def render(client: AdminApiClient) -> None:
    st.title("Query Explorer")

    ids = [""] + [q.id for q in PREDEFINED_QUERIES]
    query_id = st.selectbox(
        "Query", ids, key="query_selected",
        format_func=lambda i: get_canned_query(i).name if i else "Select a query",
    )
    if not query_id:
        return

    canned = get_canned_query(query_id)
    st.caption(canned.description)
    with st.expander("SQL", expanded=False):
        st.code(canned.query.strip(), language="sql")

    with st.spinner("Running query..."):
        try:
            rows = client.run_canned_query(query_id)
        except ApiClientError as e:
            st.error(f"Failed to execute query: {e.details or e.message}")
            return
    render_rows(rows, "The query returned no results.")
