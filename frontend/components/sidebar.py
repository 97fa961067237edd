from __future__ import annotations

import streamlit as st

from api_client import AdminApiClient

NAV_ITEMS = [
    ("Tables", "tables"),
    ("Views", "views"),
    ("Manage Data", "manage"),
    ("Query Explorer", "queries"),
]


def render_sidebar(client: AdminApiClient) -> str:
    with st.sidebar:
        st.markdown("### DB Admin Console")

        labels = [label for label, _ in NAV_ITEMS]
        default_label = st.session_state.get("nav_label", labels[0])
        idx = labels.index(default_label) if default_label in labels else 0

        label = st.radio("Nav", labels, index=idx, label_visibility="collapsed")
        st.session_state["nav_label"] = label

        st.caption(f"API: {client.client.base_url}")
    return dict(NAV_ITEMS)[label]
