from __future__ import annotations

from typing import Any, Dict, List

import streamlit as st


def column_title(column: str) -> str:
    """snake_case result column -> Title Case header."""
    return " ".join(w[:1].upper() + w[1:] for w in column.split("_"))


def display_rows(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Rows with NULLs spelled out and headers title-cased."""
    return [
        {column_title(k): ("null" if v is None else str(v)) for k, v in row.items()}
        for row in rows
    ]


def render_rows(rows: List[Dict[str, Any]], empty_message: str) -> None:
    if not rows:
        st.info(empty_message)
        return
    st.caption(f"{len(rows)} row(s)")
    st.dataframe(display_rows(rows), use_container_width=True, hide_index=True)
