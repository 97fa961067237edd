from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

import streamlit as st

from api_client import AdminApiClient, ApiClientError
from components.results import render_rows
from form_schema import (
    OPERATIONS,
    FormField,
    build_form,
    initial_form_data,
    prepare_submission,
    primary_key_column,
    record_to_form_data,
    validate_form,
)

_MIN_DATE = date(1900, 1, 1)
_MAX_DATE = date(2100, 12, 31)


def _as_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value[:10]) if value else None
    except ValueError:
        return None


def _render_field(f: FormField, value: str, key: str) -> str:
    """Draw one input and return its value as a string.  Timestamps stay free text."""
    label = f"{f.label} *" if f.required else f.label
    help_text = f.help or None
    if f.widget == "enum":
        options = [""] + f.options
        idx = options.index(value) if value in options else 0
        return st.selectbox(label, options, index=idx, key=key, disabled=f.disabled,
                            help=help_text)
    if f.widget == "date":
        picked = st.date_input(label, value=_as_date(value), min_value=_MIN_DATE,
                               max_value=_MAX_DATE, key=key, disabled=f.disabled,
                               help=help_text)
        return picked.isoformat() if picked else ""
    return st.text_input(label, value=value, placeholder=f.placeholder,
                         key=key, disabled=f.disabled, help=help_text)


def _select_record(rows: List[Dict], pk: str) -> Optional[Dict]:
    if not rows:
        st.info("No records available.")
        return None
    idx = st.selectbox(
        "Record", list(range(len(rows))), key="manage_record",
        format_func=lambda i: f"{pk} = {rows[i].get(pk)}",
    )
    return rows[idx]


def render(client: AdminApiClient) -> None:
    st.title("Manage Data")
    message = st.session_state.pop("manage_message", None)
    if message:
        st.success(message)
    try:
        tables = client.fetch_tables()
    except ApiClientError:
        st.error("Failed to load tables")
        return

    names = [t["table_name"] for t in tables]
    table_name = st.selectbox("Table", [""] + names, key="manage_table",
                              format_func=lambda n: n or "Select a table")
    if not table_name:
        return
    operation = st.radio("Operation", OPERATIONS, horizontal=True, key="manage_operation",
                         format_func=str.capitalize)

    try:
        columns = client.fetch_table_schema(table_name)
        rows = client.fetch_table_data(table_name)
    except ApiClientError:
        st.error(f"Failed to load data for {table_name}")
        return

    pk = primary_key_column(columns, table_name)
    selected = None
    if operation == "insert":
        values = initial_form_data(columns)
    else:
        selected = _select_record(rows, pk)
        if selected is None:
            return
        values = record_to_form_data(selected)

    fields = build_form(columns, operation, table_name)
    form_key = f"{table_name}:{operation}:{selected.get(pk) if selected else ''}"
    with st.form(key=f"form:{form_key}"):
        title = {"insert": "Add New Record", "update": "Update Record", "delete": "Delete Record"}
        st.subheader(title[operation])
        if operation == "insert":
            st.caption("Fields marked with * are required. ID fields may be left blank to auto-generate.")
        data = {f.name: _render_field(f, values.get(f.name, ""), f"{form_key}:{f.name}") for f in fields}
        submitted = st.form_submit_button(operation.capitalize())

    if submitted:
        _submit(client, table_name, operation, columns, data, selected, pk)

    st.subheader("Current Records")
    render_rows(rows, f"No data found in the table: {table_name}")


def _submit(client: AdminApiClient, table_name: str, operation: str, columns: List[Dict],
            data: Dict[str, str], selected: Optional[Dict], pk: str) -> None:
    if operation != "delete":
        errors = validate_form(columns, data)
        if errors:
            st.error("Please correct the errors in the form")
            for message in errors.values():
                st.warning(message)
            return

    try:
        if operation == "insert":
            client.insert_record(table_name, prepare_submission(columns, data, "insert"))
            message = "Record inserted successfully"
        elif operation == "update":
            client.update_record(table_name, selected[pk], prepare_submission(columns, data, "update"))
            message = "Record updated successfully"
        else:
            client.delete_record(table_name, selected[pk])
            message = "Record deleted successfully"
    except ApiClientError as e:
        st.error(f"Failed to {operation} record: {e.message}")
        return
    st.session_state["manage_message"] = message
    st.rerun()
