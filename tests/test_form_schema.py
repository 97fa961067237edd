"""
Tests for schema-driven form inference, validation and payload preparation.
"""

import pytest

from form_schema import (
    build_form,
    field_label,
    initial_form_data,
    prepare_submission,
    primary_key_column,
    record_to_form_data,
    should_skip_field,
    validate_field,
    validate_form,
    widget_for,
)


def col(name, data_type="text", nullable="YES", default=None, pk=False, enum_values=None, udt_name=None):
    return {
        "column_name": name,
        "data_type": data_type,
        "is_nullable": nullable,
        "column_default": default,
        "udt_name": udt_name or data_type,
        "is_primary_key": pk,
        "enum_values": enum_values or [],
    }


CUSTOMER = [
    col("customer_id", "integer", "NO", "nextval('customer_customer_id_seq'::regclass)", pk=True),
    col("first_name", "character varying", "NO"),
    col("email", "character varying"),
    col("phone", "character varying"),
    col("date_of_birth", "date", "NO"),
    col("credit_score", "integer"),
    col("created_at", "timestamp without time zone", "NO", "now()"),
]

ACCOUNT = [
    col("account_id", "integer", "NO", pk=True),
    col("account_type", "USER-DEFINED", "NO", udt_name="account_type_enum",
        enum_values=["Checking", "Savings", "Credit"]),
    col("balance", "numeric", "NO"),
]


class TestInference:
    @pytest.mark.parametrize("column, widget", [
        (col("account_type", "USER-DEFINED", udt_name="account_type_enum"), "enum"),
        (col("status", "account_status_enum"), "enum"),
        (col("opened", "date"), "date"),
        (col("transaction_date", "timestamp without time zone"), "datetime"),
        (col("expiration_date", "character varying"), "date"),
        (col("balance", "numeric"), "number"),
        (col("amount", "decimal(12,2)"), "number"),
        (col("term_months", "integer"), "number"),
        (col("rate", "double precision"), "number"),
        (col("email", "character varying"), "text"),
    ])
    def test_widget_for(self, column, widget):
        assert widget_for(column) == widget

    def test_skip_rules(self):
        assert should_skip_field("created_at")
        assert should_skip_field("login_timestamp")
        assert should_skip_field("opened_on", "now()")
        assert not should_skip_field("first_name", "'x'::text")

    @pytest.mark.parametrize("name, label", [
        ("customer_id", "Customer ID"),
        ("date_of_birth", "Date Of Birth"),
        ("email", "Email"),
    ])
    def test_labels(self, name, label):
        assert field_label(name) == label

    def test_primary_key_column(self):
        assert primary_key_column(CUSTOMER, "Customer") == "customer_id"
        assert primary_key_column([col("card_number")], "CreditCard") == "creditcard_id"


class TestBuildForm:
    def test_insert_form(self):
        fields = {f.name: f for f in build_form(CUSTOMER, "insert")}
        assert "created_at" not in fields
        assert fields["first_name"].required
        assert not fields["customer_id"].required
        assert not fields["customer_id"].disabled
        assert fields["email"].input_type == "email"
        assert fields["phone"].placeholder == "555-123-4567"
        assert fields["date_of_birth"].widget == "date"

    def test_update_disables_id_fields(self):
        fields = {f.name: f for f in build_form(CUSTOMER, "update")}
        assert fields["customer_id"].disabled
        assert not fields["first_name"].disabled

    def test_delete_disables_everything(self):
        assert all(f.disabled for f in build_form(CUSTOMER, "delete"))

    def test_enum_options(self):
        fields = {f.name: f for f in build_form(ACCOUNT)}
        assert fields["account_type"].widget == "enum"
        assert fields["account_type"].options == ["Checking", "Savings", "Credit"]

    def test_unknown_operation(self):
        with pytest.raises(ValueError):
            build_form(CUSTOMER, "upsert")


class TestValidation:
    def test_required(self):
        assert validate_field(col("first_name", nullable="NO"), "") == "First Name is required"
        assert validate_field(col("nickname"), "") is None
        # id columns are generated by the database
        assert validate_field(col("branch_id", "integer", "NO"), "") is None

    @pytest.mark.parametrize("column, value, ok", [
        (col("term_months", "integer"), "12", True),
        (col("term_months", "integer"), "12.5", False),
        (col("term_months", "integer"), "twelve", False),
        (col("rate", "numeric"), "3.5", True),
        (col("rate", "numeric"), "nan", False),
        (col("credit_score", "integer"), "300", True),
        (col("credit_score", "integer"), "851", False),
        (col("balance", "numeric"), "0", True),
        (col("balance", "numeric"), "-1", False),
        (col("amount", "numeric"), "0", False),
        (col("amount_paid", "numeric"), "0.01", True),
        (col("email"), "user@example.com", True),
        (col("email"), "user@example", False),
        (col("phone"), "555-123-4567", True),
        (col("phone"), "5551234567", True),
        (col("phone"), "555 123 4567", False),
        (col("card_number"), "1234567890123456", True),
        (col("card_number"), "1234-5678-9012-3456", False),
        (col("date_of_birth", "date"), "1990-02-28", True),
        (col("date_of_birth", "date"), "1990-02-30", False),
        (col("transaction_date", "timestamp"), "2024-01-01 10:00:00", True),
    ])
    def test_field_rules(self, column, value, ok):
        assert (validate_field(column, value) is None) is ok

    def test_enum_value_must_be_an_option(self):
        assert validate_field(ACCOUNT[1], "Savings") is None
        assert validate_field(ACCOUNT[1], "Brokerage") is not None

    def test_validate_form_collects_errors(self):
        data = {"customer_id": "", "first_name": "", "email": "bad",
                "phone": "", "date_of_birth": "2000-01-01", "credit_score": "900"}
        errors = validate_form(CUSTOMER, data)
        assert set(errors) == {"first_name", "email", "credit_score"}


class TestSubmission:
    def test_initial_form_data_skips_generated_columns(self):
        data = initial_form_data(CUSTOMER)
        assert "created_at" not in data
        assert set(data.values()) == {""}

    def test_record_to_form_data(self):
        record = {"customer_id": 1, "email": None, "created_at": "2024-01-01T00:00:00"}
        assert record_to_form_data(record) == {"customer_id": "1", "email": ""}

    def test_insert_payload(self):
        data = {"customer_id": "", "first_name": " Ada ", "email": "",
                "phone": "555-123-4567", "date_of_birth": "1815-12-10", "credit_score": "800"}
        payload = prepare_submission(CUSTOMER, data, "insert")
        assert payload == {
            "first_name": "Ada",
            "email": None,
            "phone": "555-123-4567",
            "date_of_birth": "1815-12-10",
            "credit_score": 800,
        }

    def test_update_payload_keeps_key_and_converts_numbers(self):
        data = {"account_id": "3", "account_type": "Savings", "balance": "10.50"}
        payload = prepare_submission(ACCOUNT, data, "update")
        assert payload == {"account_id": 3, "account_type": "Savings", "balance": 10.5}

    def test_unknown_keys_are_dropped(self):
        assert prepare_submission(ACCOUNT, {"nope": "1"}) == {}

    def test_timestamp_keeps_time_of_day_through_update(self):
        columns = [col("transaction_id", "integer", "NO", pk=True),
                   col("transaction_date", "timestamp without time zone", "NO")]
        record = {"transaction_id": 5, "transaction_date": "2024-03-01 14:30:00"}
        fields = {f.name: f for f in build_form(columns, "update", "Transaction")}
        assert fields["transaction_date"].widget == "datetime"
        data = record_to_form_data(record)
        assert validate_form(columns, data) == {}
        payload = prepare_submission(columns, data, "update")
        assert payload["transaction_date"] == "2024-03-01 14:30:00"

    def test_large_integers_are_exact(self):
        big = 2 ** 53 + 1
        columns = [col("amount_cents", "bigint")]
        assert prepare_submission(columns, {"amount_cents": str(big)}) == {"amount_cents": big}
        assert prepare_submission(columns, {"amount_cents": "12.0"}) == {"amount_cents": 12}


class TestHelpText:
    def test_fields_carry_descriptions(self):
        fields = {f.name: f for f in build_form(CUSTOMER, "insert", "Customer")}
        assert fields["credit_score"].help == "Credit score (300-850)"
        assert fields["phone"].help == "Phone number (e.g., 555-123-4567)"

    def test_interest_rate_description_depends_on_table(self):
        columns = [col("interest_rate", "numeric")]
        loan = build_form(columns, "insert", "Loan")[0]
        account = build_form(columns, "insert", "Account")[0]
        assert loan.help == "Annual interest rate for the loan (percentage)"
        assert account.help == "Annual interest rate for the account (percentage)"

    def test_unknown_columns_have_no_description(self):
        assert build_form([col("nickname")])[0].help == ""
