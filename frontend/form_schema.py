"""
form_schema.py - Schema-driven record forms.

Turns the column list returned by GET /api/tables/{name}/schema into input
fields (widget, label, required/disabled flags) and validates user input
before it is sent to the backend.  All values arrive as strings from the UI.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

OPERATIONS = ("insert", "update", "delete")

_NUMBER_HINTS = ("int", "decimal", "numeric", "real", "double", "float")

EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
PHONE_RE = re.compile(r"^\d{3}-?\d{3}-?\d{4}$")
CARD_NUMBER_RE = re.compile(r"^\d{16}$")

PLACEHOLDERS = {
    "credit_score": "Enter value between 300-850",
    "balance": "Enter amount in dollars",
    "amount": "Enter amount in dollars",
    "credit_limit": "Enter amount in dollars",
    "interest_rate": "Enter rate (e.g., 3.5 for 3.5%)",
    "email": "user@example.com",
    "phone": "555-123-4567",
    "card_number": "1234567890123456",
    "address": "Full street address",
    "identification_number": "Government ID number",
}

INPUT_TYPES = {"email": "email", "phone": "tel", "card_number": "tel"}

FIELD_DESCRIPTIONS = {
    # Customer
    "customer_id": "Unique identifier for the customer",
    "first_name": "Customer's first name",
    "last_name": "Customer's last name",
    "date_of_birth": "Customer's birth date (YYYY-MM-DD)",
    "email": "Customer's email address (e.g., user@example.com)",
    "phone": "Phone number (e.g., 555-123-4567)",
    "address": "Customer's full address",
    "identification_number": "Government-issued ID number",
    "credit_score": "Credit score (300-850)",
    # Account
    "account_id": "Unique identifier for the account",
    "account_type": "Type of account (Checking, Savings, Credit)",
    "balance": "Current account balance in dollars",
    "account_interest_rate": "Annual interest rate for the account (percentage)",
    "status": "Account status (Active, Inactive, Flagged)",
    # Branch
    "branch_id": "Unique identifier for the branch",
    "branch_name": "Name of the branch",
    # Transaction
    "transaction_id": "Unique identifier for the transaction",
    "transaction_type": "Type of transaction (Deposit, Withdrawal, Transfer, Payment)",
    "amount": "Transaction amount in dollars (must be positive)",
    "transaction_date": "Date of transaction (YYYY-MM-DD)",
    # CreditCard
    "card_id": "Unique identifier for the credit card",
    "card_number": "16-digit credit card number",
    "expiration_date": "Card expiration date (YYYY-MM-DD)",
    "credit_limit": "Credit limit in dollars",
    # Loan
    "loan_id": "Unique identifier for the loan",
    "loan_type": "Type of loan (Personal, Home, Auto, Business)",
    "loan_interest_rate": "Annual interest rate for the loan (percentage)",
    "term_months": "Loan term length in months",
    "date_taken_out": "Date when loan was issued (YYYY-MM-DD)",
    # Employee
    "employee_id": "Unique identifier for the employee",
    "role": "Employee role (Teller, Loan Officer, Administrator, IT, Manager)",
    "password_hash": "Hashed password for employee access",
    # Beneficiary
    "beneficiary_id": "Unique identifier for the beneficiary",
    "beneficiary_name": "Full name of the beneficiary",
    "relationship": "Relationship to the account holder",
    # Payment
    "payment_id": "Unique identifier for the payment",
    "amount_paid": "Payment amount in dollars (must be positive)",
    "payment_date": "Date payment was made (YYYY-MM-DD)",
}


@dataclass
class FormField:
    name: str
    label: str
    widget: str  # "enum" | "date" | "datetime" | "number" | "text"
    required: bool
    disabled: bool
    input_type: str = "text"
    placeholder: str = ""
    options: List[str] = field(default_factory=list)
    help: str = ""


# ── Type inference ──────────────────────────────────────────────────────────

def _type_of(column: Dict) -> str:
    return (column.get("data_type") or "").lower()


def is_enum_field(column: Dict) -> bool:
    if column.get("enum_values"):
        return True
    return "enum" in _type_of(column) or "enum" in (column.get("udt_name") or "").lower()


def is_date_field(column: Dict) -> bool:
    return _type_of(column) == "date" or "date" in column["column_name"]


def is_number_field(column: Dict) -> bool:
    dtype = _type_of(column)
    return any(h in dtype for h in _NUMBER_HINTS)


def is_integer_field(column: Dict) -> bool:
    return "int" in _type_of(column)


def is_timestamp_field(column: Dict) -> bool:
    return _type_of(column).startswith(("timestamp", "datetime"))


def widget_for(column: Dict) -> str:
    if is_enum_field(column):
        return "enum"
    if is_timestamp_field(column):
        # time of day must survive an update
        return "datetime"
    if is_date_field(column):
        return "date"
    if is_number_field(column):
        return "number"
    return "text"


def should_skip_field(column_name: str, column_default: Optional[str] = None) -> bool:
    """Auto-generated columns never appear in forms."""
    return ("timestamp" in column_name
            or column_name == "created_at"
            or bool(column_default and "now()" in column_default))


def _description_key(column_name: str, table_name: str) -> str:
    # interest_rate exists on both Account and Loan
    if column_name == "interest_rate":
        return "loan_interest_rate" if table_name.lower() == "loan" else "account_interest_rate"
    return column_name


def field_label(column_name: str) -> str:
    """customer_id -> 'Customer ID', date_of_birth -> 'Date Of Birth'."""
    name = re.sub(r"_id$", " ID", column_name)
    return " ".join(w[:1].upper() + w[1:] for w in name.split("_"))


def primary_key_column(columns: List[Dict], table_name: str) -> str:
    for col in columns:
        if col.get("is_primary_key"):
            return col["column_name"]
    return f"{table_name.lower()}_id"


def _is_required(column: Dict) -> bool:
    return (column.get("is_nullable") == "NO"
            and not column["column_name"].endswith("_id")
            and not should_skip_field(column["column_name"], column.get("column_default")))


# ── Form building ───────────────────────────────────────────────────────────

def build_form(columns: List[Dict], operation: str = "insert",
               table_name: str = "") -> List[FormField]:
    if operation not in OPERATIONS:
        raise ValueError(f"Unknown operation '{operation}'")
    fields = []
    for col in columns:
        name = col["column_name"]
        if should_skip_field(name, col.get("column_default")):
            continue
        widget = widget_for(col)
        fields.append(FormField(
            name=name,
            label=field_label(name),
            widget=widget,
            required=_is_required(col),
            disabled=operation == "delete" or (operation == "update" and name.endswith("_id")),
            input_type=INPUT_TYPES.get(name, "text"),
            placeholder=PLACEHOLDERS.get(name, ""),
            options=list(col.get("enum_values") or []) if widget == "enum" else [],
            help=FIELD_DESCRIPTIONS.get(_description_key(name, table_name), ""),
        ))
    return fields


def initial_form_data(columns: List[Dict]) -> Dict[str, str]:
    return {c["column_name"]: "" for c in columns
            if not should_skip_field(c["column_name"], c.get("column_default"))}


def record_to_form_data(record: Dict[str, Any]) -> Dict[str, str]:
    """Load a fetched row into the form (NULL becomes blank)."""
    return {k: "" if v is None else str(v)
            for k, v in record.items() if not should_skip_field(k)}


# ── Validation ──────────────────────────────────────────────────────────────

def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _parse_date(value: str) -> bool:
    for parse in (date.fromisoformat, datetime.fromisoformat):
        try:
            parse(value)
            return True
        except ValueError:
            continue
    return False


def _range_error(name: str, label: str, number: float) -> Optional[str]:
    if name == "credit_score" and not 300 <= number <= 850:
        return "Credit score must be between 300 and 850"
    if name == "balance" and number < 0:
        return "Balance cannot be negative"
    if name in ("amount", "amount_paid") and number <= 0:
        return f"{label} must be greater than 0"
    return None


def validate_field(column: Dict, value: Any) -> Optional[str]:
    """Return an error message for value, or None when it is acceptable."""
    name = column["column_name"]
    label = field_label(name)

    if _is_blank(value):
        return f"{label} is required" if _is_required(column) else None

    text = str(value).strip()

    if is_number_field(column):
        try:
            number = float(text)
        except ValueError:
            return f"{label} must be a number"
        if not math.isfinite(number):
            return f"{label} must be a number"
        if is_integer_field(column) and not number.is_integer():
            return f"{label} must be an integer"
        error = _range_error(name, label, number)
        if error:
            return error

    if name == "email" and not EMAIL_RE.search(text):
        return "Please enter a valid email address (e.g., user@example.com)"
    if name == "phone" and not PHONE_RE.match(text):
        return "Please enter a valid phone number (e.g., 555-123-4567)"
    if name == "card_number" and not CARD_NUMBER_RE.match(text):
        return "Card number must be exactly 16 digits without spaces or dashes"

    if is_date_field(column) and not _parse_date(text):
        return "Please enter a valid date in YYYY-MM-DD format"

    options = column.get("enum_values")
    if options and text not in options:
        return f"{label} must be one of: {', '.join(options)}"

    return None


def validate_form(columns: List[Dict], data: Dict[str, Any]) -> Dict[str, str]:
    errors = {}
    for col in columns:
        name = col["column_name"]
        if should_skip_field(name, col.get("column_default")):
            continue
        error = validate_field(col, data.get(name))
        if error:
            errors[name] = error
    return errors


# ── Submission ──────────────────────────────────────────────────────────────

def _to_int(value: Any) -> int:
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        # "12.0" passes integer validation
        return int(float(text))


def prepare_submission(columns: List[Dict], data: Dict[str, Any],
                       operation: str = "insert") -> Dict[str, Any]:
    """
    Convert form strings into the JSON payload for the backend.

    Numeric columns become int/float, blanks become None.  On insert a
    blank primary key is left out so the database generates it.
    """
    by_name = {c["column_name"]: c for c in columns}
    payload: Dict[str, Any] = {}
    for name, value in data.items():
        col = by_name.get(name)
        if col is None or should_skip_field(name, col.get("column_default")):
            continue
        if _is_blank(value):
            if operation == "insert" and (col.get("is_primary_key") or col.get("column_default")):
                continue
            payload[name] = None
        elif is_integer_field(col):
            payload[name] = _to_int(value)
        elif is_number_field(col):
            payload[name] = float(value)
        else:
            payload[name] = value.strip() if isinstance(value, str) else value
    return payload
