from components.results import column_title, display_rows


def test_column_title():
    assert column_title("total_loan_amount") == "Total Loan Amount"
    assert column_title("num_accounts") == "Num Accounts"


def test_display_rows_spells_out_nulls():
    rows = [{"customer_id": 1, "email": None}]
    assert display_rows(rows) == [{"Customer Id": "1", "Email": "null"}]
