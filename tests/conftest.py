import sqlite3

import pytest
from fastapi.testclient import TestClient

from db_connectors import ConnectionConfig, DBType, SQLiteConnector
from main import app, get_db

# A small slice of the banking schema.  Loan deliberately has no declared
# primary key so the <table>_id convention is exercised.
BANK_SCHEMA = """
CREATE TABLE Branch (
    branch_id   INTEGER PRIMARY KEY,
    branch_name TEXT NOT NULL,
    address     TEXT
);
CREATE TABLE Customer (
    customer_id   INTEGER PRIMARY KEY,
    first_name    TEXT NOT NULL,
    last_name     TEXT NOT NULL,
    email         TEXT,
    credit_score  INTEGER,
    date_of_birth DATE,
    created_at    TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE Account (
    account_id   INTEGER PRIMARY KEY,
    customer_id  INTEGER NOT NULL REFERENCES Customer(customer_id),
    branch_id    INTEGER NOT NULL REFERENCES Branch(branch_id),
    account_type TEXT NOT NULL,
    balance      DECIMAL(12, 2) NOT NULL DEFAULT 0
);
CREATE TABLE Loan (
    loan_id     INTEGER,
    customer_id INTEGER,
    amount      DECIMAL(12, 2)
);
CREATE VIEW customer_summary AS
    SELECT c.customer_id, c.first_name, COUNT(a.account_id) AS accounts
    FROM Customer c
    LEFT JOIN Account a ON a.customer_id = c.customer_id
    GROUP BY c.customer_id, c.first_name;

INSERT INTO Branch VALUES (1, 'Downtown Branch', '1 Main St'), (2, 'Uptown Branch', '99 High St');
INSERT INTO Customer (customer_id, first_name, last_name, email, credit_score)
    VALUES (1, 'Ada', 'Lovelace', 'ada@example.com', 800),
           (2, 'Alan', 'Turing', 'alan@example.com', 700);
INSERT INTO Account VALUES (1, 1, 1, 'Checking', 1500), (2, 2, 2, 'Savings', 250), (3, 1, 2, 'Savings', 100);
INSERT INTO Loan VALUES (10, 1, 5000);
"""


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "bank.db"
    conn = sqlite3.connect(path)
    conn.executescript(BANK_SCHEMA)
    conn.close()
    return str(path)


def _sqlite(db_path):
    return SQLiteConnector(ConnectionConfig(db_type=DBType.SQLITE, file_path=db_path)).connect()


@pytest.fixture
def connector(db_path):
    c = _sqlite(db_path)
    yield c
    c.disconnect()


@pytest.fixture
def client(db_path):
    """API client bound to the temporary SQLite database."""

    def get_db_override():
        c = _sqlite(db_path)
        try:
            yield c
        finally:
            c.disconnect()

    app.dependency_overrides[get_db] = get_db_override
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
