"""
The Query Explorer menu: fixed analytical queries over the banking schema.

Parameters are literal 'name' placeholders; the backend substitutes them
textually before running the SQL.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class CannedQuery:
    id: str
    name: str
    description: str
    query: str
    parameters: Dict[str, Any] = field(default_factory=dict)


PREDEFINED_QUERIES: List[CannedQuery] = [
    CannedQuery(
        id="query1",
        name="Customer Account Details",
        description="List customers with their account details and branch name.",
        query="""
            SELECT c.customer_id, c.first_name, c.last_name, a.account_type, a.balance, b.branch_name
            FROM Customer c
            JOIN Account a ON c.customer_id = a.customer_id
            JOIN Branch b ON a.branch_id = b.branch_id
        """,
    ),
    CannedQuery(
        id="query2",
        name="Transactions with Customer Details",
        description="List transactions along with customer and branch details for a specific branch.",
        query="""
            SELECT t.transaction_id, t.amount, t.transaction_date, c.first_name, c.last_name, b.branch_name
            FROM Transaction t
            JOIN Account a ON t.account_id = a.account_id
            JOIN Customer c ON a.customer_id = c.customer_id
            JOIN Branch b ON a.branch_id = b.branch_id
            WHERE b.branch_name = 'branchName'
        """,
        parameters={"branchName": "Downtown Branch"},
    ),
    CannedQuery(
        id="query3",
        name="Branch Account Statistics",
        description="Total number of accounts and average balance per branch.",
        query="""
            SELECT b.branch_id, b.branch_name, COUNT(a.account_id) AS num_accounts, AVG(a.balance) AS avg_balance
            FROM Branch b
            JOIN Account a ON b.branch_id = a.branch_id
            GROUP BY b.branch_id, b.branch_name
            HAVING COUNT(a.account_id) > 0
        """,
    ),
    CannedQuery(
        id="query4",
        name="Employee Customer Service Performance",
        description="List each employee with their branch and the number of distinct customers served.",
        query="""
            SELECT e.employee_id, e.first_name, e.last_name, b.branch_name, COUNT(DISTINCT a.customer_id) AS num_customers
            FROM Employee e
            JOIN Branch b ON e.branch_id = b.branch_id
            JOIN Account a ON b.branch_id = a.branch_id
            GROUP BY e.employee_id, e.first_name, e.last_name, b.branch_name
        """,
    ),
    CannedQuery(
        id="query5",
        name="Transaction Amount by Account Type",
        description="For each account type, calculate the total transaction amount.",
        query="""
            SELECT a.account_type, SUM(t.amount) AS total_transaction_amount
            FROM Account a
            JOIN Transaction t ON a.account_id = t.account_id
            GROUP BY a.account_type
            HAVING SUM(t.amount) > 0
        """,
    ),
    CannedQuery(
        id="query6",
        name="Customers with Above-Average Credit Scores",
        description="Retrieve customers whose credit score is above the overall average.",
        query="""
            SELECT c.customer_id, c.first_name, c.last_name, c.credit_score, a.account_id
            FROM Customer c
            JOIN Account a ON c.customer_id = a.customer_id
            WHERE c.credit_score > (SELECT AVG(credit_score) FROM Customer)
        """,
    ),
    CannedQuery(
        id="query7",
        name="Transactions per Customer",
        description="List each customer along with the total number of transactions they have performed.",
        query="""
            SELECT c.customer_id, c.first_name, c.last_name, COUNT(t.transaction_id) AS transaction_count
            FROM Customer c
            JOIN Account a ON c.customer_id = a.customer_id
            JOIN Transaction t ON a.account_id = t.account_id
            GROUP BY c.customer_id, c.first_name, c.last_name
        """,
    ),
    CannedQuery(
        id="query8",
        name="Branches with Above-Average Account Balances",
        description="Retrieve branches whose combined account balances exceed the average across all branches.",
        query="""
            SELECT b.branch_id, b.branch_name, SUM(a.balance) AS branch_total_balance
            FROM Branch b
            JOIN Account a ON b.branch_id = a.branch_id
            GROUP BY b.branch_id, b.branch_name
            HAVING SUM(a.balance) > (
                SELECT AVG(total_balance)
                FROM (
                    SELECT SUM(balance) AS total_balance
                    FROM Account GROUP BY branch_id
                ) AS sub
            )
        """,
    ),
    CannedQuery(
        id="query9",
        name="Employees with Above-Average Audit Logs",
        description="Retrieve employees with their branch and log count if their audit log count is at least the average.",
        query="""
            SELECT
                e.employee_id,
                e.first_name,
                e.last_name,
                b.branch_name,
                (SELECT COUNT(*)
                 FROM AuditLog al
                 WHERE al.user_type = 'Employee'
                   AND al.user_id = e.employee_id) AS log_count
            FROM Employee e
            JOIN Branch b ON e.branch_id = b.branch_id
            WHERE (SELECT COUNT(*)
                   FROM AuditLog al
                   WHERE al.user_type = 'Employee'
                     AND al.user_id = e.employee_id) >=
                  (SELECT AVG(logs)
                   FROM (
                        SELECT COUNT(*) AS logs
                        FROM AuditLog
                        WHERE user_type = 'Employee'
                        GROUP BY user_id
                   ) AS avg_logs)
        """,
    ),
    CannedQuery(
        id="query10",
        name="Customers with At Least One Account",
        description="Retrieve customers who hold at least one account along with their representative branch.",
        query="""
            SELECT
                c.customer_id,
                c.first_name,
                c.last_name,
                MIN(b.branch_name) AS representative_branch,
                (SELECT COUNT(*) FROM Account a2 WHERE a2.customer_id = c.customer_id) AS account_count
            FROM Customer c
            JOIN Account a ON c.customer_id = a.customer_id
            JOIN Branch b ON a.branch_id = b.branch_id
            GROUP BY c.customer_id, c.first_name, c.last_name
            HAVING (SELECT COUNT(*) FROM Account a2 WHERE a2.customer_id = c.customer_id) >= 1
        """,
    ),
    CannedQuery(
        id="query11",
        name="Credit Card and Loan Overview",
        description="For each customer, show their credit card details along with the total amount of their loans.",
        query="""
            SELECT c.customer_id, c.first_name, c.last_name, cc.card_number,
                   (SELECT SUM(l.amount) FROM Loan l WHERE l.customer_id = c.customer_id) AS total_loan_amount
            FROM Customer c
            JOIN CreditCard cc ON c.customer_id = cc.customer_id
        """,
    ),
    CannedQuery(
        id="query12",
        name="Branch Performance Metrics",
        description="For each branch, display customers, loans, and transaction metrics.",
        query="""
            SELECT b.branch_id, b.branch_name,
                   COUNT(DISTINCT a.customer_id) AS total_customers,
                   COALESCE(SUM(l.amount), 0) AS total_loans,
                   COALESCE(SUM(t.amount), 0) AS total_transactions
            FROM Branch b
            JOIN Account a ON b.branch_id = a.branch_id
            LEFT JOIN Loan l ON a.customer_id = l.customer_id
            LEFT JOIN Transaction t ON a.account_id = t.account_id
            GROUP BY b.branch_id, b.branch_name
        """,
    ),
]

_BY_ID = {q.id: q for q in PREDEFINED_QUERIES}


def get_canned_query(query_id: str) -> CannedQuery:
    """Look up a menu entry by id; KeyError if there is none."""
    return _BY_ID[query_id]
