"""
db_connectors.py - Unified database connection layer
Supports: SQLite, PostgreSQL

Architecture
------------
BaseConnector       — abstract interface + shared CRUD statement builder
SQLiteConnector     — SQLite via stdlib sqlite3 (local files, tests)
PostgreSQLConnector — PostgreSQL via psycopg2, introspected through information_schema
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Enums & config
# ---------------------------------------------------------------------------

class DBType(str, Enum):
    SQLITE      = "sqlite"
    POSTGRESQL  = "postgresql"


@dataclass
class ConnectionConfig:
    db_type: DBType
    # SQLite
    file_path: Optional[str] = None
    # Network databases
    host: Optional[str] = None
    port: Optional[int] = None
    database: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    schema: str = "public"


class ObjectNotFound(LookupError):
    """Raised when a table or view name does not exist in the catalog."""


# ---------------------------------------------------------------------------
# Base connector: interface + shared CRUD builder
# ---------------------------------------------------------------------------

class BaseConnector:
    """
    Abstract base for all database connectors.

    Metadata methods return normalised dicts shaped like the rows of
    information_schema, so main.py and the front end never need to know
    which database they are talking to.

    The CRUD helpers (select/insert/update/delete) are implemented here
    once.  Table and column names are resolved against the catalog and
    quoted before they reach SQL; values always travel as bound parameters.
    Subclasses only supply the connection, execute() and the catalog queries.
    """

    placeholder = "?"

    def __init__(self, config: ConnectionConfig):
        self.config = config
        self._conn = None

    # ── Connection lifecycle ────────────────────────────────────────────────

    def connect(self) -> "BaseConnector":
        raise NotImplementedError

    def disconnect(self) -> None:
        if self._conn:
            try:
                self._conn.close()
            finally:
                self._conn = None

    # ── Query execution ─────────────────────────────────────────────────────

    def execute(self, sql: str, params=None) -> List[Dict]:
        """Run one statement and return a list of row dicts ([] if none)."""
        raise NotImplementedError

    # ── Metadata extraction, implemented by each subclass ──────────────────

    def list_tables(self) -> List[Dict]:
        """Returns [{"table_name": ...}] for base tables, ordered by name."""
        raise NotImplementedError

    def list_views(self) -> List[Dict]:
        """Returns [{"table_name": ...}] for views, ordered by name."""
        raise NotImplementedError

    def get_columns(self, table: str) -> List[Dict]:
        """
        Returns list of dicts with keys:
            column_name, data_type, is_nullable ("YES"/"NO"),
            column_default, udt_name, is_primary_key (bool), enum_values
        """
        raise NotImplementedError

    # ── Identifier handling ─────────────────────────────────────────────────

    def _quote(self, name: str) -> str:
        """Wrap an identifier in double-quotes (ANSI SQL standard)."""
        return '"' + name.replace('"', '""') + '"'

    def _qualified_table(self, table: str) -> str:
        """Return a quoted table reference for data queries."""
        return self._quote(table)

    @staticmethod
    def _match_name(name: str, rows: List[Dict], kind: str) -> str:
        wanted = name.lower()
        for r in rows:
            if r["table_name"].lower() == wanted:
                return r["table_name"]
        raise ObjectNotFound(f"{kind} '{name}' not found")

    def resolve_table(self, name: str) -> str:
        """Map a user-supplied table name onto its catalog spelling."""
        return self._match_name(name, self.list_tables(), "Table")

    def resolve_view(self, name: str) -> str:
        return self._match_name(name, self.list_views(), "View")

    def primary_key(self, table: str, columns: Optional[List[Dict]] = None) -> str:
        """
        The introspected primary-key column of table.  Tables without a
        declared key fall back to the <table>_id naming convention.
        """
        columns = columns if columns is not None else self.get_columns(table)
        for col in columns:
            if col.get("is_primary_key"):
                return col["column_name"]
        return f"{table.lower()}_id"

    def _checked_columns(self, data: Dict[str, Any], columns: List[Dict]) -> List[str]:
        if not data:
            raise ValueError("No data provided")
        known = {c["column_name"] for c in columns}
        unknown = [k for k in data if k not in known]
        if unknown:
            raise ValueError(f"Unknown column(s): {', '.join(sorted(unknown))}")
        return list(data)

    # ── Read-only guard ─────────────────────────────────────────────────────

    # String literals, quoted identifiers and comments, consumed left to right
    # so a "--" inside a literal is not mistaken for a comment.
    _NOISE_PATTERN = re.compile(
        r"'(?:[^']|'')*'|\"(?:[^\"]|\"\")*\"|--[^\n]*|/\*.*?\*/",
        re.DOTALL,
    )
    _WRITE_PATTERN = re.compile(
        r"\b(INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|TRUNCATE|MERGE|CALL|EXEC|EXECUTE|"
        r"GRANT|REVOKE|INTO|COPY|VACUUM|ATTACH|DETACH|REINDEX|LOCK)\b",
        re.IGNORECASE,
    )
    # replace() is also a function, so these are only checked as the leading verb
    _LEADING_WRITE_PATTERN = re.compile(r"^\s*(REPLACE|SET|RESET)\b", re.IGNORECASE)

    def assert_read_only(self, sql: str) -> None:
        """
        Raise ValueError if sql is a write or DDL statement.

        Comments and literals are ignored, only a single statement is
        accepted, and write keywords are rejected anywhere in it so that
        data-modifying CTEs and SELECT ... INTO are caught.

        Allowed (not exhaustive, blacklist approach):
            SELECT, WITH, SHOW, DESCRIBE, EXPLAIN, PRAGMA, VALUES
        """
        bare = self._NOISE_PATTERN.sub(" ", sql)
        head, _, rest = bare.partition(";")
        if rest.strip(" \t\r\n;"):
            raise ValueError(
                "Multiple statements are not permitted. "
                "Query execution is read-only."
            )
        match = self._LEADING_WRITE_PATTERN.match(head) or self._WRITE_PATTERN.search(head)
        if match:
            raise ValueError(
                f"Write operation '{match.group(1).upper()}' is not permitted. "
                "Query execution is read-only."
            )

    # ── Shared CRUD builder (inherited by all subclasses) ───────────────────

    def select_rows(self, relation: str, limit: int = 100) -> List[Dict]:
        tbl = self._qualified_table(relation)
        return self.execute(f"SELECT * FROM {tbl} LIMIT {int(limit)}")

    def insert_row(self, table: str, data: Dict[str, Any]) -> Dict:
        """Insert one record and return it as stored (defaults filled in)."""
        keys = self._checked_columns(data, self.get_columns(table))
        cols = ", ".join(self._quote(k) for k in keys)
        marks = ", ".join(self.placeholder for _ in keys)
        rows = self.execute(
            f"INSERT INTO {self._qualified_table(table)} ({cols}) "
            f"VALUES ({marks}) RETURNING *",
            [data[k] for k in keys],
        )
        return rows[0] if rows else {}

    def update_row(self, table: str, record_id: Any, data: Dict[str, Any]) -> Optional[Dict]:
        """Update the record whose key equals record_id; None if it does not exist."""
        columns = self.get_columns(table)
        keys = self._checked_columns(data, columns)
        pk = self.primary_key(table, columns)
        assignments = ", ".join(f"{self._quote(k)} = {self.placeholder}" for k in keys)
        rows = self.execute(
            f"UPDATE {self._qualified_table(table)} SET {assignments} "
            f"WHERE {self._quote(pk)} = {self.placeholder} RETURNING *",
            [data[k] for k in keys] + [record_id],
        )
        return rows[0] if rows else None

    def delete_row(self, table: str, record_id: Any) -> Optional[Dict]:
        """Delete the record whose key equals record_id; None if it does not exist."""
        pk = self.primary_key(table)
        rows = self.execute(
            f"DELETE FROM {self._qualified_table(table)} "
            f"WHERE {self._quote(pk)} = {self.placeholder} RETURNING *",
            [record_id],
        )
        return rows[0] if rows else None


# ---------------------------------------------------------------------------
# SQLite connector
# ---------------------------------------------------------------------------

class SQLiteConnector(BaseConnector):
    """
    SQLite via Python stdlib sqlite3.
    Uses sqlite_master and PRAGMA commands for metadata (SQLite has no
    information_schema); results are reshaped to the same keys.
    """

    def connect(self) -> "SQLiteConnector":
        import sqlite3
        self._conn = sqlite3.connect(
            self.config.file_path, check_same_thread=False, isolation_level=None
        )
        self._conn.row_factory = sqlite3.Row
        return self

    def execute(self, sql: str, params=None) -> List[Dict]:
        cur = self._conn.cursor()
        try:
            cur.execute(sql, params or [])
            if cur.description is None:
                return []
            return [dict(r) for r in cur.fetchall()]
        finally:
            cur.close()

    def _master(self, kind: str) -> List[Dict]:
        return self.execute(
            "SELECT name AS table_name FROM sqlite_master "
            "WHERE type = ? AND name NOT LIKE 'sqlite_%' "
            "ORDER BY name",
            [kind],
        )

    def list_tables(self) -> List[Dict]:
        return self._master("table")

    def list_views(self) -> List[Dict]:
        return self._master("view")

    def get_columns(self, table: str) -> List[Dict]:
        rows = self.execute(f"PRAGMA table_info({self._quote(table)})")
        return [
            {
                "column_name":    r["name"],
                "data_type":      (r["type"] or "").lower(),
                "is_nullable":    "NO" if r["notnull"] else "YES",
                "column_default": r["dflt_value"],
                "udt_name":       (r["type"] or "").lower(),
                "is_primary_key": bool(r["pk"]),
                "enum_values":    [],
            }
            for r in rows
        ]


# ---------------------------------------------------------------------------
# PostgreSQL connector
# ---------------------------------------------------------------------------

class PostgreSQLConnector(BaseConnector):
    """
    PostgreSQL via psycopg2.

    Runs in autocommit mode: every request issues exactly one statement, so
    each statement is its own transaction.  Catalog lookups go through
    information_schema, restricted to the configured schema; enum labels
    come from pg_enum so forms can offer them as choices.
    """

    placeholder = "%s"

    def _qualified_table(self, table: str) -> str:
        return f"{self._quote(self.config.schema)}.{self._quote(table)}"

    def connect(self) -> "PostgreSQLConnector":
        import psycopg2
        import psycopg2.extras
        self._conn = psycopg2.connect(
            host=self.config.host,
            port=self.config.port or 5432,
            dbname=self.config.database,
            user=self.config.username,
            password=self.config.password,
        )
        self._conn.autocommit = True
        self._dict_cursor_factory = psycopg2.extras.RealDictCursor
        return self

    def execute(self, sql: str, params=None) -> List[Dict]:
        with self._conn.cursor(cursor_factory=self._dict_cursor_factory) as cur:
            cur.execute(sql, params)
            if cur.description is None:
                return []
            return [dict(r) for r in cur.fetchall()]

    def list_tables(self) -> List[Dict]:
        return self.execute(
            """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = %s
              AND table_type = 'BASE TABLE'
            ORDER BY table_name
            """,
            [self.config.schema],
        )

    def list_views(self) -> List[Dict]:
        return self.execute(
            """
            SELECT table_name
            FROM information_schema.views
            WHERE table_schema = %s
            ORDER BY table_name
            """,
            [self.config.schema],
        )

    def get_enum_types(self) -> Dict[str, List[str]]:
        """Map enum type name -> labels in declaration order."""
        rows = self.execute(
            """
            SELECT t.typname AS type_name, e.enumlabel AS label
            FROM pg_type t
            JOIN pg_enum e ON e.enumtypid = t.oid
            ORDER BY t.typname, e.enumsortorder
            """
        )
        enums: Dict[str, List[str]] = {}
        for r in rows:
            enums.setdefault(r["type_name"], []).append(r["label"])
        return enums

    def get_columns(self, table: str) -> List[Dict]:
        schema = self.config.schema
        rows = self.execute(
            """
            SELECT c.column_name,
                   c.data_type,
                   c.is_nullable,
                   c.column_default,
                   c.udt_name,
                   CASE WHEN pk.column_name IS NOT NULL
                        THEN TRUE ELSE FALSE
                   END                         AS is_primary_key
            FROM information_schema.columns c
            LEFT JOIN (
                SELECT kcu.column_name
                FROM   information_schema.table_constraints  tc
                JOIN   information_schema.key_column_usage   kcu
                       ON  kcu.constraint_name = tc.constraint_name
                       AND kcu.table_schema    = tc.table_schema
                       AND kcu.table_name      = tc.table_name
                WHERE  tc.constraint_type = 'PRIMARY KEY'
                  AND  tc.table_schema    = %s
                  AND  tc.table_name      = %s
            ) pk ON pk.column_name = c.column_name
            WHERE c.table_schema = %s
              AND c.table_name   = %s
            ORDER BY c.ordinal_position
            """,
            [schema, table, schema, table],
        )
        enums = self.get_enum_types() if any(r["data_type"] == "USER-DEFINED" for r in rows) else {}
        return [
            {
                "column_name":    r["column_name"],
                "data_type":      r["data_type"],
                "is_nullable":    r["is_nullable"],
                "column_default": r["column_default"],
                "udt_name":       r["udt_name"],
                "is_primary_key": bool(r["is_primary_key"]),
                "enum_values":    enums.get(r["udt_name"], []),
            }
            for r in rows
        ]


# ---------------------------------------------------------------------------
# Connector factory
# ---------------------------------------------------------------------------

def get_connector(config: ConnectionConfig) -> BaseConnector:
    """Return the correct connector instance for config.db_type."""
    mapping = {
        DBType.SQLITE:      SQLiteConnector,
        DBType.POSTGRESQL:  PostgreSQLConnector,
    }
    cls = mapping.get(config.db_type)
    if not cls:
        raise ValueError(
            f"Connector for '{config.db_type}' is not yet implemented. "
            f"Supported types: {', '.join(m.value for m in mapping)}"
        )
    return cls(config)
