"""
config.py - Centralized configuration.

This is the ONLY place backend env vars are read.  A `.env` file in the
working directory is loaded first (local dev); real environment variables win.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

from db_connectors import ConnectionConfig, DBType


@dataclass(frozen=True)
class AppConfig:
    db_type: DBType
    db_file: Optional[str]
    db_host: Optional[str]
    db_port: int
    db_name: Optional[str]
    db_user: Optional[str]
    db_password: Optional[str]
    db_schema: str

    host: str
    port: int
    row_limit: int
    cors_origins: List[str]
    # Reject INSERT/UPDATE/DDL sent through /api/execute-query
    query_read_only: bool
    log_level: str

    def connection_config(self) -> ConnectionConfig:
        return ConnectionConfig(
            db_type=self.db_type,
            file_path=self.db_file,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
            username=self.db_user,
            password=self.db_password,
            schema=self.db_schema,
        )


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name, default)
    if v is None:
        return None
    v = v.strip()
    return v if v else default


def _getbool(name: str, default: bool = False) -> bool:
    v = _getenv(name)
    if v is None:
        return default
    return v.lower() in ("1", "true", "yes", "on")


def get_config() -> AppConfig:
    load_dotenv(override=False)

    origins = _getenv("CORS_ORIGINS", "*")
    return AppConfig(
        db_type=DBType(_getenv("DB_TYPE", "postgresql").lower()),
        db_file=_getenv("DB_FILE"),
        db_host=_getenv("DB_HOST", "localhost"),
        db_port=int(_getenv("DB_PORT", "5432")),
        db_name=_getenv("DB_NAME"),
        db_user=_getenv("DB_USER"),
        db_password=_getenv("DB_PASSWORD"),
        db_schema=_getenv("DB_SCHEMA", "public"),
        host=_getenv("HOST", "0.0.0.0"),
        port=int(_getenv("PORT", "5000")),
        row_limit=int(_getenv("ROW_LIMIT", "100")),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        query_read_only=_getbool("QUERY_READ_ONLY"),
        log_level=(_getenv("LOG_LEVEL", "INFO") or "INFO").upper(),
    )
