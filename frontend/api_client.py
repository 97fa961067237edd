import logging
import os
from typing import Any, Dict, List, Optional

import httpx

from canned_queries import get_canned_query

# The base URL for the backend API
API_URL = os.environ.get("DBADMIN_API_URL", "http://localhost:5000/api")


class ApiClientError(Exception):
    """A failed backend call, with the server's error message when it sent one."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class AdminApiClient:
    """
    A synchronous HTTP client for the DB Admin Console backend.

    Every method returns the decoded JSON body.  Transport and HTTP errors
    are logged and re-raised as ApiClientError.
    """

    def __init__(self, base_url: str = API_URL, timeout: float = 30.0,
                 transport: Optional[httpx.BaseTransport] = None):
        self.client = httpx.Client(base_url=base_url.rstrip("/") + "/",
                                   timeout=timeout, transport=transport)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "AdminApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, action: str, **kwargs) -> Any:
        try:
            response = self.client.request(method, path, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            message, details = str(e), None
            try:
                # The backend reports failures as {"error": ..., "details": ...}
                body = e.response.json()
                message = body.get("error", message)
                details = body.get("details")
            except ValueError:
                pass
            logging.error(f"Error {action}: {message}")
            raise ApiClientError(message, e.response.status_code, details) from e
        except httpx.RequestError as e:
            logging.error(f"Error {action}: {e}")
            raise ApiClientError(str(e)) from e

    # ── Tables ──────────────────────────────────────────────────────────────

    def fetch_tables(self) -> List[Dict]:
        return self._request("GET", "tables", "fetching tables")

    def fetch_table_data(self, table_name: str) -> List[Dict]:
        return self._request("GET", f"tables/{table_name}", f"fetching {table_name} data")

    def fetch_table_schema(self, table_name: str) -> List[Dict]:
        return self._request("GET", f"tables/{table_name}/schema", f"fetching {table_name} schema")

    def insert_record(self, table_name: str, data: Dict[str, Any]) -> Dict:
        return self._request("POST", f"tables/{table_name}", f"inserting into {table_name}", json=data)

    def update_record(self, table_name: str, record_id: Any, data: Dict[str, Any]) -> Dict:
        return self._request("PUT", f"tables/{table_name}/{record_id}", f"updating {table_name}", json=data)

    def delete_record(self, table_name: str, record_id: Any) -> Dict:
        return self._request("DELETE", f"tables/{table_name}/{record_id}", f"deleting from {table_name}")

    # ── Views ───────────────────────────────────────────────────────────────

    def fetch_views(self) -> List[Dict]:
        return self._request("GET", "views", "fetching views")

    def fetch_view_data(self, view_name: str) -> List[Dict]:
        return self._request("GET", f"views/{view_name}", f"fetching {view_name} data")

    # ── Queries ─────────────────────────────────────────────────────────────

    def execute_query(self, query: str, parameters: Optional[Dict[str, Any]] = None) -> List[Dict]:
        return self._request("POST", "execute-query", "executing query",
                             json={"query": query, "parameters": parameters or {}})

    def run_canned_query(self, query_id: str) -> List[Dict]:
        """Execute a Query Explorer menu entry by id."""
        canned = get_canned_query(query_id)
        return self.execute_query(canned.query, canned.parameters)
