"""
query_runner.py - Execution of the predefined analytical queries.

The front end ships whole SQL strings.  "Parameters" are literal
placeholders of the form 'name' inside the SQL; they are replaced textually
before execution, the same way the query menu authors them.
"""
import logging
from numbers import Number
from typing import Any, Dict, List

from db_connectors import BaseConnector

logger = logging.getLogger(__name__)


class InvalidQuery(ValueError):
    pass


def _render_value(value: Any) -> str:
    if isinstance(value, str):
        return "'" + value.replace("'", "''") + "'"
    return str(value)


def substitute_parameters(query: str, parameters: Any) -> str:
    """
    Replace every 'key' literal in query with the matching parameter value.

    Only str and numeric values are substituted (strings stay quoted,
    numbers go in bare); anything else, including bools, is ignored.
    """
    if not isinstance(parameters, dict):
        return query
    prepared = query
    for key, value in parameters.items():
        if isinstance(value, bool) or not isinstance(value, (str, Number)):
            continue
        prepared = prepared.replace(f"'{key}'", _render_value(value))
    return prepared


def run_query(
    connector: BaseConnector,
    query: Any,
    parameters: Any = None,
    read_only: bool = False,
) -> List[Dict]:
    if not isinstance(query, str) or not query.strip():
        raise InvalidQuery("Invalid query")

    prepared = substitute_parameters(query, parameters)
    if read_only:
        try:
            connector.assert_read_only(prepared)
        except ValueError as exc:
            raise InvalidQuery(str(exc)) from exc

    logger.info("Executing query: %s", prepared.strip())
    return connector.execute(prepared)
