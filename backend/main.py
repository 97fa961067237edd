"""
main.py - DB Admin Console API
Schema introspection, generic CRUD and canned query execution over one database.
"""
import logging
from typing import Any, Dict, Iterator

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from config import get_config
from db_connectors import BaseConnector, ObjectNotFound, get_connector
from logging_config import setup_logging
from query_runner import InvalidQuery, run_query

config = get_config()
setup_logging(config.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="DB Admin Console API", version="1.0.0")
app.add_middleware(CORSMiddleware, allow_origins=config.cors_origins, allow_credentials=True,
                   allow_methods=["*"], allow_headers=["*"])


class ExecuteQueryRequest(BaseModel):
    # Left untyped so a missing or non-string query is reported as 400 "Invalid query"
    query: Any = None
    parameters: Any = None


def get_db() -> Iterator[BaseConnector]:
    """One connection per request, always closed."""
    connector = get_connector(config.connection_config())
    try:
        connector.connect()
    except Exception as e:
        raise _server_error("connecting to database", e)
    try:
        yield connector
    finally:
        connector.disconnect()


# ── Error shape: every failure is {"error": "..."} ─────────────────────────

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    content = exc.detail if isinstance(exc.detail, dict) else {"error": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg', '')}" for e in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})


def _server_error(action: str, exc: Exception) -> HTTPException:
    logger.exception("Error %s: %s", action, exc)
    return HTTPException(status_code=500, detail="Server error")


def _resolve(db: BaseConnector, name: str, view: bool = False) -> str:
    """Catalog spelling of name.  Unknown names are a server error like any failed SELECT."""
    try:
        return db.resolve_view(name) if view else db.resolve_table(name)
    except Exception as e:
        raise _server_error(f"looking up {name}", e)


# ── Routes ─────────────────────────────────────────────────────────────────

@app.get("/")
def root(): return {"message": "DB Admin Console API", "status": "running"}

@app.get("/health")
def health(): return {"status": "healthy", "db_type": config.db_type.value}


@app.get("/api/tables")
def list_tables(db: BaseConnector = Depends(get_db)):
    try:
        return db.list_tables()
    except Exception as e:
        raise _server_error("fetching tables", e)


@app.get("/api/tables/{table_name}/schema")
def get_table_schema(table_name: str, db: BaseConnector = Depends(get_db)):
    try:
        table = db.resolve_table(table_name)
    except ObjectNotFound:
        return []
    except Exception as e:
        raise _server_error(f"looking up {table_name}", e)
    try:
        return db.get_columns(table)
    except Exception as e:
        raise _server_error(f"fetching schema for {table}", e)


@app.get("/api/tables/{table_name}")
def get_table_rows(table_name: str, db: BaseConnector = Depends(get_db)):
    table = _resolve(db, table_name)
    try:
        return db.select_rows(table, config.row_limit)
    except Exception as e:
        raise _server_error(f"fetching from {table}", e)


@app.post("/api/tables/{table_name}", status_code=201)
def insert_record(table_name: str, data: Dict[str, Any] = Body(...),
                  db: BaseConnector = Depends(get_db)):
    table = _resolve(db, table_name)
    try:
        row = db.insert_row(table, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise _server_error(f"inserting into {table}", e)
    logger.info("Inserted record into %s", table)
    return row


@app.put("/api/tables/{table_name}/{record_id}")
def update_record(table_name: str, record_id: str, data: Dict[str, Any] = Body(...),
                  db: BaseConnector = Depends(get_db)):
    table = _resolve(db, table_name)
    try:
        row = db.update_row(table, record_id, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise _server_error(f"updating {table}", e)
    if row is None:
        raise HTTPException(status_code=404, detail="Record not found")
    logger.info("Updated record %s in %s", record_id, table)
    return row


@app.delete("/api/tables/{table_name}/{record_id}")
def delete_record(table_name: str, record_id: str, db: BaseConnector = Depends(get_db)):
    table = _resolve(db, table_name)
    try:
        row = db.delete_row(table, record_id)
    except Exception as e:
        raise _server_error(f"deleting from {table}", e)
    if row is None:
        raise HTTPException(status_code=404, detail="Record not found")
    logger.info("Deleted record %s from %s", record_id, table)
    return {"message": "Record deleted successfully"}


@app.get("/api/views")
def list_views(db: BaseConnector = Depends(get_db)):
    try:
        return db.list_views()
    except Exception as e:
        raise _server_error("fetching views", e)


@app.get("/api/views/{view_name}")
def get_view_rows(view_name: str, db: BaseConnector = Depends(get_db)):
    view = _resolve(db, view_name, view=True)
    try:
        return db.select_rows(view, config.row_limit)
    except Exception as e:
        raise _server_error(f"fetching from view {view}", e)


@app.post("/api/execute-query")
def execute_query(req: ExecuteQueryRequest, db: BaseConnector = Depends(get_db)):
    """Runs one of the front end's predefined queries."""
    try:
        return run_query(db, req.query, req.parameters, read_only=config.query_read_only)
    except InvalidQuery as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Error executing query: %s", e)
        raise HTTPException(status_code=500,
                            detail={"error": "Error executing query", "details": str(e)})


def run() -> None:
    uvicorn.run("main:app", host=config.host, port=config.port)


if __name__ == "__main__":
    uvicorn.run("main:app", host=config.host, port=config.port, reload=True)
