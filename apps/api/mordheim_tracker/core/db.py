"""
DB utilities (sqlite default).

Defaults:
- DATABASE_URL: sqlite:///./data/app.db

Services talk to SQLite through short-lived sqlite3 connections; the schema itself
is declared by the SQLModel table models and created by init_db() or by alembic.
"""
from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from fastapi import HTTPException
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from .config import load_settings


def get_database_url() -> str:
    return load_settings().database_url


def _repo_root() -> Path:
    # apps/api/mordheim_tracker/core/db.py -> repo root = parents[4]
    return Path(__file__).resolve().parents[4]


def resolve_sqlite_path(database_url: str) -> Optional[Path]:
    if not database_url.startswith("sqlite:///"):
        return None
    p = database_url[len("sqlite:///") :]

    # absolute unix
    if p.startswith("/"):
        return Path(p)

    # absolute windows drive, both C:/ and C:\ forms
    if len(p) >= 3 and p[1] == ":" and (p[2] == "/" or p[2] == "\\"):
        return Path(p)

    # relative -> repo root
    return (_repo_root() / p).resolve()


def _sqlite_path() -> Path:
    url = get_database_url()
    sp = resolve_sqlite_path(url)
    if sp is None:
        raise ValueError(f"Only sqlite supported for now, got DATABASE_URL={url!r}")
    sp.parent.mkdir(parents=True, exist_ok=True)
    return sp


_engines: Dict[str, Engine] = {}


def get_engine() -> Engine:
    url = "sqlite:///" + _sqlite_path().as_posix()
    eng = _engines.get(url)
    if eng is None:
        eng = create_engine(url, future=True, connect_args={"check_same_thread": False})
        _engines[url] = eng
    return eng


def _import_models() -> None:
    # registers every table on SQLModel.metadata
    from mordheim_tracker.modules.campaigns import models as _campaigns  # noqa: F401
    from mordheim_tracker.modules.events import models as _events  # noqa: F401
    from mordheim_tracker.modules.history import models as _history  # noqa: F401
    from mordheim_tracker.modules.matches import models as _matches  # noqa: F401
    from mordheim_tracker.modules.news import models as _news  # noqa: F401
    from mordheim_tracker.modules.warbands import models as _warbands  # noqa: F401
    from mordheim_tracker.modules.warriors import models as _warriors  # noqa: F401


def init_db() -> None:
    """Create all tables and the ledger triggers if they do not exist yet."""
    _import_models()
    from mordheim_tracker.modules.history.models import LEDGER_TRIGGERS

    eng = get_engine()
    SQLModel.metadata.create_all(eng)
    with eng.begin() as conn:
        for ddl in LEDGER_TRIGGERS:
            conn.exec_driver_sql(ddl)


def db_health() -> Dict[str, Any]:
    url = get_database_url()
    kind = "sqlite" if url.startswith("sqlite") else "unknown"
    sp = resolve_sqlite_path(url)
    path = str(sp.as_posix()) if sp is not None else url

    try:
        eng = get_engine()
        with eng.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ok", "kind": kind, "path": path}
    except Exception as e:
        return {"status": "error", "kind": kind, "path": path, "error": str(e)}


# --- connections ---
def now_iso() -> str:
    # microsecond precision keeps ledger timestamps strictly ordered within a second
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def connect() -> sqlite3.Connection:
    conn = sqlite3.connect(str(_sqlite_path()), check_same_thread=False, timeout=30)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys=ON;")
    return conn


@contextmanager
def reading() -> Iterator[sqlite3.Connection]:
    conn = connect()
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction() -> Iterator[sqlite3.Connection]:
    """
    One write unit. BEGIN IMMEDIATE takes the write lock before the first read, so
    read-modify-write sequences on warband counters cannot interleave.
    """
    conn = connect()
    try:
        conn.execute("BEGIN IMMEDIATE;")
        yield conn
        conn.commit()
    except HTTPException:
        conn.rollback()
        raise
    except Exception as e:
        conn.rollback()
        raise HTTPException(
            status_code=500,
            detail={"error": "internal_error", "message": "internal server error", "details": {"type": type(e).__name__}},
        )
    finally:
        conn.close()


def _columns(conn: sqlite3.Connection, table: str) -> List[str]:
    rows = conn.execute(f"PRAGMA table_info({table});").fetchall()
    return [r["name"] for r in rows]


def insert_row(conn: sqlite3.Connection, table: str, row: Dict[str, Any]) -> int:
    cols = set(_columns(conn, table))
    data = dict(row)
    now = now_iso()

    if "created_at" in cols and "created_at" not in data:
        data["created_at"] = now
    if "updated_at" in cols and "updated_at" not in data:
        data["updated_at"] = now

    keys = sorted(k for k in data.keys() if k in cols)
    sql = f"INSERT INTO {table} ({','.join(keys)}) VALUES ({','.join(['?'] * len(keys))});"
    cur = conn.execute(sql, [data[k] for k in keys])
    return int(cur.lastrowid)


def update_row(conn: sqlite3.Connection, table: str, row_id: int, updates: Dict[str, Any]) -> None:
    data = dict(updates)
    if "updated_at" in set(_columns(conn, table)):
        data["updated_at"] = now_iso()
    keys = sorted(data.keys())
    set_sql = ", ".join(f"{k}=?" for k in keys)
    conn.execute(f"UPDATE {table} SET {set_sql} WHERE id=?;", [data[k] for k in keys] + [row_id])


def fetch_one(conn: sqlite3.Connection, table: str, row_id: int, *, label: str) -> sqlite3.Row:
    row = conn.execute(f"SELECT * FROM {table} WHERE id=?;", (row_id,)).fetchone()
    if row is None:
        raise not_found(label, row_id)
    return row


def not_found(label: str, row_id: Any) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={"error": "not_found", "message": f"{label} with id {row_id} not found", "details": {"id": row_id}},
    )


def bad_request(message: str, **details: Any) -> HTTPException:
    return HTTPException(status_code=400, detail={"error": "bad_request", "message": message, "details": details})


def reject_nulls(patch: Dict[str, Any], required: Any) -> None:
    """An explicit null on a NOT NULL field is a bad request, raised before any write."""
    nulls = sorted(k for k in required if k in patch and patch[k] is None)
    if nulls:
        raise bad_request("Fields cannot be null: " + ", ".join(nulls), fields=nulls)


# --- row decoding ---
def json_list(v: Any) -> List[str]:
    if not v:
        return []
    if isinstance(v, list):
        return v
    try:
        out = json.loads(v)
    except ValueError:
        return []
    return out if isinstance(out, list) else []


def dump_list(v: Optional[List[str]]) -> str:
    return json.dumps(list(v or []), ensure_ascii=False)


def as_bool(v: Any) -> bool:
    return bool(int(v)) if v is not None else False
