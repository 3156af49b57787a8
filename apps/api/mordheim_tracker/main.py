from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mordheim_tracker.core.config import load_settings
from mordheim_tracker.core.db import db_health, init_db
from mordheim_tracker.core.observability import emit
from mordheim_tracker.modules.campaigns.router import router as campaigns_router
from mordheim_tracker.modules.display.router import router as display_router
from mordheim_tracker.modules.events.router import router as events_router
from mordheim_tracker.modules.history.router import router as history_router
from mordheim_tracker.modules.matches.router import router as matches_router
from mordheim_tracker.modules.news.router import router as news_router
from mordheim_tracker.modules.warbands.router import router as warbands_router
from mordheim_tracker.modules.warriors.router import router as warriors_router

settings = load_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    emit("info", "app.startup", f"mordheim tracker {settings.app_version} ready", None, __name__)
    yield


app = FastAPI(title="Mordheim Campaign Tracker API", version=settings.app_version, lifespan=lifespan)

# Contract:
# - /health keys: status, version, db, last_error_summary
# - X-Request-Id in/out (missing -> generated; always echoed back; also on errors)
# - Error envelope keys: error, message, request_id, details

_last_error: Dict[str, Any] = {"summary": None}


def _err_envelope(error: str, message: str, request_id: Optional[str], details: Any, status_code: int):
    headers = {}
    if request_id:
        headers["X-Request-Id"] = request_id
    if status_code >= 500:
        _last_error["summary"] = f"{error}: {message}"
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "request_id": request_id,
            "details": details,
        },
        headers=headers,
    )


@app.middleware("http")
async def _request_id_mw(request: Request, call_next):
    rid = request.headers.get("X-Request-Id") or uuid.uuid4().hex.upper()
    request.state.request_id = rid
    emit("info", "http.request.start", f"{request.method} {request.url.path}", rid, __name__)
    try:
        resp = await call_next(request)
    except Exception as e:
        emit("error", "http.request.exception", str(e), rid, __name__)
        raise
    resp.headers["X-Request-Id"] = rid
    emit("info", "http.request.end", f"{request.method} {request.url.path} -> {getattr(resp, 'status_code', None)}", rid, __name__)
    return resp


@app.exception_handler(StarletteHTTPException)
async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
    rid = getattr(request.state, "request_id", None)
    detail = exc.detail
    if isinstance(detail, dict) and "error" in detail:
        return _err_envelope(
            str(detail["error"]),
            str(detail.get("message") or detail["error"]),
            rid,
            detail.get("details") or {},
            exc.status_code,
        )
    return _err_envelope("http_error", str(detail), rid, {"status_code": exc.status_code}, exc.status_code)


@app.exception_handler(RequestValidationError)
async def _validation_exc_handler(request: Request, exc: RequestValidationError):
    rid = getattr(request.state, "request_id", None)
    errors = [{k: v for k, v in e.items() if k != "ctx"} for e in exc.errors()]
    return _err_envelope("validation_error", "request validation failed", rid, errors, 422)


@app.exception_handler(Exception)
async def _unhandled_exc_handler(request: Request, exc: Exception):
    rid = getattr(request.state, "request_id", None)
    emit("error", "http.unhandled", str(exc), rid, __name__, type=type(exc).__name__)
    return _err_envelope("internal_error", "internal server error", rid, {"type": type(exc).__name__}, 500)


@app.get("/health")
def health():
    db = db_health()
    return {
        "status": "ok" if db["status"] == "ok" else "degraded",
        "version": settings.app_version,
        "db": db,
        "last_error_summary": _last_error["summary"],
    }


app.include_router(campaigns_router)
app.include_router(warbands_router)
app.include_router(warriors_router)
app.include_router(matches_router)
app.include_router(events_router)
app.include_router(history_router)
app.include_router(news_router)
app.include_router(display_router)
