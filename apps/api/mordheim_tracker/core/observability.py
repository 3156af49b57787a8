"""
Structured stdout logging shared by the HTTP layer and the services.

One JSON object per line: ts, level, message, request_id, event, module (+ extra).
"""
from __future__ import annotations

import datetime
import json
import logging
from typing import Any, Dict, Optional

from .config import load_settings

_log = logging.getLogger("mordheim_tracker")
if not _log.handlers:
    logging.basicConfig(level=load_settings().log_level)


def _now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def emit(level: str, event: str, message: str, request_id: Optional[str], module: str, **extra: Any) -> None:
    payload: Dict[str, Any] = {
        "ts": _now_iso(),
        "level": level.lower(),
        "message": message,
        "request_id": request_id,
        "event": event,
        "module": module,
    }
    payload.update(extra)
    print(json.dumps(payload, ensure_ascii=False, default=str), flush=True)


def audit(event: str, module: str, **extra: Any) -> None:
    emit("audit", event, event, None, module, **extra)
