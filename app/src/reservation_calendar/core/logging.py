"""JSONロギングの共通ヘルパー。"""

from __future__ import annotations

import json
import logging
import os
import traceback
from typing import Any

_LOGGER = logging.getLogger("reservation_calendar")


def configure_logging(level: str | None = None) -> None:
    """ローカル実行用に `reservation_calendar` ロガーへハンドラを設定する。"""

    resolved = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    if not _LOGGER.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        _LOGGER.addHandler(handler)
    _LOGGER.setLevel(resolved)


def log_event(event: str, **fields: Any) -> None:
    payload = {"level": "INFO", "event": event, **fields}
    _LOGGER.info(json.dumps(payload, ensure_ascii=False, default=str))


def log_request(
    *,
    method: str,
    path: str,
    status: int,
    request_id: str,
    latency_ms: int,
    outcome: str | None = None,
    event_id: str | None = None,
) -> None:
    payload: dict[str, Any] = {
        "level": "INFO",
        "method": method,
        "path": path,
        "status": status,
        "request_id": request_id,
        "latency_ms": latency_ms,
    }
    # 予約エンドポイントのみ設定される
    if outcome:
        payload["outcome"] = outcome
    if event_id:
        payload["event_id"] = event_id
    _LOGGER.info(json.dumps(payload, ensure_ascii=False))


def log_error(
    *,
    path: str,
    request_id: str,
    error: Any,
    status: int = 500,
) -> None:
    payload = {
        "level": "ERROR",
        "path": path,
        "status": status,
        "request_id": request_id,
        "error_json": _to_error_json(error),
        "traceback": traceback.format_exc(),
    }
    _LOGGER.error(json.dumps(payload, ensure_ascii=False))


def _to_error_json(error: Any) -> str:
    if isinstance(error, (dict, list)):
        return json.dumps(error, ensure_ascii=False)
    return json.dumps({"message": str(error)}, ensure_ascii=False)
