"""FastAPI 用の共通ミドルウェア群。"""

from __future__ import annotations

import time
import uuid
from typing import Awaitable, Callable

from fastapi import Request, Response

from reservation_calendar.core.logging import log_request


RequestHandler = Callable[[Request], Awaitable[Response]]


def mark_reservation_outcome(
    request: Request, outcome: str, *, event_id: str | None = None
) -> None:
    """アクセスログに載せる予約処理の結果を request.state に記録する。"""

    request.state.reservation_outcome = outcome
    request.state.reservation_event_id = event_id


async def request_id_middleware(request: Request, call_next: RequestHandler) -> Response:
    """X-Request-Id を受理・生成し、予約結果付きのアクセスログを出力する。"""

    request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
    request.state.request_id = request_id

    started = time.perf_counter()
    response = await call_next(request)
    latency_ms = int((time.perf_counter() - started) * 1000)

    response.headers["X-Request-Id"] = request_id
    response.headers["X-Response-Time-Ms"] = str(latency_ms)
    log_request(
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        request_id=request_id,
        latency_ms=latency_ms,
        outcome=getattr(request.state, "reservation_outcome", None),
        event_id=getattr(request.state, "reservation_event_id", None),
    )
    return response
