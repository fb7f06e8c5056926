"""ローカル/ Lambda エントリポイント。"""

from __future__ import annotations

import os
from typing import Any

import uvicorn
from mangum import Mangum

from .app import create_app
from .core.logging import configure_logging, log_event

configure_logging()
app = create_app()
_handler = Mangum(app)


def lambda_handler(event: dict[str, Any], context: Any) -> Any:
    """AWS Lambda から呼び出されるエントリポイント"""
    return _handler(event, context)


def run_local() -> None:
    """`reservation-calendar-api` 用のローカル実行関数。"""
    host = os.getenv("APP_HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3000"))
    log_event("startup", message=f"Reservation API listening on http://localhost:{port}")
    uvicorn.run(app, host=host, port=port)


if os.getenv("RUN_LOCAL") == "1":
    run_local()
