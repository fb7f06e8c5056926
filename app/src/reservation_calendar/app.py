"""FastAPI アプリケーションの組み立てを担当するモジュール。"""

from __future__ import annotations

from fastapi import FastAPI

from .clients import google_client
from .core.middleware import request_id_middleware
from .core.settings import load_settings
from .features.reservations_post.router_reservations_post import router as reservations_router


def create_app() -> FastAPI:
    """設定と Calendar Service を起動時に一度だけ解決し、FastAPI アプリを返す。

    設定不備は ConfigurationError として送出され、アプリは生成されない。
    """

    settings = load_settings()
    calendar_service = google_client.service_from_settings(settings)

    app = FastAPI(title="reservation-calendar", version="0.1.0")
    app.state.settings = settings  # type: ignore[attr-defined]
    app.state.calendar_service = calendar_service  # type: ignore[attr-defined]
    app.middleware("http")(request_id_middleware)

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(reservations_router)

    return app
