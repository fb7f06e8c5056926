"""予約登録エンドポイント。"""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from googleapiclient.errors import HttpError
from starlette.responses import JSONResponse

from reservation_calendar.core.logging import log_error, log_event
from reservation_calendar.core.middleware import mark_reservation_outcome
from reservation_calendar.core.settings import Settings
from reservation_calendar.features.reservations_post.schemas_reservations_post import (
    InternalErrorResponse,
    ReservationCreatedResponse,
    ReservationRequestModel,
    ValidationErrorResponse,
)
from reservation_calendar.features.reservations_post.usecase_reservations_post import (
    ReservationValidationError,
    create_reservation,
)

router = APIRouter(prefix="/api", tags=["reservations"])


async def get_settings(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[attr-defined]


async def get_calendar_service(request: Request) -> Any:
    return request.app.state.calendar_service  # type: ignore[attr-defined]


@router.post(
    "/reservations",
    status_code=201,
    response_model=ReservationCreatedResponse,
    responses={400: {"model": ValidationErrorResponse}, 500: {"model": InternalErrorResponse}},
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": ReservationRequestModel.model_json_schema()}},
        }
    },
)
async def post_reservation(
    request: Request,
    settings: Settings = Depends(get_settings),
    service: Any = Depends(get_calendar_service),
) -> Any:
    payload = await _read_json_object(request)
    request_id = getattr(request.state, "request_id", "")

    try:
        created = await run_in_threadpool(
            create_reservation, payload, settings=settings, service=service
        )
    except ReservationValidationError as exc:
        mark_reservation_outcome(request, "rejected")
        log_event("validation_failed", request_id=request_id, error=str(exc))
        return JSONResponse(
            status_code=400,
            content=ValidationErrorResponse(error=str(exc)).model_dump(),
        )
    except Exception as exc:
        mark_reservation_outcome(request, "failed")
        log_error(path=request.url.path, request_id=request_id, error=exc)
        return JSONResponse(
            status_code=500,
            content=InternalErrorResponse(details=_format_error(exc)).model_dump(),
        )

    mark_reservation_outcome(request, "created", event_id=created.get("id"))
    log_event(
        "reservation_created",
        request_id=request_id,
        event_id=created.get("id"),
        calendar_id=settings.calendar_id,
    )
    return ReservationCreatedResponse(
        eventId=created.get("id"),
        htmlLink=created.get("htmlLink"),
        createdEvent=created,
    )


async def _read_json_object(request: Request) -> dict[str, Any]:
    """ボディを JSON オブジェクトとして読む。空・不正 JSON・非オブジェクトは空扱い。"""

    body = await request.body()
    if not body:
        return {}
    try:
        parsed = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _format_error(exc: Exception) -> str:
    if isinstance(exc, HttpError):
        if exc.resp is None:
            return str(exc)
        return f"HTTP {exc.resp.status}: {exc}"
    return str(exc)
