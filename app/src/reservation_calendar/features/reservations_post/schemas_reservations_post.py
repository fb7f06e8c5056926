"""`/api/reservations` のリクエスト/レスポンススキーマ。"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ReservationRequestModel(BaseModel):
    """OpenAPI 表示用の予約リクエスト。検証はユースケース側で行う。"""

    name: str = Field(..., description="予約者名（必須）")
    email: str | None = Field(None, description="招待先メールアドレス")
    phone: str | None = None
    startDateTime: str = Field(..., description="ISO8601形式の開始日時（例: 2025-10-12T19:00:00）")
    endDateTime: str | None = Field(None, description="省略時は開始から2時間")
    partySize: int | float | str | None = None
    notes: str | None = None

    model_config = ConfigDict(extra="allow")


class ReservationCreatedResponse(BaseModel):
    """登録成功レスポンス。"""

    message: str = "Reservation created"
    eventId: str | None = None
    htmlLink: str | None = None
    createdEvent: dict[str, Any] = Field(default_factory=dict)


class ValidationErrorResponse(BaseModel):
    error: str


class InternalErrorResponse(BaseModel):
    error: str = "Internal server error"
    details: str
