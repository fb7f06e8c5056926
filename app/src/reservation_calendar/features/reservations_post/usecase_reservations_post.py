"""予約リクエストを Google Calendar イベントとして登録するユースケース。"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone as dt_timezone, tzinfo
from typing import Any, Mapping
from zoneinfo import ZoneInfo

from reservation_calendar.clients import google_client
from reservation_calendar.core.models import (
    CalendarEventDraft,
    ReminderOverride,
    ReservationRequest,
    display_text,
)
from reservation_calendar.core.settings import Settings

DEFAULT_DURATION = timedelta(hours=2)
PROVENANCE_LINE = "Created by: website reservation API"
REMINDER_OVERRIDES = (
    ReminderOverride(method="popup", minutes=60),
    ReminderOverride(method="email", minutes=24 * 60),
)

ERROR_REQUIRED = "name and startDateTime are required"
ERROR_INVALID_START = "startDateTime must be a valid ISO datetime"
ERROR_INVALID_END = "endDateTime must be a valid ISO datetime"
ERROR_END_BEFORE_START = "endDateTime must be after startDateTime"


class ReservationValidationError(ValueError):
    """予約リクエストの入力不備。HTTP 400 として返す。"""


def validate_reservation(
    payload: Mapping[str, Any],
    *,
    timezone: str | tzinfo,
) -> str | None:
    """予約ペイロードを検証し、最初に失敗したルールのメッセージを返す。

    name と startDateTime の欠落は同一メッセージを返す。
    email / phone / partySize / notes の形式は検証しない。
    """

    tz = _as_tzinfo(timezone)
    if not payload.get("name") or not payload.get("startDateTime"):
        return ERROR_REQUIRED

    start = parse_datetime(payload["startDateTime"], tz)
    if start is None:
        return ERROR_INVALID_START

    raw_end = payload.get("endDateTime")
    if not raw_end:
        if default_end(start, tz) is None:
            return ERROR_INVALID_START
        return None

    end = parse_datetime(raw_end, tz)
    if end is None:
        return ERROR_INVALID_END
    # 実時刻で比較 (同一 tzinfo 同士だと fold が無視される)
    if end.astimezone(dt_timezone.utc) <= start.astimezone(dt_timezone.utc):
        return ERROR_END_BEFORE_START
    return None


def build_calendar_event(
    request: ReservationRequest,
    *,
    timezone: str,
) -> CalendarEventDraft:
    """検証済みリクエストからカレンダーイベントを組み立てる。"""

    tz = ZoneInfo(timezone)
    start = _require_datetime(request.start_date_time, tz)
    if request.end_date_time:
        end = _require_datetime(request.end_date_time, tz)
    else:
        end = default_end(start, tz)
        if end is None:
            raise ReservationValidationError(ERROR_INVALID_START)

    return CalendarEventDraft(
        summary=_build_summary(request),
        description=_build_description(request),
        start_at=start,
        end_at=end,
        timezone=timezone,
        attendees=[request.email] if request.email else [],
        reminders=list(REMINDER_OVERRIDES),
    )


def create_reservation(
    payload: Mapping[str, Any],
    *,
    settings: Settings,
    service: Any,
) -> dict[str, Any]:
    """検証・イベント構築・Google Calendar への登録を順に行う。"""

    error = validate_reservation(payload, timezone=settings.timezone)
    if error:
        raise ReservationValidationError(error)

    request = ReservationRequest.from_payload(payload)
    draft = build_calendar_event(request, timezone=settings.timezone)
    return google_client.insert_event(
        service,
        calendar_id=settings.calendar_id,
        event=draft.to_google_event(),
        send_updates=settings.send_updates,
    )


def parse_datetime(value: Any, tz: tzinfo) -> datetime | None:
    """ISO 8601 文字列を aware datetime に変換する。オフセット無しは店舗タイムゾーン扱い。"""

    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    try:
        # UTC と店舗タイムゾーンの両方で表現できる範囲に限る
        parsed.astimezone(dt_timezone.utc)
        return parsed.astimezone(tz)
    except OverflowError:
        return None


def default_end(start: datetime, tz: tzinfo) -> datetime | None:
    """開始の実時間2時間後を返す。datetime の範囲外になる場合は None。"""

    try:
        return (start.astimezone(dt_timezone.utc) + DEFAULT_DURATION).astimezone(tz)
    except OverflowError:
        return None


def _require_datetime(value: str, tz: tzinfo) -> datetime:
    parsed = parse_datetime(value, tz)
    if parsed is None:
        raise ReservationValidationError(f"Unparseable datetime: {value}")
    return parsed


def _build_summary(request: ReservationRequest) -> str:
    summary = f"Reservation: {request.name}"
    if request.party_size:
        summary += f" — party of {display_text(request.party_size)}"
    return summary


def _build_description(request: ReservationRequest) -> str:
    lines = [f"Name: {request.name}"]
    if request.email:
        lines.append(f"Email: {request.email}")
    if request.phone:
        lines.append(f"Phone: {request.phone}")
    if request.party_size:
        lines.append(f"Party size: {display_text(request.party_size)}")
    if request.notes:
        lines.append(f"Notes: {request.notes}")
    lines.append(PROVENANCE_LINE)
    return "\n".join(lines)


def _as_tzinfo(value: str | tzinfo) -> tzinfo:
    if isinstance(value, str):
        return ZoneInfo(value)
    return value
