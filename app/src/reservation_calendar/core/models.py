"""ユースケース間で共有するデータモデル。"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal, Mapping


def display_text(value: Any) -> str:
    """JSON 値を表示用文字列にする。真偽値は JSON 表記 (true/false)、整数値の float は小数点なし。"""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _optional_text(value: Any) -> str | None:
    if not value:
        return None
    return display_text(value)


@dataclass(slots=True)
class ReservationRequest:
    """検証済みの予約リクエスト。リクエスト処理中のみ存在する。"""

    name: str
    start_date_time: str
    end_date_time: str | None = None
    email: str | None = None
    phone: str | None = None
    party_size: Any = None
    notes: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ReservationRequest:
        """JSON ボディ (camelCase) から生成する。空値は None に揃える。"""

        return cls(
            name=display_text(payload["name"]),
            start_date_time=str(payload["startDateTime"]),
            end_date_time=_optional_text(payload.get("endDateTime")),
            email=_optional_text(payload.get("email")),
            phone=_optional_text(payload.get("phone")),
            party_size=payload.get("partySize") or None,
            notes=_optional_text(payload.get("notes")),
        )


@dataclass(frozen=True, slots=True)
class ReminderOverride:
    """デフォルト通知を上書きするリマインダー 1 件。"""

    method: Literal["popup", "email"]
    minutes: int


@dataclass(slots=True)
class CalendarEventDraft:
    """Google Calendar SDK へ渡すイベント情報。"""

    summary: str
    description: str
    start_at: datetime
    end_at: datetime
    timezone: str
    attendees: list[str] = field(default_factory=list)
    reminders: list[ReminderOverride] = field(default_factory=list)

    def to_google_event(self) -> dict[str, object]:
        """google-api-python-client が受け取るイベント辞書へ変換する。"""

        return {
            "summary": self.summary,
            "description": self.description,
            "start": {"dateTime": self.start_at.isoformat(), "timeZone": self.timezone},
            "end": {"dateTime": self.end_at.isoformat(), "timeZone": self.timezone},
            "attendees": [{"email": email} for email in self.attendees],
            "reminders": {
                "useDefault": False,
                "overrides": [
                    {"method": reminder.method, "minutes": reminder.minutes}
                    for reminder in self.reminders
                ],
            },
        }
