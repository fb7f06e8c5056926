"""予約の検証とイベント構築のテスト。"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

import pytest

from reservation_calendar.core.models import ReservationRequest
from reservation_calendar.features.reservations_post.usecase_reservations_post import (
    ERROR_END_BEFORE_START,
    ERROR_INVALID_END,
    ERROR_INVALID_START,
    ERROR_REQUIRED,
    build_calendar_event,
    validate_reservation,
)

TZ = "Europe/Riga"


def _build(payload: dict[str, Any]):
    return build_calendar_event(ReservationRequest.from_payload(payload), timezone=TZ)


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"startDateTime": "2025-10-12T19:00:00"},
        {"name": "", "startDateTime": "2025-10-12T19:00:00"},
        {"name": None, "startDateTime": "2025-10-12T19:00:00"},
        {"name": "John Doe"},
        {"name": "John Doe", "startDateTime": ""},
    ],
)
def test_missing_required_fields(payload: dict[str, Any]) -> None:
    assert validate_reservation(payload, timezone=TZ) == ERROR_REQUIRED


@pytest.mark.parametrize("start", ["tomorrow", "2025-13-40T19:00:00", "2025-10-12T25:00", 1760284800])
def test_invalid_start(start: Any) -> None:
    payload = {"name": "John Doe", "startDateTime": start}

    assert validate_reservation(payload, timezone=TZ) == ERROR_INVALID_START


def test_invalid_start_is_checked_before_end() -> None:
    payload = {"name": "John Doe", "startDateTime": "nope", "endDateTime": "also nope"}

    assert validate_reservation(payload, timezone=TZ) == ERROR_INVALID_START


def test_invalid_end() -> None:
    payload = {
        "name": "John Doe",
        "startDateTime": "2025-10-12T19:00:00",
        "endDateTime": "later",
    }

    assert validate_reservation(payload, timezone=TZ) == ERROR_INVALID_END


@pytest.mark.parametrize("end", ["2025-10-12T18:00:00", "2025-10-12T19:00:00"])
def test_end_must_be_after_start(end: str) -> None:
    payload = {
        "name": "Jane",
        "email": "jane@x.com",
        "startDateTime": "2025-10-12T19:00:00",
        "endDateTime": end,
    }

    assert validate_reservation(payload, timezone=TZ) == ERROR_END_BEFORE_START


def test_offsets_are_compared_as_instants() -> None:
    # 19:00 Riga (+03:00) は 16:00Z。17:00Z の終了は後。
    payload = {
        "name": "Jane",
        "startDateTime": "2025-10-12T19:00:00",
        "endDateTime": "2025-10-12T17:00:00Z",
    }

    assert validate_reservation(payload, timezone=TZ) is None


def test_other_fields_are_not_validated() -> None:
    payload = {
        "name": "John Doe",
        "startDateTime": "2025-10-12T19:00:00",
        "email": "not-an-email",
        "phone": "???",
        "partySize": "lots",
    }

    assert validate_reservation(payload, timezone=TZ) is None


def test_default_end_is_two_hours_after_start() -> None:
    draft = _build({"name": "John Doe", "startDateTime": "2025-10-12T19:00:00"})

    assert draft.end_at - draft.start_at == timedelta(hours=2)
    assert draft.start_at.isoformat() == "2025-10-12T19:00:00+03:00"
    assert draft.end_at.isoformat() == "2025-10-12T21:00:00+03:00"
    assert draft.attendees == []
    assert draft.timezone == TZ


def test_default_end_across_dst_change_is_two_real_hours() -> None:
    # 2025-10-26 04:00 に EEST→EET へ切り替わる。
    draft = _build({"name": "Night Owl", "startDateTime": "2025-10-26T02:30:00"})

    assert draft.end_at.isoformat() == "2025-10-26T03:30:00+02:00"


def test_utc_input_is_rendered_in_restaurant_zone() -> None:
    draft = _build({"name": "Amy", "startDateTime": "2025-10-12T16:00:00Z"})

    assert draft.start_at.isoformat() == "2025-10-12T19:00:00+03:00"


def test_explicit_end_is_used() -> None:
    draft = _build(
        {
            "name": "Amy",
            "startDateTime": "2025-10-12T19:00:00",
            "endDateTime": "2025-10-12T22:30:00",
        }
    )

    assert draft.end_at.isoformat() == "2025-10-12T22:30:00+03:00"


def test_summary_with_party_size() -> None:
    draft = _build({"name": "Amy", "partySize": 4, "startDateTime": "2025-10-12T19:00:00"})

    assert draft.summary == "Reservation: Amy — party of 4"


@pytest.mark.parametrize("party_size", [0, None, ""])
def test_summary_without_party_size(party_size: Any) -> None:
    draft = _build(
        {"name": "Amy", "partySize": party_size, "startDateTime": "2025-10-12T19:00:00"}
    )

    assert draft.summary == "Reservation: Amy"
    assert "Party size" not in draft.description


def test_description_lists_present_fields_in_order() -> None:
    draft = _build(
        {
            "name": "John Doe",
            "email": "john@example.com",
            "phone": "+3711234567",
            "startDateTime": "2025-10-12T19:00:00",
            "partySize": 4,
            "notes": "Allergic to nuts",
        }
    )

    assert draft.description == (
        "Name: John Doe\n"
        "Email: john@example.com\n"
        "Phone: +3711234567\n"
        "Party size: 4\n"
        "Notes: Allergic to nuts\n"
        "Created by: website reservation API"
    )
    assert draft.attendees == ["john@example.com"]


def test_description_minimal() -> None:
    draft = _build({"name": "John Doe", "startDateTime": "2025-10-12T19:00:00"})

    assert draft.description == "Name: John Doe\nCreated by: website reservation API"


def test_reminders_override_defaults() -> None:
    body = _build({"name": "Amy", "startDateTime": "2025-10-12T19:00:00"}).to_google_event()

    assert body["reminders"] == {
        "useDefault": False,
        "overrides": [
            {"method": "popup", "minutes": 60},
            {"method": "email", "minutes": 1440},
        ],
    }


def test_formatting_is_deterministic() -> None:
    payload = {
        "name": "Amy",
        "email": "amy@example.com",
        "partySize": 2.0,
        "notes": "Window seat",
        "startDateTime": "2025-10-12T19:00:00",
    }

    first = _build(payload)
    second = _build(payload)

    assert first.summary == second.summary == "Reservation: Amy — party of 2"
    assert first.description == second.description


def test_end_before_start_inside_repeated_hour_is_rejected() -> None:
    # 2025-10-26 03:00-04:00 (Riga) は2回ある。03:15+02:00 は 01:15Z、03:30+03:00 は 00:30Z。
    payload = {
        "name": "Night Owl",
        "startDateTime": "2025-10-26T03:15:00+02:00",
        "endDateTime": "2025-10-26T03:30:00+03:00",
    }

    assert validate_reservation(payload, timezone=TZ) == ERROR_END_BEFORE_START


def test_end_after_start_inside_repeated_hour_is_accepted() -> None:
    payload = {
        "name": "Night Owl",
        "startDateTime": "2025-10-26T03:30:00+03:00",
        "endDateTime": "2025-10-26T03:15:00+02:00",
    }

    assert validate_reservation(payload, timezone=TZ) is None
    draft = _build(payload)
    assert draft.start_at.isoformat() == "2025-10-26T03:30:00+03:00"
    assert draft.end_at.isoformat() == "2025-10-26T03:15:00+02:00"


@pytest.mark.parametrize(
    "start",
    [
        "0001-01-01T00:00:00",
        "9999-12-31T23:00:00",
        "9999-12-31T23:30:00+00:00",
    ],
)
def test_start_outside_datetime_range_is_invalid(start: str) -> None:
    payload = {"name": "A", "startDateTime": start}

    assert validate_reservation(payload, timezone=TZ) == ERROR_INVALID_START


def test_end_outside_datetime_range_is_invalid() -> None:
    payload = {
        "name": "A",
        "startDateTime": "2025-10-12T19:00:00",
        "endDateTime": "9999-12-31T23:30:00+00:00",
    }

    assert validate_reservation(payload, timezone=TZ) == ERROR_INVALID_END


def test_boolean_values_render_as_json_literals() -> None:
    draft = _build({"name": True, "partySize": True, "startDateTime": "2025-10-12T19:00:00"})

    assert draft.summary == "Reservation: true — party of true"
    assert "Name: true\nParty size: true\n" in draft.description
