from __future__ import annotations

import os
from collections.abc import Iterator
from unittest.mock import MagicMock, patch

os.environ.setdefault("CALENDAR_ID", "primary")
os.environ.setdefault("GOOGLE_SERVICE_ACCOUNT_KEY", '{"type": "service_account"}')

import pytest

from reservation_calendar.core import settings as core_settings


@pytest.fixture(autouse=True)
def basic_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """アプリ初期化に必要な環境変数をテスト時にセットする。"""

    monkeypatch.setenv("CALENDAR_ID", "primary")
    monkeypatch.setenv("GOOGLE_SERVICE_ACCOUNT_KEY", '{"type": "service_account"}')
    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)
    monkeypatch.delenv("RESTAURANT_TIMEZONE", raising=False)
    monkeypatch.delenv("CALENDAR_SEND_UPDATES", raising=False)
    monkeypatch.delenv("APP_ENV", raising=False)
    core_settings.load_settings.cache_clear()


@pytest.fixture(autouse=True)
def calendar_service() -> Iterator[MagicMock]:
    """起動時に構築される Calendar Service をモックへ差し替える。"""

    service = MagicMock()
    insert_call = service.events.return_value.insert.return_value
    insert_call.execute.return_value = {
        "id": "event-1",
        "htmlLink": "https://www.google.com/calendar/event?eid=event-1",
        "status": "confirmed",
    }
    with patch(
        "reservation_calendar.clients.google_client.service_from_settings",
        return_value=service,
    ):
        yield service
