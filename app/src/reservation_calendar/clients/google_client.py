"""Google Calendar SDK を扱うヘルパー。"""

from __future__ import annotations

from typing import Any, Sequence

from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import Resource, build

from reservation_calendar.core.settings import (
    ConfigurationError,
    CredentialFilePath,
    CredentialSource,
    InlineCredentials,
    Settings,
)

GOOGLE_CALENDAR_SCOPE = "https://www.googleapis.com/auth/calendar"


def build_credentials(
    source: CredentialSource,
    *,
    scopes: Sequence[str] | None = None,
) -> service_account.Credentials:
    """資格情報ソースからサービスアカウント認証情報を構築する。"""

    scopes = list(scopes or [GOOGLE_CALENDAR_SCOPE])
    try:
        if isinstance(source, InlineCredentials):
            return service_account.Credentials.from_service_account_info(
                source.info, scopes=scopes
            )
        if isinstance(source, CredentialFilePath):
            if not source.path.exists():
                raise ConfigurationError(
                    f"Service account key file not found at {source.path}"
                )
            return service_account.Credentials.from_service_account_file(
                str(source.path), scopes=scopes
            )
    except (ValueError, KeyError, GoogleAuthError) as exc:
        raise ConfigurationError(f"Invalid service account credentials: {exc}") from exc
    raise ConfigurationError(f"Unsupported credential source: {source!r}")


def build_calendar_service(*, credentials: service_account.Credentials) -> Resource:
    """google-api-python-client の Calendar Service を生成する。"""

    return build("calendar", "v3", credentials=credentials, cache_discovery=False)


def service_from_settings(settings: Settings) -> Resource:
    """Settings から必要情報を取り出して Calendar Service を生成する。"""

    credentials = build_credentials(settings.credentials)
    return build_calendar_service(credentials=credentials)


def insert_event(
    service: Any,
    *,
    calendar_id: str,
    event: dict[str, Any],
    send_updates: str = "none",
) -> dict[str, Any]:
    """events.insert を呼び出し、作成されたイベントリソースを返す。"""

    return (
        service.events()
        .insert(
            calendarId=calendar_id,
            body=event,
            sendUpdates=send_updates,
        )
        .execute()
    )
