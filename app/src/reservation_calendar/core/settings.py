"""アプリ全体で共有する設定読み込みロジック。"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import boto3
from botocore.exceptions import ClientError
from dotenv import load_dotenv


_DEFAULT_REGION = "eu-north-1"
_DEFAULT_TZ = "Europe/Riga"
_DEFAULT_SEND_UPDATES = "none"
_LOCAL_ENV = "local"
_SEND_UPDATES_CHOICES = ("none", "all", "externalOnly")


class ConfigurationError(RuntimeError):
    """起動時に解決できない設定不備。プロセスはリクエストを受け付けない。"""


@dataclass(frozen=True, slots=True)
class InlineCredentials:
    """環境変数に直接埋め込まれたサービスアカウント鍵 (JSON)。"""

    info: dict[str, Any]


@dataclass(frozen=True, slots=True)
class CredentialFilePath:
    """サービスアカウント鍵ファイルへのパス。"""

    path: Path


CredentialSource = Union[InlineCredentials, CredentialFilePath]


@dataclass(frozen=True, slots=True)
class Settings:
    """起動時に一度だけ構築される設定値の集合。"""

    app_env: str
    region: str
    calendar_id: str
    credentials: CredentialSource
    timezone: str = _DEFAULT_TZ
    send_updates: str = _DEFAULT_SEND_UPDATES
    ssm_path_prefix: str | None = None

    @property
    def is_local(self) -> bool:
        return self.app_env == _LOCAL_ENV


def parse_inline_credentials(raw: str) -> InlineCredentials:
    """JSON 文字列のサービスアカウント鍵を InlineCredentials に変換する。"""

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            "GOOGLE_SERVICE_ACCOUNT_KEY must contain valid JSON."
        ) from exc
    if not isinstance(parsed, dict):
        raise ConfigurationError("GOOGLE_SERVICE_ACCOUNT_KEY must be a JSON object.")
    return InlineCredentials(info=parsed)


def resolve_credential_source(
    *, inline_key: str | None, key_file: str | None
) -> CredentialSource:
    """2 種類の資格情報ソースのうち 1 つを選ぶ。両方ある場合はインラインを優先する。"""

    if inline_key:
        return parse_inline_credentials(inline_key)
    if key_file:
        return CredentialFilePath(path=Path(key_file).resolve())
    raise ConfigurationError(
        "No Google service account credentials found in env. "
        "Set GOOGLE_APPLICATION_CREDENTIALS or GOOGLE_SERVICE_ACCOUNT_KEY."
    )


def _validate_timezone(name: str) -> str:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown time zone: {name}") from exc
    return name


def _validate_send_updates(value: str) -> str:
    if value not in _SEND_UPDATES_CHOICES:
        raise ConfigurationError(
            f"CALENDAR_SEND_UPDATES must be one of {', '.join(_SEND_UPDATES_CHOICES)}."
        )
    return value


def _get_required_env(name: str, hint: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ConfigurationError(f"Missing {name} in env. {hint}")
    return value


def _fetch_ssm_parameters(
    region: str, names: Iterable[str], prefix: str
) -> dict[str, str]:
    name_list = [f"{prefix}/{name}" for name in names]
    client = boto3.client("ssm", region_name=region)
    try:
        resp = client.get_parameters(Names=name_list, WithDecryption=True)
    except ClientError as exc:  # pragma: no cover - boto3 例外ラップ
        raise ConfigurationError("Failed to fetch SSM parameters.") from exc

    found = {item["Name"]: item["Value"] for item in resp.get("Parameters", [])}
    missing = {name for name in name_list if name not in found}
    if missing:
        raise ConfigurationError(f"Missing SSM parameters: {', '.join(sorted(missing))}")
    return found


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """環境に応じて `.env` または SSM から設定を構築する。"""

    load_dotenv()
    app_env = os.getenv("APP_ENV", _LOCAL_ENV)
    region = os.getenv("REGION", _DEFAULT_REGION)
    timezone = _validate_timezone(os.getenv("RESTAURANT_TIMEZONE") or _DEFAULT_TZ)
    send_updates = _validate_send_updates(
        os.getenv("CALENDAR_SEND_UPDATES") or _DEFAULT_SEND_UPDATES
    )

    if app_env == _LOCAL_ENV:
        return Settings(
            app_env=app_env,
            region=region,
            calendar_id=_get_required_env(
                "CALENDAR_ID", "Set CALENDAR_ID to your Google Calendar ID."
            ),
            credentials=resolve_credential_source(
                inline_key=os.getenv("GOOGLE_SERVICE_ACCOUNT_KEY"),
                key_file=os.getenv("GOOGLE_APPLICATION_CREDENTIALS"),
            ),
            timezone=timezone,
            send_updates=send_updates,
            ssm_path_prefix=None,
        )

    prefix = os.getenv("SSM_PATH_PREFIX", "/app/prod")
    required_keys = [
        "google/calendar_id",
        "google/service_account_key",
    ]
    values = _fetch_ssm_parameters(region=region, names=required_keys, prefix=prefix)

    def from_ssm(key: str) -> str:
        return values[f"{prefix}/{key}"]

    return Settings(
        app_env=app_env,
        region=region,
        calendar_id=from_ssm("google/calendar_id"),
        credentials=parse_inline_credentials(from_ssm("google/service_account_key")),
        timezone=timezone,
        send_updates=send_updates,
        ssm_path_prefix=prefix,
    )
