"""환경 및 설정 로더입니다. / Environment and configuration loader."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import Field, SecretStr, ValidationError, field_validator, model_validator

from .base import TideWindModel

DEFAULT_TIMEZONE = "Europe/Paris"


class ScoringRubric(TideWindModel):
    """세션 채점 임계치입니다. / Session scoring thresholds.

    Defaults are tuned for the Fouras/Châtelaillon spots; confirm them against
    the deployment site before relying on the ranking elsewhere.
    """

    min_wind_knots: float = Field(default=12.0, ge=0)
    good_wind_knots: float = Field(default=15.0, ge=0)
    excellent_wind_knots: float = Field(default=20.0, ge=0)
    min_tide_m: float = Field(default=2.5, ge=0)
    full_tide_m: float = Field(default=4.0, ge=0)
    sea_sector: Tuple[float, float] = (225.0, 315.0)
    land_sector: Tuple[float, float] = (45.0, 135.0)
    bonus_hours: Tuple[int, int] = (13, 17)

    @model_validator(mode="after")
    def _check_ladders(self) -> "ScoringRubric":
        """임계치 순서를 확인합니다. / Check threshold ordering."""

        if not (
            self.min_wind_knots <= self.good_wind_knots <= self.excellent_wind_knots
        ):
            raise ValueError("Wind thresholds must be ascending")
        if self.min_tide_m > self.full_tide_m:
            raise ValueError("min_tide_m must not exceed full_tide_m")
        for low, high in (self.sea_sector, self.land_sector, self.bonus_hours):
            if low > high:
                raise ValueError("Range bounds must be ascending")
        return self


class FeedSettings(TideWindModel):
    """시계열 피드 설정입니다. / Series feed settings."""

    name: str
    url: str
    timeout_seconds: float = Field(default=10.0, gt=0)
    retries: int = Field(default=3, ge=0)
    api_key_header: str = Field(default="apikey")
    api_keys: List[str] = Field(default_factory=list, repr=False)
    secret_suffixes: List[str] = Field(default_factory=list, exclude=True)


class FeedSecret(TideWindModel):
    """피드 시크릿 래퍼입니다. / Feed secret wrapper."""

    api_key: SecretStr | None = None


class AppConfig(TideWindModel):
    """애플리케이션 전체 설정입니다. / Application wide configuration."""

    timezone: str = DEFAULT_TIMEZONE
    rubric: ScoringRubric = Field(default_factory=ScoringRubric)
    forecast_feed: Optional[FeedSettings] = None
    tide_feed: Optional[FeedSettings] = None

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        """IANA 시간대를 검증합니다. / Validate IANA timezone name."""

        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value


def load_yaml_config(path: Path) -> Dict[str, Any]:
    """YAML 설정을 읽습니다. / Load YAML configuration."""

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError("Config root must be a mapping")
    return data


def load_secrets_from_env(
    suffixes: List[str] | None = None,
) -> Dict[str, FeedSecret]:
    """환경 변수에서 시크릿을 적재합니다. / Load secrets from environment."""

    mapping: Dict[str, FeedSecret] = {}
    for suffix in suffixes or ("A", "B"):
        env_key = f"TIDEWIND_API_KEY_{suffix}"
        raw_value = os.getenv(env_key)
        secret = SecretStr(raw_value) if raw_value else None
        mapping[suffix] = FeedSecret(api_key=secret)
    return mapping


def _declared_suffixes(raw: Dict[str, Any]) -> List[str]:
    """설정에 선언된 접미사입니다. / Suffixes declared in config."""

    suffixes: List[str] = []
    for key in ("forecast_feed", "tide_feed"):
        feed = raw.get(key) or {}
        for suffix in feed.get("secret_suffixes", []):
            if suffix not in suffixes:
                suffixes.append(suffix)
    return suffixes


def merge_config(
    raw: Dict[str, Any], secrets: Dict[str, FeedSecret]
) -> Dict[str, Any]:
    """환경과 파일 설정을 병합합니다. / Merge file config with secrets."""

    for key in ("forecast_feed", "tide_feed"):
        feed = raw.get(key)
        if not feed:
            continue
        keys = list(feed.get("api_keys", []))
        for suffix in feed.get("secret_suffixes", []):
            secret = secrets.get(suffix)
            if secret and secret.api_key:
                keys.append(secret.api_key.get_secret_value())
        feed["api_keys"] = keys
    return raw


def load_app_config(path: Path | None = None) -> AppConfig:
    """최종 앱 설정을 반환합니다. / Return final app configuration."""

    config_path = path or Path("config.yaml")
    raw = load_yaml_config(config_path)
    secrets = load_secrets_from_env(_declared_suffixes(raw) or None)
    merged = merge_config(raw, secrets)
    try:
        return AppConfig.model_validate(merged)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
