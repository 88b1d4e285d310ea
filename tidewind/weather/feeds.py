"""예보 및 조석 피드 어댑터입니다. / Forecast and tide feed adapters."""

from __future__ import annotations

import asyncio
import itertools
import logging
import math
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import httpx
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..config import FeedSettings
from .models import (
    ForecastSample,
    TideEvent,
    TideEventSeries,
    TideKind,
    WindForecastSeries,
)

LOGGER = logging.getLogger("tidewind.feeds")

Payload = Union[Dict[str, Any], List[Any]]


class FeedError(Exception):
    """피드 조회 오류입니다. / Feed retrieval error."""


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """타임스탬프를 파싱합니다. / Parse timestamp value."""

    if not isinstance(value, str) or not value:
        return None
    normalized = value.replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _as_float(value: Any) -> float:
    """숫자로 변환하고 실패 시 0입니다. / Coerce to float, 0 on failure."""

    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    return result if math.isfinite(result) else 0.0


def _sort_key(event: TideEvent) -> datetime:
    """정렬용 시각입니다. / Aware sort key, naive times read as UTC."""

    if event.time.tzinfo is None:
        return event.time.replace(tzinfo=timezone.utc)
    return event.time


def _records(payload: Payload, key: str) -> List[Any]:
    """페이로드에서 레코드를 꺼냅니다. / Extract records from payload."""

    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        records = payload.get(key, [])
        if isinstance(records, list):
            return records
    raise FeedError(f"Expected a list or an object with '{key}'")


def normalize_forecast(
    payload: Payload, provenance: str = "unknown"
) -> WindForecastSeries:
    """예보 페이로드를 정규화합니다. / Normalize forecast payload."""

    samples: List[ForecastSample] = []
    for index, item in enumerate(_records(payload, "forecasts")):
        if not isinstance(item, dict):
            LOGGER.warning(
                "record_dropped",
                extra={"feed": provenance, "index": index, "reason": "not an object"},
            )
            continue
        timestamp = _parse_timestamp(item.get("time"))
        if timestamp is None:
            LOGGER.warning(
                "record_dropped",
                extra={"feed": provenance, "index": index, "reason": "bad time"},
            )
            continue
        samples.append(
            ForecastSample(
                time=timestamp,
                wind_speed=_as_float(item.get("windSpeed")),
                wind_gust=_as_float(item.get("windGust")),
                wind_direction=_as_float(item.get("windDirection")),
            )
        )
    return WindForecastSeries(samples=samples, provenance=provenance)


def normalize_tides(payload: Payload, provenance: str = "unknown") -> TideEventSeries:
    """조석 페이로드를 정규화합니다. / Normalize tide payload."""

    kinds = {kind.value for kind in TideKind}
    events: List[TideEvent] = []
    for index, item in enumerate(_records(payload, "tideEvents")):
        if not isinstance(item, dict):
            LOGGER.warning(
                "record_dropped",
                extra={"feed": provenance, "index": index, "reason": "not an object"},
            )
            continue
        timestamp = _parse_timestamp(item.get("time"))
        kind = item.get("type")
        if timestamp is None or kind not in kinds:
            LOGGER.warning(
                "record_dropped",
                extra={"feed": provenance, "index": index, "reason": "bad time/type"},
            )
            continue
        events.append(
            TideEvent(time=timestamp, height=_as_float(item.get("height")), kind=kind)
        )
    events.sort(key=_sort_key)
    return TideEventSeries(events=events, provenance=provenance)


class SeriesFeed(ABC):
    """시계열 피드 인터페이스입니다. / Series feed interface."""

    def __init__(self, settings: FeedSettings) -> None:
        self.settings = settings
        self._keys: Iterator[str] | None = (
            itertools.cycle(settings.api_keys) if settings.api_keys else None
        )

    @property
    def name(self) -> str:
        """피드 이름을 돌려줍니다. / Return feed name."""

        return self.settings.name

    def build_headers(self) -> Dict[str, str]:
        """요청 헤더를 작성합니다. / Build request headers."""

        headers: Dict[str, str] = {"accept": "application/json"}
        if self._keys is not None:
            headers[self.settings.api_key_header] = next(self._keys)
        return headers

    async def fetch_payload(self) -> Payload:
        """리트라이 포함 요청입니다. / Perform request with retry."""

        retryer = AsyncRetrying(
            wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
            stop=stop_after_attempt(self.settings.retries + 1),
            retry=retry_if_exception_type(httpx.HTTPError),
            reraise=True,
        )
        payload: Payload | None = None
        try:
            async for attempt in retryer:
                with attempt:
                    payload = await self._fetch_remote()
        except (RetryError, httpx.HTTPError) as exc:
            raise FeedError(f"{self.name}: {exc}") from exc
        except ValueError as exc:
            raise FeedError(f"{self.name}: invalid JSON ({exc})") from exc
        if payload is None:  # pragma: no cover - safety net
            raise FeedError(f"{self.name}: retry loop produced no result")
        return payload

    async def _fetch_remote(self) -> Payload:
        """HTTP 호출을 실행합니다. / Execute HTTP call."""

        timeout = httpx.Timeout(self.settings.timeout_seconds)
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(self.settings.url, headers=self.build_headers())
            response.raise_for_status()
            return response.json()

    @abstractmethod
    async def fetch(self) -> Any:
        """정규화된 시계열을 가져옵니다. / Fetch normalized series."""


class ForecastFeed(SeriesFeed):
    """풍속 예보 피드입니다. / Wind forecast feed."""

    async def fetch(self) -> WindForecastSeries:
        """예보 시계열을 가져옵니다. / Fetch forecast series."""

        payload = await self.fetch_payload()
        return normalize_forecast(payload, provenance=self.name)


class TideFeed(SeriesFeed):
    """조석 피드입니다. / Tide table feed."""

    async def fetch(self) -> TideEventSeries:
        """조석 시계열을 가져옵니다. / Fetch tide series."""

        payload = await self.fetch_payload()
        return normalize_tides(payload, provenance=self.name)


class FeedService:
    """피드 서비스 파사드입니다. / Feed service facade."""

    def __init__(
        self,
        forecast_feed: ForecastFeed | None,
        tide_feed: TideFeed | None,
    ) -> None:
        self.forecast_feed = forecast_feed
        self.tide_feed = tide_feed

    async def collect(self) -> Tuple[WindForecastSeries, TideEventSeries]:
        """두 시계열을 동시에 수집합니다. / Collect both series concurrently."""

        forecast, tides = await asyncio.gather(
            self._safe_fetch(self.forecast_feed, WindForecastSeries),
            self._safe_fetch(self.tide_feed, TideEventSeries),
        )
        return forecast, tides

    async def _safe_fetch(self, feed: SeriesFeed | None, empty: type) -> Any:
        """실패 시 빈 시계열입니다. / Degrade to empty series on failure."""

        if feed is None:
            return empty()
        try:
            LOGGER.info("feed_attempt", extra={"feed": feed.name})
            return await feed.fetch()
        except FeedError as exc:
            LOGGER.warning("feed_failed", extra={"feed": feed.name, "error": str(exc)})
            return empty(provenance=feed.name)


def build_feed_service(
    forecast_settings: FeedSettings | None,
    tide_settings: FeedSettings | None,
) -> FeedService:
    """설정으로 서비스를 만듭니다. / Build feed service from settings."""

    return FeedService(
        ForecastFeed(forecast_settings) if forecast_settings else None,
        TideFeed(tide_settings) if tide_settings else None,
    )
