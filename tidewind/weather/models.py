"""정규화된 예보 및 조석 모델입니다. / Normalized forecast and tide models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import Field

from ..base import TideWindModel


class TideKind(str, Enum):
    """조석 극값 종류입니다. / Tide extremum kind."""

    HIGH = "high"
    LOW = "low"


class ForecastSample(TideWindModel):
    """개별 풍속 예보 표본입니다. / Single wind forecast sample."""

    time: datetime
    wind_speed: float = Field(description="Sustained wind speed in km/h")
    wind_gust: float = Field(description="Gust speed in km/h")
    wind_direction: float = Field(description="Direction in degrees")


class TideEvent(TideWindModel):
    """조석 극값 이벤트입니다. / Tide extremum event."""

    time: datetime
    height: float = Field(description="Height in meters")
    kind: TideKind


class WindForecastSeries(TideWindModel):
    """풍속 예보 시계열입니다. / Wind forecast series."""

    samples: List[ForecastSample] = Field(default_factory=list)
    provenance: str = "unknown"


class TideEventSeries(TideWindModel):
    """조석 이벤트 시계열입니다. / Tide event series."""

    events: List[TideEvent] = Field(default_factory=list)
    provenance: str = "unknown"
