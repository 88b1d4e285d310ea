"""세션 분석 엔진입니다. / Session analysis engine."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, tzinfo
from typing import List, Optional
from zoneinfo import ZoneInfo

from pydantic import Field

from ..base import TideWindModel
from ..config import DEFAULT_TIMEZONE, ScoringRubric
from ..scoring.daylight import is_daylight
from ..scoring.rubric import MAX_SCORE, compass_label, round_half_up, score_sample
from ..scoring.tides import nearest_tide
from ..weather.models import (
    ForecastSample,
    TideEvent,
    TideEventSeries,
    WindForecastSeries,
)

LOGGER = logging.getLogger("tidewind.sessions")

SESSION_LENGTH = timedelta(hours=2)
TOP_SESSIONS = 20
EXCELLENT_SCORE = 80
GOOD_SCORE = 60
AVERAGE_SCORE = 40
DATE_FORMAT = "%d/%m/%Y"
TIME_FORMAT = "%H:%M"


class SessionWindow(TideWindModel):
    """추천 세션 창입니다. / Recommended session window."""

    starts_at: datetime
    date: str
    time_start: str
    time_end: str
    wind_speed_knots: int
    wind_direction_label: str
    tide_height: float
    score: int = Field(ge=0, le=MAX_SCORE)
    rationale: str


class SessionCounts(TideWindModel):
    """점수대별 집계입니다. / Counts per score band."""

    excellent_sessions: int = 0
    good_sessions: int = 0
    average_sessions: int = 0
    total_windows: int = 0


class AnalysisSummary(TideWindModel):
    """분석 요약 결과입니다. / Analysis summary result."""

    all_sessions: List[SessionWindow] = Field(default_factory=list)
    best_sessions: List[SessionWindow] = Field(default_factory=list)
    tomorrow_best: Optional[SessionWindow] = None
    counts: SessionCounts = Field(default_factory=SessionCounts)


def _localize(moment: datetime, zone: tzinfo) -> datetime:
    """현지 시각으로 변환합니다. / Convert to local wall-clock time."""

    if moment.tzinfo is None:
        return moment.replace(tzinfo=zone)
    return moment.astimezone(zone)


def _build_window(
    sample: ForecastSample,
    local_time: datetime,
    tide: TideEvent,
    rubric: ScoringRubric,
) -> Optional[SessionWindow]:
    """표본 하나로 세션을 만듭니다. / Build one session from a sample."""

    breakdown = score_sample(
        sample.wind_speed,
        tide.height,
        sample.wind_direction,
        local_time.hour,
        rubric,
    )
    if breakdown is None:
        return None
    return SessionWindow(
        starts_at=local_time,
        date=local_time.strftime(DATE_FORMAT),
        time_start=local_time.strftime(TIME_FORMAT),
        time_end=(local_time + SESSION_LENGTH).strftime(TIME_FORMAT),
        wind_speed_knots=round_half_up(breakdown.wind_speed_knots),
        wind_direction_label=compass_label(sample.wind_direction),
        tide_height=tide.height,
        score=breakdown.score,
        rationale=breakdown.rationale,
    )


def collect_sessions(
    forecast: WindForecastSeries,
    tides: TideEventSeries,
    rubric: Optional[ScoringRubric] = None,
    timezone: str = DEFAULT_TIMEZONE,
) -> List[SessionWindow]:
    """조건을 통과한 세션을 모읍니다. / Collect sessions in forecast order."""

    if not tides.events:
        return []
    rubric = rubric or ScoringRubric()
    zone = ZoneInfo(timezone)
    local_tides = [
        event.model_copy(update={"time": _localize(event.time, zone)})
        for event in tides.events
    ]
    sessions: List[SessionWindow] = []
    for sample in forecast.samples:
        local_time = _localize(sample.time, zone)
        if not is_daylight(local_time.hour, local_time.month):
            continue
        tide = nearest_tide(local_time, local_tides)
        window = _build_window(sample, local_time, tide, rubric)
        if window is not None:
            sessions.append(window)
    return sessions


def summarize_sessions(
    sessions: List[SessionWindow], tomorrow: str
) -> AnalysisSummary:
    """세션을 정렬하고 요약합니다. / Rank and summarize sessions."""

    # sorted() is stable with reverse=True, ties keep forecast order.
    ranked = sorted(sessions, key=lambda session: session.score, reverse=True)
    tomorrow_best = next(
        (session for session in ranked if session.date == tomorrow), None
    )
    counts = SessionCounts(
        excellent_sessions=sum(1 for s in ranked if s.score >= EXCELLENT_SCORE),
        good_sessions=sum(
            1 for s in ranked if GOOD_SCORE <= s.score < EXCELLENT_SCORE
        ),
        average_sessions=sum(
            1 for s in ranked if AVERAGE_SCORE <= s.score < GOOD_SCORE
        ),
        total_windows=len(ranked),
    )
    return AnalysisSummary(
        all_sessions=ranked[:TOP_SESSIONS],
        best_sessions=[s for s in ranked if s.score >= GOOD_SCORE],
        tomorrow_best=tomorrow_best,
        counts=counts,
    )


def analyze_sessions(
    forecast: WindForecastSeries,
    tides: TideEventSeries,
    *,
    rubric: Optional[ScoringRubric] = None,
    timezone: str = DEFAULT_TIMEZONE,
    now: Optional[datetime] = None,
) -> AnalysisSummary:
    """예보와 조석을 융합합니다. / Fuse forecast and tides into ranked sessions."""

    zone = ZoneInfo(timezone)
    current = _localize(now, zone) if now else datetime.now(zone)
    tomorrow = (current + timedelta(days=1)).strftime(DATE_FORMAT)
    sessions = collect_sessions(forecast, tides, rubric, timezone)
    summary = summarize_sessions(sessions, tomorrow)
    LOGGER.info(
        "analysis_complete",
        extra={
            "forecast": forecast.provenance,
            "tides": tides.provenance,
            "samples": len(forecast.samples),
            "tide_events": len(tides.events),
            "total_windows": summary.counts.total_windows,
        },
    )
    return summary
