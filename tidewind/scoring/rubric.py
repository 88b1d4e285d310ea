"""풍속/조석 세션 채점 규칙입니다. / Wind and tide session scoring rubric."""

from __future__ import annotations

import math
from typing import List, Optional, Tuple

from pydantic import Field

from ..base import TideWindModel
from ..config import ScoringRubric

KMH_PER_KNOT = 1.852
MAX_SCORE = 100

WIND_EXCELLENT_POINTS = 40
WIND_GOOD_POINTS = 30
WIND_AVERAGE_POINTS = 20
TIDE_FULL_POINTS = 30
TIDE_SUFFICIENT_POINTS = 20
SEA_WIND_POINTS = 20
LAND_WIND_POINTS = 12
OTHER_DIRECTION_POINTS = 8
TIME_BONUS_POINTS = 10

# O is Ouest (west), not Est.
COMPASS_POINTS: Tuple[str, ...] = (
    "N",
    "NNE",
    "NE",
    "ENE",
    "E",
    "ESE",
    "SE",
    "SSE",
    "S",
    "SSO",
    "SO",
    "OSO",
    "O",
    "ONO",
    "NO",
    "NNO",
)


class ScoreBreakdown(TideWindModel):
    """채점 결과입니다. / Scoring result for one sample."""

    score: int = Field(ge=0, le=MAX_SCORE)
    rationale: str
    wind_speed_knots: float


def round_half_up(value: float) -> int:
    """0.5를 올림하는 반올림입니다. / Round with halves going up."""

    return int(math.floor(value + 0.5))


def kmh_to_knots(speed_kmh: float) -> float:
    """km/h를 노트로 변환합니다. / Convert km/h to knots."""

    return speed_kmh / KMH_PER_KNOT


def compass_label(degrees: float) -> str:
    """16방위 레이블입니다. / Nearest of the 16 compass points."""

    return COMPASS_POINTS[round_half_up(degrees / 22.5) % len(COMPASS_POINTS)]


def _within(value: float, bounds: Tuple[float, float]) -> bool:
    low, high = bounds
    return low <= value <= high


def score_sample(
    wind_speed_kmh: float,
    tide_height: float,
    wind_direction: float,
    hour: int,
    rubric: Optional[ScoringRubric] = None,
) -> Optional[ScoreBreakdown]:
    """표본 하나를 채점합니다. / Score one forecast sample.

    Returns ``None`` when the sample is excluded: sustained wind below the
    minimum or matched tide too low to launch. Excluded samples are a routine
    outcome, not an error.
    """

    rubric = rubric or ScoringRubric()
    knots = kmh_to_knots(wind_speed_kmh)
    if knots < rubric.min_wind_knots or tide_height < rubric.min_tide_m:
        return None

    score = 0
    labels: List[str] = []

    if knots >= rubric.excellent_wind_knots:
        score += WIND_EXCELLENT_POINTS
        labels.append("Vent excellent")
    elif knots >= rubric.good_wind_knots:
        score += WIND_GOOD_POINTS
        labels.append("Vent correct")
    else:
        score += WIND_AVERAGE_POINTS
        labels.append("Vent moyen")

    if tide_height >= rubric.full_tide_m:
        score += TIDE_FULL_POINTS
        labels.append("Pleine eau")
    else:
        score += TIDE_SUFFICIENT_POINTS
        labels.append("Marée suffisante")

    # Sea breeze sector is steadier than offshore land wind.
    if _within(wind_direction, rubric.sea_sector):
        score += SEA_WIND_POINTS
        labels.append("Vent à dominante Ouest")
    elif _within(wind_direction, rubric.land_sector):
        score += LAND_WIND_POINTS
        labels.append("Vent à dominante Est")
    else:
        score += OTHER_DIRECTION_POINTS
        labels.append("Direction correcte")

    if _within(hour, rubric.bonus_hours):
        score += TIME_BONUS_POINTS
        labels.append("Bon créneau")

    return ScoreBreakdown(
        score=max(0, min(MAX_SCORE, score)),
        rationale=" + ".join(labels),
        wind_speed_knots=knots,
    )
