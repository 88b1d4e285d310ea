"""계절별 항해 가능 시간대입니다. / Seasonal navigable daylight window."""

from __future__ import annotations

from typing import Optional, Tuple

# (months, start hour, end hour with DST, end hour without DST)
_SEASONS: Tuple[Tuple[Tuple[int, ...], int, int, int], ...] = (
    ((5, 6, 7, 8), 7, 21, 20),
    ((3, 4, 9, 10), 8, 20, 19),
    ((11, 12, 1, 2), 9, 18, 18),
)


def approximate_dst(month: int) -> bool:
    """서머타임 근사치입니다. / Approximate daylight-saving flag.

    Clocks change on the last Sundays of March and October; April to
    September is used as the whole-month approximation.
    """

    return 4 <= month <= 9


def daylight_window(month: int, dst: Optional[bool] = None) -> Tuple[int, int]:
    """월별 시작/종료 시각입니다. / Inclusive start and end hour for a month."""

    if dst is None:
        dst = approximate_dst(month)
    for months, start_hour, end_dst, end_standard in _SEASONS:
        if month in months:
            return start_hour, end_dst if dst else end_standard
    raise ValueError(f"Month out of range: {month}")


def is_daylight(hour: int, month: int) -> bool:
    """항해 가능 시각인지 확인합니다. / Check hour falls inside daylight."""

    start_hour, end_hour = daylight_window(month)
    return start_hour <= hour <= end_hour
