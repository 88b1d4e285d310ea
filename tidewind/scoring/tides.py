"""가장 가까운 조석 매칭입니다. / Nearest tide matching."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..weather.models import TideEvent


def nearest_tide(target: datetime, events: Sequence[TideEvent]) -> TideEvent:
    """시간상 가장 가까운 조석입니다. / Return the tide closest in time.

    Scans the whole sequence, so ordering is irrelevant. On equal distance the
    earlier entry in the sequence wins.
    """

    if not events:
        raise ValueError("Tide event sequence must not be empty")
    closest = events[0]
    best_gap = abs(closest.time - target)
    for event in events[1:]:
        gap = abs(event.time - target)
        if gap < best_gap:
            best_gap = gap
            closest = event
    return closest
