"""Shared fixtures: a deterministic fake propagator and real TLE text."""
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import numpy as np
import pytest

from orbwatch.core.elements import Classification, ElementSet, TrackedObject
from orbwatch.core.propagation import PositionSample, PropagationFailure, PropagationResult

Track = Callable[[float], Optional[tuple[float, float, float]]]

REFERENCE_TIME = datetime(2024, 2, 14, 12, 0, tzinfo=timezone.utc)

ISS_NAME = "ISS (ZARYA)"
ISS_LINE1 = "1 25544U 98067A   24045.54896019  .00016717  00000-0  30093-3 0  9993"
ISS_LINE2 = "2 25544  51.6412 207.4925 0004948 290.5508 178.9792 15.49583488439596"

CATALOG_TEXT = """\
ISS (ZARYA)
1 25544U 98067A   24045.54896019  .00016717  00000-0  30093-3 0  9993
2 25544  51.6412 207.4925 0004948 290.5508 178.9792 15.49583488439596
CSS (TIANHE)
1 48274U 21035A   24045.50261574  .00021540  00000-0  25163-3 0  9993
2 48274  41.4681 279.1498 0005372 149.8847 345.3740 15.62096269157018
HST
1 20580U 90037B   24045.55478014  .00001456  00000-0  73052-4 0  9994
2 20580  28.4701  41.0696 0002622 348.3544 140.2428 15.09435694872912
NOAA 18
1 28654U 05018A   24045.52083333  .00000149  00000-0  10834-3 0  9994
2 28654  98.9710 100.7890 0014048 313.6230  46.3750 14.12905012970123
"""


class FakePropagator:
    """Propagator driven by per-object position functions.

    Objects are keyed by their line1 text. A track returning None, or an
    unknown line1, is reported as a propagation failure. Every call is
    recorded as (line1, offset_seconds).
    """

    def __init__(self, tracks: dict[str, Track], mean_motions: dict[str, float] | None = None):
        self.tracks = tracks
        self.mean_motions = mean_motions or {}
        self.calls: list[tuple[str, float]] = []

    def propagate(self, elements: ElementSet, offset_seconds: float,
                  reference_time: datetime) -> PropagationResult:
        self.calls.append((elements.line1, offset_seconds))
        track = self.tracks.get(elements.line1)
        pos = track(offset_seconds) if track else None
        if pos is None:
            return PropagationFailure(f"no position for {elements.line1!r}")
        x, y, z = pos
        r = math.sqrt(x * x + y * y + z * z)
        return PositionSample(
            position_km=np.array(pos, dtype=np.float64),
            latitude_deg=math.degrees(math.asin(z / r)),
            longitude_deg=math.degrees(math.atan2(y, x)),
            altitude_km=r - 6378.137,
            epoch=reference_time + timedelta(seconds=offset_seconds),
        )

    def mean_motion(self, elements: ElementSet) -> float:
        return self.mean_motions.get(elements.line1, 15.5)

    def offsets_for(self, line1: str) -> list[float]:
        return [offset for key, offset in self.calls if key == line1]


def circular(radius_km: float = 6778.0, period_s: float = 5560.0) -> Track:
    """Equatorial circular orbit starting on the +x axis."""
    def track(offset: float) -> tuple[float, float, float]:
        angle = 2 * math.pi * offset / period_s
        return (radius_km * math.cos(angle), radius_km * math.sin(angle), 0.0)
    return track


def offset_from(base: Track, delta: Callable[[float], tuple[float, float, float] | None]) -> Track:
    """Track that follows ``base`` displaced by ``delta(offset)``."""
    def track(offset: float):
        d = delta(offset)
        if d is None:
            return None
        x, y, z = base(offset)
        return (x + d[0], y + d[1], z + d[2])
    return track


def make_object(name: str, key: str, classification=Classification.UNKNOWN, id: int | None = None) -> TrackedObject:
    return TrackedObject(name=name, line1=key, line2=f"2 {key}", classification=classification, id=id)


@pytest.fixture
def reference_time() -> datetime:
    return REFERENCE_TIME
