"""Orbit path sampling: one orbital period as a sequence of ground points."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from orbwatch.core.elements import ElementSet, TrackedObject
from orbwatch.core.propagation import PositionSample, Propagator, effective_mean_motion
from orbwatch.utils.constants import PATH_POINTS, SECONDS_PER_DAY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathPoint:
    latitude: float
    longitude: float
    altitude: float


def orbital_period_seconds(elements: ElementSet, propagator: Propagator) -> float:
    """Orbital period in seconds, derived from mean motion."""
    return SECONDS_PER_DAY / effective_mean_motion(propagator, elements)


def sample_path(
    obj: TrackedObject,
    propagator: Propagator,
    reference_time: datetime | None = None,
    points: int = PATH_POINTS,
) -> list[PathPoint]:
    """Sample one full orbit of ``obj`` at equally spaced offsets.

    Args:
        obj: Object to sample.
        propagator: Position propagator.
        reference_time: Start of the orbit. Defaults to now (UTC).
        points: Number of offsets across the period.

    Returns:
        Up to ``points`` path points in time order. Offsets that fail to
        propagate are left out, so an object that never propagates gives an
        empty list.
    """
    if reference_time is None:
        reference_time = datetime.now(timezone.utc)

    elements = obj.elements
    period = orbital_period_seconds(elements, propagator)
    spacing = period / points

    path = []
    for i in range(points):
        state = propagator.propagate(elements, i * spacing, reference_time)
        if isinstance(state, PositionSample):
            path.append(PathPoint(state.latitude_deg, state.longitude_deg, state.altitude_km))

    if len(path) < points:
        logger.debug("Path for %s: %d of %d offsets failed", obj.name, points - len(path), points)
    return path
