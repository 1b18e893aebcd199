"""Live positions of the whole catalog at one instant."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence

from orbwatch.core.elements import Classification, TrackedObject
from orbwatch.core.propagation import PositionSample, Propagator
from orbwatch.data.store import CatalogStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LivePosition:
    id: int | None
    name: str
    classification: Classification
    latitude: float
    longitude: float
    altitude: float


def live_positions(
    catalog: Sequence[TrackedObject],
    propagator: Propagator,
    reference_time: datetime | None = None,
) -> list[LivePosition]:
    """Current geodetic position of every object that propagates.

    Objects whose propagation fails are left out.
    """
    if reference_time is None:
        reference_time = datetime.now(timezone.utc)

    positions = []
    for obj in catalog:
        state = propagator.propagate(obj.elements, 0.0, reference_time)
        if not isinstance(state, PositionSample):
            continue
        positions.append(LivePosition(
            id=obj.id,
            name=obj.name,
            classification=obj.classification,
            latitude=state.latitude_deg,
            longitude=state.longitude_deg,
            altitude=state.altitude_km,
        ))

    logger.debug("live_positions: %d/%d objects propagated", len(positions), len(catalog))
    return positions


def catalog_status(store: CatalogStore) -> str:
    return f"Systems online: Tracking {store.count()} satellites."
