"""
orbwatch — Catalog tracking and conjunction warnings for a protected asset.

Syncs two-line element feeds into a catalog, screens one protected asset
against every tracked object over a future window, and samples orbit
paths for display.
"""

from __future__ import annotations

__version__ = "0.1.0-dev"

from orbwatch.core.elements import Classification, ElementSet, TrackedObject, parse_feed
from orbwatch.core.propagation import (
    PositionSample,
    PropagationFailure,
    Propagator,
    SGP4Propagator,
    effective_mean_motion,
)
from orbwatch.core.screening import (
    ConjunctionScreener,
    ConjunctionWarning,
    ScreeningReport,
    screen,
    screen_now,
    summarize,
)
from orbwatch.core.path import PathPoint, orbital_period_seconds, sample_path
from orbwatch.core.tracking import LivePosition, catalog_status, live_positions
from orbwatch.data.celestrak import CelestrakClient
from orbwatch.data.spacetrack import SpaceTrackClient
from orbwatch.data.store import CatalogStore, InMemoryCatalogStore
from orbwatch.data.sync import CatalogSync, Feed, FeedResult, SyncResult
from orbwatch.errors import ConfigurationError, FeedFetchError, OrbwatchError

__all__ = [
    "__version__",
    "Classification",
    "ElementSet",
    "TrackedObject",
    "parse_feed",
    "PositionSample",
    "PropagationFailure",
    "Propagator",
    "SGP4Propagator",
    "effective_mean_motion",
    "ConjunctionScreener",
    "ConjunctionWarning",
    "ScreeningReport",
    "screen",
    "screen_now",
    "summarize",
    "PathPoint",
    "orbital_period_seconds",
    "sample_path",
    "LivePosition",
    "catalog_status",
    "live_positions",
    "CelestrakClient",
    "SpaceTrackClient",
    "CatalogStore",
    "InMemoryCatalogStore",
    "CatalogSync",
    "Feed",
    "FeedResult",
    "SyncResult",
    "ConfigurationError",
    "FeedFetchError",
    "OrbwatchError",
]
