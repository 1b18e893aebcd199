"""Conjunction screening: close approaches between a protected asset and the catalog.

The search is asymmetric. At each step of a fixed time grid the asset is
propagated once and every other catalog object once, so the cost is
O(steps × catalog size). A closest approach that falls strictly between two
grid points can be missed; shrink ``step_minutes`` to trade speed for
coverage.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Sequence

import numpy as np

from orbwatch.core.elements import Classification, TrackedObject
from orbwatch.core.propagation import PositionSample, Propagator, as_utc
from orbwatch.data.store import CatalogStore
from orbwatch.errors import ConfigurationError
from orbwatch.utils.constants import (
    DEFAULT_STEP_MINUTES,
    DEFAULT_THRESHOLD_KM,
    DEFAULT_WINDOW_HOURS,
    MIN_SEPARATION_KM,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConjunctionWarning:
    """A sampled close approach between the protected asset and one object.

    Attributes:
        object_id: Catalog id of the approaching object.
        object_name: Name of the approaching object.
        classification: Classification of the approaching object.
        distance_km: Separation at the sampled instant, 2 decimals.
        time_of_approach: Sampled instant (UTC).
        hours_from_now: Offset of the instant from the run's reference time, 1 decimal.
        step: Index of the grid step that produced this warning.
    """

    object_id: int | None
    object_name: str
    classification: Classification
    distance_km: float
    time_of_approach: datetime
    hours_from_now: float
    step: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "objectName": self.object_name,
            "classification": self.classification.value,
            "distanceKm": self.distance_km,
            "timeOfApproach": self.time_of_approach.isoformat(),
            "hoursFromNow": self.hours_from_now,
        }


@dataclass(frozen=True)
class ScreeningReport:
    """Warnings of one run plus the count/alert summary."""

    asset_name: str | None
    warnings: list[ConjunctionWarning] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.warnings)

    @property
    def alert(self) -> bool:
        return bool(self.warnings)


def round_half_away(value: float, ndigits: int) -> float:
    """Round to ``ndigits`` decimals, halves away from zero."""
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def select_asset(catalog: Sequence[TrackedObject], selector: str) -> TrackedObject | None:
    """First object whose name contains ``selector``, case-insensitive."""
    needle = selector.casefold()
    for obj in catalog:
        if needle in obj.name.casefold():
            return obj
    return None


def _is_same(a: TrackedObject, b: TrackedObject) -> bool:
    if a.id is not None and b.id is not None:
        return a.id == b.id
    return a is b


def _warnings_at_offset(
    asset: TrackedObject,
    others: Sequence[TrackedObject],
    propagator: Propagator,
    reference_time: datetime,
    offset_seconds: float,
    threshold_km: float,
    step: int,
) -> list[ConjunctionWarning]:
    """Compare the asset against ``others`` at one instant.

    A failed asset propagation skips the whole instant; a failed object
    propagation skips only that object.
    """
    asset_state = propagator.propagate(asset.elements, offset_seconds, reference_time)
    if not isinstance(asset_state, PositionSample):
        logger.debug("Asset %s failed at offset %.0fs: %s",
                     asset.name, offset_seconds, asset_state.reason)
        return []

    candidates: list[TrackedObject] = []
    positions: list[np.ndarray] = []
    for obj in others:
        state = propagator.propagate(obj.elements, offset_seconds, reference_time)
        if isinstance(state, PositionSample):
            candidates.append(obj)
            positions.append(state.position_km)

    if not candidates:
        return []

    distances = np.linalg.norm(np.vstack(positions) - asset_state.position_km, axis=1)
    # Filter on the reported (rounded) distance so every warning satisfies
    # MIN_SEPARATION_KM < distance_km <= threshold_km.
    rounded = [round_half_away(float(d), 2) for d in distances]
    close = [i for i, d in enumerate(rounded) if MIN_SEPARATION_KM < d <= threshold_km]

    when = as_utc(reference_time) + timedelta(seconds=offset_seconds)
    hours = round_half_away(offset_seconds / 3600.0, 1)
    return [
        ConjunctionWarning(
            object_id=candidates[i].id,
            object_name=candidates[i].name,
            classification=candidates[i].classification,
            distance_km=rounded[i],
            time_of_approach=when,
            hours_from_now=hours,
            step=step,
        )
        for i in close
    ]


def screen(
    catalog: Sequence[TrackedObject],
    asset_selector: str,
    propagator: Propagator,
    window_hours: float = DEFAULT_WINDOW_HOURS,
    step_minutes: float = DEFAULT_STEP_MINUTES,
    threshold_km: float = DEFAULT_THRESHOLD_KM,
    reference_time: datetime | None = None,
    max_workers: int | None = None,
) -> list[ConjunctionWarning]:
    """Screen a protected asset against the catalog over a future window.

    Args:
        catalog: Snapshot of the tracked objects.
        asset_selector: Case-insensitive substring of the asset's name.
        propagator: Position propagator.
        window_hours: Screening window in hours from ``reference_time``.
        step_minutes: Time step of the grid in minutes.
        threshold_km: Warn at separations up to this distance in km.
        reference_time: Start of the window. Defaults to now (UTC).
        max_workers: If greater than 1, evaluate grid steps on a thread pool.

    Returns:
        One ConjunctionWarning per qualifying (object, step) pair, in step
        order. Empty if the catalog is empty or no asset matches.

    Raises:
        ValueError: If the grid parameters are invalid.
    """
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be positive, got {step_minutes}")
    if window_hours < 0 or threshold_km < 0:
        raise ValueError("window_hours and threshold_km must not be negative")

    if reference_time is None:
        reference_time = datetime.now(timezone.utc)

    asset = select_asset(catalog, asset_selector)
    if asset is None:
        logger.info("screen: no object matching %r in catalog of %d", asset_selector, len(catalog))
        return []

    others = [obj for obj in catalog if not _is_same(obj, asset)]
    steps = int(window_hours * 60 / step_minutes)
    step_seconds = step_minutes * 60.0

    logger.info("screen: %s vs %d objects, %.0fh window, %.0fmin step, %.1fkm threshold",
                asset.name, len(others), window_hours, step_minutes, threshold_km)

    def run_step(step: int) -> list[ConjunctionWarning]:
        return _warnings_at_offset(asset, others, propagator, reference_time,
                                   step * step_seconds, threshold_km, step)

    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            per_step = list(pool.map(run_step, range(steps)))
    else:
        per_step = [run_step(step) for step in range(steps)]

    warnings = [w for step_warnings in per_step for w in step_warnings]
    logger.info("screen: found %d warnings for %s", len(warnings), asset.name)
    return warnings


def screen_now(
    catalog: Sequence[TrackedObject],
    asset_selector: str,
    propagator: Propagator,
    threshold_km: float = DEFAULT_THRESHOLD_KM,
    reference_time: datetime | None = None,
) -> list[ConjunctionWarning]:
    """Single-snapshot check at ``reference_time`` (defaults to now)."""
    if reference_time is None:
        reference_time = datetime.now(timezone.utc)

    asset = select_asset(catalog, asset_selector)
    if asset is None:
        logger.info("screen_now: no object matching %r", asset_selector)
        return []

    others = [obj for obj in catalog if not _is_same(obj, asset)]
    return _warnings_at_offset(asset, others, propagator, reference_time, 0.0, threshold_km, 0)


def summarize(warnings: list[ConjunctionWarning], asset_name: str | None = None) -> ScreeningReport:
    """Wrap warnings with their count/alert summary."""
    report = ScreeningReport(asset_name=asset_name, warnings=list(warnings))
    if report.alert:
        logger.warning("COLLISION WARNING: %s has %d close approaches",
                       asset_name or "asset", report.count)
    return report


class ConjunctionScreener:
    """Screens against the current contents of a catalog store.

    Each call takes a fresh snapshot of the store, so a concurrent sync may
    or may not be visible to a run that starts during it.

    Raises:
        ConfigurationError: If no propagator is given.
    """

    def __init__(self, store: CatalogStore, propagator: Propagator | None) -> None:
        if propagator is None:
            raise ConfigurationError("ConjunctionScreener requires a propagator")
        self._store = store
        self._propagator = propagator

    def screen(self, asset_selector: str, **kwargs: Any) -> list[ConjunctionWarning]:
        return screen(self._store.all(), asset_selector, self._propagator, **kwargs)

    def screen_now(self, asset_selector: str, **kwargs: Any) -> list[ConjunctionWarning]:
        return screen_now(self._store.all(), asset_selector, self._propagator, **kwargs)

    def report(self, asset_selector: str, **kwargs: Any) -> ScreeningReport:
        """Run :meth:`screen` and summarize the result."""
        catalog = self._store.all()
        asset = select_asset(catalog, asset_selector)
        warnings = screen(catalog, asset_selector, self._propagator, **kwargs)
        return summarize(warnings, asset.name if asset else None)
