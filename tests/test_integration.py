"""Integration test: sync → propagate → screen → sample end-to-end with SGP4."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from orbwatch.core.elements import Classification
from orbwatch.core.path import sample_path
from orbwatch.core.propagation import SGP4Propagator
from orbwatch.core.screening import ConjunctionScreener, screen
from orbwatch.core.tracking import live_positions
from orbwatch.data.store import InMemoryCatalogStore
from orbwatch.data.sync import CatalogSync

from conftest import CATALOG_TEXT, ISS_LINE1, ISS_LINE2

REFERENCE = datetime(2024, 2, 14, 13, 0, tzinfo=timezone.utc)

# Same elements as the ISS under another name, plus one unusable entry
EXTRA_TEXT = f"ISS TWIN\n{ISS_LINE1}\n{ISS_LINE2}\nBROKEN DEB\n1 nonsense\n2 nonsense\n"


class _StaticFetcher:
    def fetch(self, source: str) -> str:
        return {"stations": CATALOG_TEXT, "debris": EXTRA_TEXT}[source]


@pytest.fixture
def store() -> InMemoryCatalogStore:
    store = InMemoryCatalogStore()
    CatalogSync(store, _StaticFetcher()).ingest([("stations", "STATION"), ("debris", "DEBRIS")])
    return store


def test_sync_builds_catalog(store: InMemoryCatalogStore):
    names = [o.name for o in store.all()]
    assert names == ["ISS (ZARYA)", "CSS (TIANHE)", "HST", "NOAA 18", "ISS TWIN", "BROKEN DEB"]
    assert store.all()[-1].classification is Classification.DEBRIS


def test_screen_iss_against_catalog(store: InMemoryCatalogStore):
    warnings = screen(store.all(), "ISS", SGP4Propagator(), window_hours=6, step_minutes=30,
                      threshold_km=8000.0, reference_time=REFERENCE)

    assert warnings
    names = {w.object_name for w in warnings}
    assert "ISS (ZARYA)" not in names
    # zero separation from the asset is never a warning
    assert "ISS TWIN" not in names
    assert "BROKEN DEB" not in names
    for w in warnings:
        assert 0.1 < w.distance_km <= 8000.0
        assert 0 <= w.step < 12
        assert w.time_of_approach == REFERENCE + timedelta(minutes=30 * w.step)


def test_screener_snapshot(store: InMemoryCatalogStore):
    screener = ConjunctionScreener(store, SGP4Propagator())
    report = screener.report("zarya", window_hours=1, threshold_km=1.0, reference_time=REFERENCE)
    assert report.asset_name == "ISS (ZARYA)"
    assert report.count == len(report.warnings)


def test_sample_iss_path(store: InMemoryCatalogStore):
    iss = store.all()[0]
    path = sample_path(iss, SGP4Propagator(), reference_time=REFERENCE)

    assert len(path) == 100
    for point in path:
        assert 350 < point.altitude < 450
        assert -52 < point.latitude < 52
    # one full orbit crosses both hemispheres
    assert min(p.latitude for p in path) < -40 < 40 < max(p.latitude for p in path)


def test_broken_object_has_empty_path(store: InMemoryCatalogStore):
    broken = store.all()[-1]
    assert sample_path(broken, SGP4Propagator(), reference_time=REFERENCE) == []


def test_live_positions(store: InMemoryCatalogStore):
    positions = live_positions(store.all(), SGP4Propagator(), reference_time=REFERENCE)
    assert len(positions) == 5
    assert "BROKEN DEB" not in {p.name for p in positions}
