"""orbwatch Batch Screening — sync live CelesTrak feeds and screen the ISS.

Requires network access to celestrak.org.
"""

import logging

from orbwatch import CatalogSync, CelestrakClient, ConjunctionScreener, InMemoryCatalogStore, SGP4Propagator

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

store = InMemoryCatalogStore()
result = CatalogSync(store, CelestrakClient()).sync_default()
for feed in result.feeds:
    print(f"{feed.source}: {feed.count} objects" + (f" (failed: {feed.error})" if feed.error else ""))

screener = ConjunctionScreener(store, SGP4Propagator())
report = screener.report("ISS (ZARYA)", max_workers=4)

print(f"{report.count} close approaches within 50 km over the next 24 h (alert={report.alert})")
for w in report.warnings:
    print(f"  {w.object_name:<24} {w.distance_km:7.2f} km  +{w.hours_from_now}h  {w.classification.value}")
