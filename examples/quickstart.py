"""orbwatch Quickstart — parse a feed, screen the ISS, and sample its orbit."""

from datetime import datetime, timezone

from orbwatch import InMemoryCatalogStore, SGP4Propagator, TrackedObject, parse_feed, sample_path, screen

# ISS (ZARYA) and the Chinese Space Station
feed_text = """
ISS (ZARYA)
1 25544U 98067A   24045.54896019  .00016717  00000-0  30093-3 0  9993
2 25544  51.6412 207.4925 0004948 290.5508 178.9792 15.49583488439596
CSS (TIANHE)
1 48274U 21035A   24045.50261574  .00021540  00000-0  25163-3 0  9993
2 48274  41.4681 279.1498 0005372 149.8847 345.3740 15.62096269157018
""".strip()

store = InMemoryCatalogStore(
    TrackedObject(name=r.name, line1=r.line1, line2=r.line2) for r in parse_feed(feed_text)
)
propagator = SGP4Propagator()
now = datetime(2024, 2, 14, 13, 0, tzinfo=timezone.utc)

warnings = screen(store.all(), "ISS", propagator, threshold_km=5000.0, step_minutes=60, reference_time=now)
for w in warnings:
    print(f"{w.time_of_approach:%Y-%m-%d %H:%M} | {w.object_name:<14} | {w.distance_km:8.2f} km | +{w.hours_from_now}h")

path = sample_path(store.all()[0], propagator, reference_time=now)
print(f"ISS path: {len(path)} points, first at {path[0].latitude:.2f}, {path[0].longitude:.2f}")
