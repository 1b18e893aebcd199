from __future__ import annotations

"""Physical constants and default settings for tracking and screening.

Distances in km, times in seconds unless otherwise noted.
"""

# --- Earth parameters (WGS-84) ---
EARTH_RADIUS_KM: float = 6378.137
"""Equatorial radius of Earth in km."""

EARTH_FLATTENING: float = 1.0 / 298.257223563
"""WGS-84 flattening."""

SECONDS_PER_DAY: float = 86400.0

# --- Default screening settings ---
DEFAULT_THRESHOLD_KM: float = 50.0
"""Default miss distance threshold for conjunction screening in km."""

DEFAULT_WINDOW_HOURS: float = 24.0
"""Default forward screening window in hours."""

DEFAULT_STEP_MINUTES: float = 10.0
"""Default time step of the screening grid in minutes."""

MIN_SEPARATION_KM: float = 0.1
"""Separations at or below this are treated as self-comparison artifacts."""

# --- Orbit path sampling ---
FALLBACK_MEAN_MOTION_REV_PER_DAY: float = 15.0
"""Mean motion used when an element set reports a non-positive value."""

PATH_POINTS: int = 100
"""Number of samples across one orbital period."""

SATREC_CACHE_SIZE: int = 4096
"""Parsed element sets kept by each SGP4 propagator, least recently used evicted first."""

# --- Feeds ---
DEFAULT_HTTP_TIMEOUT_S: float = 60.0

CELESTRAK_GP_URL: str = "https://celestrak.org/NORAD/elements/gp.php"

CELESTRAK_STATIONS_URL: str = f"{CELESTRAK_GP_URL}?GROUP=stations&FORMAT=tle"

CELESTRAK_DEBRIS_URL: str = f"{CELESTRAK_GP_URL}?GROUP=debris&FORMAT=tle"

DEFAULT_FEEDS: tuple[tuple[str, str], ...] = (
    (CELESTRAK_STATIONS_URL, "STATION"),
    (CELESTRAK_DEBRIS_URL, "DEBRIS"),
)
"""(source, classification) pairs synced by default, in order."""
