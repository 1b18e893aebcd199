"""Orbital propagation contract and its SGP4 implementation.

Screening and path sampling only depend on the :class:`Propagator`
protocol. A failed propagation is returned as a :class:`PropagationFailure`
value instead of being raised, so callers can skip a single sample without
wrapping every call in a handler.
"""
from __future__ import annotations

import logging
import math
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Protocol, Union

import numpy as np
from numpy.typing import NDArray
from sgp4.api import Satrec, WGS72, jday

from orbwatch.core.elements import ElementSet
from orbwatch.utils.constants import (
    EARTH_FLATTENING,
    EARTH_RADIUS_KM,
    FALLBACK_MEAN_MOTION_REV_PER_DAY,
    SATREC_CACHE_SIZE,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class PositionSample:
    """Position of an object at one instant.

    Attributes:
        position_km: [x, y, z] inertial (TEME) position in km.
        latitude_deg: Geodetic latitude in degrees.
        longitude_deg: Geodetic longitude in degrees, in [-180, 180].
        altitude_km: Height above the WGS-84 ellipsoid in km.
        epoch: Time of this sample (UTC).
    """

    position_km: NDArray[np.float64] = field(repr=False)  # shape (3,)
    latitude_deg: float
    longitude_deg: float
    altitude_km: float
    epoch: datetime


@dataclass(frozen=True)
class PropagationFailure:
    """Propagation of one element set at one instant did not succeed."""

    reason: str


PropagationResult = Union[PositionSample, PropagationFailure]


class Propagator(Protocol):
    """Converts an element set plus a time offset into a position sample.

    Implementations must be deterministic for a given ``reference_time`` and
    must report failures as :class:`PropagationFailure` values.
    """

    def propagate(
        self, elements: ElementSet, offset_seconds: float, reference_time: datetime
    ) -> PropagationResult: ...

    def mean_motion(self, elements: ElementSet) -> float: ...


def effective_mean_motion(propagator: Propagator, elements: ElementSet) -> float:
    """Mean motion in rev/day, with the fallback for non-positive values."""
    n = propagator.mean_motion(elements)
    if not math.isfinite(n) or n <= 0:
        logger.debug("Mean motion %r not usable, falling back to %.1f rev/day",
                     n, FALLBACK_MEAN_MOTION_REV_PER_DAY)
        return FALLBACK_MEAN_MOTION_REV_PER_DAY
    return n


def as_utc(t: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if t.tzinfo is None:
        return t.replace(tzinfo=timezone.utc)
    return t.astimezone(timezone.utc)


def _gmst(jd: float, fr: float) -> float:
    """Greenwich Mean Sidereal Time in radians (IAU 1982 model)."""
    tut1 = (jd - 2451545.0 + fr) / 36525.0
    seconds = (-6.2e-6 * tut1 ** 3
               + 0.093104 * tut1 ** 2
               + (876600.0 * 3600.0 + 8640184.812866) * tut1
               + 67310.54841)
    angle = math.fmod(seconds * (2.0 * math.pi / 86400.0), 2.0 * math.pi)
    return angle + 2.0 * math.pi if angle < 0.0 else angle


def _teme_to_geodetic(r_teme: NDArray[np.float64], jd: float, fr: float) -> tuple[float, float, float]:
    """Convert a TEME position to (lat_deg, lon_deg, alt_km) on WGS-84.

    Rotates into the Earth-fixed frame by GMST, then applies Bowring's
    closed-form geodetic solution.
    """
    theta_g = _gmst(jd, fr)
    cos_t, sin_t = math.cos(theta_g), math.sin(theta_g)
    x = r_teme[0] * cos_t + r_teme[1] * sin_t
    y = -r_teme[0] * sin_t + r_teme[1] * cos_t
    z = r_teme[2]

    a = EARTH_RADIUS_KM
    b = a * (1.0 - EARTH_FLATTENING)
    e2 = EARTH_FLATTENING * (2.0 - EARTH_FLATTENING)
    ep2 = (a ** 2 - b ** 2) / b ** 2

    p = math.hypot(x, y)
    theta = math.atan2(z * a, p * b)
    lon = math.atan2(y, x)
    lat = math.atan2(z + ep2 * b * math.sin(theta) ** 3,
                     p - e2 * a * math.cos(theta) ** 3)
    n = a / math.sqrt(1.0 - e2 * math.sin(lat) ** 2)
    if abs(math.cos(lat)) > 1e-10:
        alt = p / math.cos(lat) - n
    else:
        alt = abs(z) - b

    return math.degrees(lat), math.degrees(lon), alt


class SGP4Propagator:
    """SGP4 propagator backed by the ``sgp4`` package (WGS-72 constants).

    Parsed element sets are cached by their raw lines; the cache never
    changes a result. The cache holds at most ``cache_size`` entries and
    evicts the least recently used one, so a long-running process that keeps
    seeing fresh element sets does not grow without bound.

    Args:
        cache_size: Maximum number of parsed element sets to keep.
    """

    def __init__(self, cache_size: int = SATREC_CACHE_SIZE) -> None:
        if cache_size < 1:
            raise ValueError(f"cache_size must be positive, got {cache_size}")
        self._cache_size = cache_size
        self._satrecs: OrderedDict[ElementSet, Satrec] = OrderedDict()
        self._lock = threading.Lock()

    def _satrec(self, elements: ElementSet) -> Satrec:
        """Parse (or fetch from cache) the Satrec for an element set.

        Raises:
            ValueError: If the TLE lines are malformed.
        """
        with self._lock:
            sat = self._satrecs.get(elements)
            if sat is not None:
                self._satrecs.move_to_end(elements)
                return sat

        line1 = elements.line1.strip()
        line2 = elements.line2.strip()
        if len(line1) != 69 or not line1.startswith("1"):
            raise ValueError(f"Invalid TLE line 1: {line1!r}")
        if len(line2) != 69 or not line2.startswith("2"):
            raise ValueError(f"Invalid TLE line 2: {line2!r}")

        try:
            sat = Satrec.twoline2rv(line1, line2, WGS72)
        except (ValueError, IndexError) as e:
            raise ValueError(f"Unparseable TLE: {e}") from e

        with self._lock:
            self._satrecs[elements] = sat
            while len(self._satrecs) > self._cache_size:
                self._satrecs.popitem(last=False)
        return sat

    def propagate(
        self, elements: ElementSet, offset_seconds: float, reference_time: datetime
    ) -> PropagationResult:
        """Propagate to ``reference_time + offset_seconds``.

        Args:
            elements: Raw TLE lines.
            offset_seconds: Offset from the reference time in seconds.
            reference_time: The caller's "now" baseline.

        Returns:
            A PositionSample, or a PropagationFailure if the lines are
            malformed or SGP4 reports an error.
        """
        try:
            sat = self._satrec(elements)
        except ValueError as e:
            logger.debug("Skipping propagation: %s", e)
            return PropagationFailure(str(e))

        t = as_utc(reference_time) + timedelta(seconds=offset_seconds)
        jd, fr = jday(t.year, t.month, t.day, t.hour, t.minute, t.second + t.microsecond / 1e6)

        error_code, pos, _vel = sat.sgp4(jd, fr)
        if error_code != 0:
            logger.debug("SGP4 propagation failed for NORAD %s at %s: error code %d",
                         sat.satnum, t, error_code)
            return PropagationFailure(f"SGP4 error code {error_code} at {t.isoformat()}")

        position = np.array(pos, dtype=np.float64)
        if not np.all(np.isfinite(position)):
            return PropagationFailure(f"Non-finite position at {t.isoformat()}")

        lat, lon, alt = _teme_to_geodetic(position, jd, fr)
        return PositionSample(
            position_km=position,
            latitude_deg=lat,
            longitude_deg=lon,
            altitude_km=alt,
            epoch=t,
        )

    def mean_motion(self, elements: ElementSet) -> float:
        """Mean motion in revolutions per day, 0.0 for malformed lines."""
        try:
            sat = self._satrec(elements)
        except ValueError as e:
            logger.debug("No mean motion available: %s", e)
            return 0.0
        return sat.no_kozai * 1440 / (2 * math.pi)
