"""Great-circle distances and scale bar lengths.

Distances use a spherical earth with the mean radius, which is off by up to
about 0.5% against an ellipsoid.
"""
import math
from dataclasses import dataclass

from .models import LatLng

EARTH_RADIUS = 6371008.8  # mean radius in meters
FEET_PER_METER = 3.28084
FEET_PER_MILE = 5280.0
METERS_PER_KILOMETER = 1000.0

NICE_STEPS = (1, 2, 3, 5, 10)

METRIC = "metric"
IMPERIAL = "imperial"


def central_angle(a: LatLng, b: LatLng) -> float:
    """Central angle between two positions in radians (haversine)."""
    lat0 = math.radians(a.lat)
    lat1 = math.radians(b.lat)
    d_lat = lat1 - lat0
    d_lng = math.radians(b.lng - a.lng)

    h = (math.sin(d_lat / 2) ** 2
         + math.cos(lat0) * math.cos(lat1) * math.sin(d_lng / 2) ** 2)
    h = min(max(h, 0.0), 1.0)
    return 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def distance(a: LatLng, b: LatLng) -> float:
    """Great-circle distance between two positions in meters."""
    return central_angle(a, b) * EARTH_RADIUS


def nice_scale(value: float) -> float:
    """Snap ``value`` down to one of 1, 2, 3, 5 or 10 times a power of ten.

    >>> nice_scale(930)
    500
    >>> nice_scale(42)
    30
    """
    if value <= 0:
        return 0
    power = 10 ** math.floor(math.log10(value))
    leading = value / power
    step = max(s for s in NICE_STEPS if s <= leading + 1e-9)
    return step * power


@dataclass(frozen=True)
class ScaleLength:
    """A rounded scale bar length.

    Attributes
    ----------
    value : float
        Length in ``unit``.
    unit : str
        Unit label, one of ``m``, ``km``, ``ft`` or ``mi``.
    meters : float
        The same length in meters, used to size the bar.
    """
    value: float
    unit: str
    meters: float

    @property
    def label(self) -> str:
        return f"{self.value:g} {self.unit}"


def scale_length(max_meters: float, units: str = METRIC) -> ScaleLength:
    """Pick the longest nice length not exceeding ``max_meters``.

    Parameters
    ----------
    max_meters : float
        Upper bound for the bar length in meters.
    units : str, optional
        ``"metric"`` or ``"imperial"``, by default metric.

    Returns
    -------
    ScaleLength
    """
    if units == IMPERIAL:
        feet = max_meters * FEET_PER_METER
        if feet > FEET_PER_MILE:
            miles = nice_scale(feet / FEET_PER_MILE)
            return ScaleLength(miles, "mi", miles * FEET_PER_MILE / FEET_PER_METER)
        feet = nice_scale(feet)
        return ScaleLength(feet, "ft", feet / FEET_PER_METER)
    if units != METRIC:
        raise ValueError(f"unknown unit system {units!r}")
    meters = nice_scale(max_meters)
    if meters >= METERS_PER_KILOMETER:
        return ScaleLength(meters / METERS_PER_KILOMETER, "km", meters)
    return ScaleLength(meters, "m", meters)
