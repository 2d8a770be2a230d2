"""Geographic and pixel value types shared across the package.

Tiles are keyed with ``mercantile.Tile`` so that the cache and the URL
template agree on the same ``(x, y, z)`` triple.
"""
from dataclasses import dataclass
from typing import Any

import mercantile

TileKey = mercantile.Tile


@dataclass(frozen=True)
class LatLng:
    """A geographic position in degrees.

    No range is enforced; projection functions wrap out-of-range values.
    """
    lat: float
    lng: float


@dataclass(frozen=True)
class LatLngBounds:
    """A geographic bounding rectangle.

    ``min`` holds the south-west corner and ``max`` the north-east corner.
    The order is taken as given and never re-sorted.
    """
    min: LatLng
    max: LatLng

    @property
    def center(self) -> LatLng:
        """Arithmetic center of the rectangle."""
        return LatLng(lat=(self.max.lat + self.min.lat) / 2.0,
                      lng=(self.max.lng + self.min.lng) / 2.0)

    @classmethod
    def from_point(cls, point: LatLng) -> "LatLngBounds":
        return cls(min=point, max=point)

    @classmethod
    def from_points(cls, points) -> "LatLngBounds":
        """Bounding box of a non-empty sequence of points."""
        points = [as_latlng(p) for p in points]
        if not points:
            raise ValueError("cannot build bounds from an empty point list")
        lats = [p.lat for p in points]
        lngs = [p.lng for p in points]
        return cls(min=LatLng(min(lats), min(lngs)),
                   max=LatLng(max(lats), max(lngs)))

    def union(self, other: "LatLngBounds") -> "LatLngBounds":
        """Coordinate-wise min of mins and max of maxes."""
        return LatLngBounds(
            min=LatLng(min(self.min.lat, other.min.lat),
                       min(self.min.lng, other.min.lng)),
            max=LatLng(max(self.max.lat, other.max.lat),
                       max(self.max.lng, other.max.lng)),
        )


@dataclass(frozen=True)
class Point:
    """A 2-D coordinate in tile space or pixel space."""
    x: float
    y: float


def as_latlng(value: Any) -> LatLng:
    """Coerce a ``LatLng``, ``(lat, lng)`` pair or ``{"lat", "lng"}`` mapping.

    Parameters
    ----------
    value : LatLng, tuple or dict
        The position to convert.

    Returns
    -------
    LatLng
    """
    if isinstance(value, LatLng):
        return value
    if isinstance(value, dict):
        return LatLng(lat=float(value["lat"]), lng=float(value["lng"]))
    lat, lng = value
    return LatLng(lat=float(lat), lng=float(lng))


def as_bounds(value: Any) -> LatLngBounds:
    """Coerce a ``LatLngBounds``, ``(min, max)`` pair or ``{"min", "max"}`` mapping."""
    if isinstance(value, LatLngBounds):
        return value
    if isinstance(value, dict):
        return LatLngBounds(min=as_latlng(value["min"]), max=as_latlng(value["max"]))
    lower, upper = value
    return LatLngBounds(min=as_latlng(lower), max=as_latlng(upper))


def tile_key(zoom: int, x: int, y: int) -> TileKey:
    """Build the cache key for a tile."""
    return mercantile.Tile(x=x, y=y, z=zoom)
