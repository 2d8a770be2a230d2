"""Web Mercator projection between degrees, tile space and pixels.

Tile space spans ``[0, 2**zoom)`` on each axis, following the slippy map
tile naming scheme (https://wiki.openstreetmap.org/wiki/Slippy_map_tilenames).
Pixel coordinates are relative to the top-left corner of the viewport.
"""
import math
from dataclasses import dataclass
from typing import Tuple

from .models import LatLng, Point


def wrap(value: float, lower: float, upper: float) -> float:
    """Reduce ``value`` into ``[lower, upper]`` with a modulo.

    Values already inside the range, including both ends, are returned as is.
    """
    if lower <= value <= upper:
        return value
    span = upper - lower
    return (value - lower) % span + lower


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return int(math.floor(value + 0.5))


def lng_to_tile_x(lng: float, zoom: int) -> float:
    """Transform longitude to a fractional tile x coordinate."""
    lng = wrap(lng, -180.0, 180.0)
    return ((lng + 180.0) / 360.0) * 2.0**zoom


def lat_to_tile_y(lat: float, zoom: int) -> float:
    """Transform latitude to a fractional tile y coordinate.

    ``asinh(tan(phi))`` equals ``ln(tan(phi) + sec(phi))`` and stays finite
    at the poles.
    """
    phi = math.radians(wrap(lat, -90.0, 90.0))
    return (1.0 - math.asinh(math.tan(phi)) / math.pi) / 2.0 * 2.0**zoom


def tile_x_to_lng(x: float, zoom: int) -> float:
    """Transform a fractional tile x coordinate to longitude."""
    return x / 2.0**zoom * 360.0 - 180.0


def tile_y_to_lat(y: float, zoom: int) -> float:
    """Transform a fractional tile y coordinate to latitude."""
    n = math.pi * (1.0 - 2.0 * y / 2.0**zoom)
    return math.degrees(math.atan(math.sinh(n)))


def latlng_to_tile(point: LatLng, zoom: int) -> Point:
    return Point(lng_to_tile_x(point.lng, zoom), lat_to_tile_y(point.lat, zoom))


def tile_to_latlng(point: Point, zoom: int) -> LatLng:
    return LatLng(lat=tile_y_to_lat(point.y, zoom), lng=tile_x_to_lng(point.x, zoom))


def tile_to_pixel(tile_coord: float, center_coord: float, scale: float,
                  tile_size: int, viewport_size: int,
                  padding_near: float = 0, padding_far: float = 0) -> int:
    """Map one tile-space axis value to an integer pixel coordinate.

    Parameters
    ----------
    tile_coord : float
        Tile coordinate to map.
    center_coord : float
        Tile coordinate shown at the center of the padded viewport.
    scale : float
        Uniform scale factor applied to the tile size.
    tile_size : int
        Tile edge length in pixels.
    viewport_size : int
        Viewport width or height in pixels.
    padding_near, padding_far : float, optional
        Left/top and right/bottom padding. Unequal values shift the center.

    Returns
    -------
    int
        Pixel coordinate, rounded half up.
    """
    offset = (viewport_size + padding_near - padding_far) / 2.0
    return round_half_up((tile_coord - center_coord) * tile_size * scale + offset)


def pixel_to_tile(pixel: float, center_coord: float, scale: float,
                  tile_size: int, viewport_size: int,
                  padding_near: float = 0, padding_far: float = 0) -> float:
    """Inverse of :func:`tile_to_pixel` without rounding."""
    offset = (viewport_size + padding_near - padding_far) / 2.0
    return center_coord + (pixel - offset) / (tile_size * scale)


@dataclass(frozen=True)
class Viewport:
    """Projection state of one render: zoom, center, scale and geometry.

    Attributes
    ----------
    zoom : int
        Selected zoom level.
    center_x, center_y : float
        Tile coordinates of the extent center at ``zoom``.
    scale : float
        Uniform fit scale (1 when scaling is disabled).
    tile_size : int
        Tile edge length in pixels.
    width, height : int
        Viewport size in pixels.
    padding : tuple of float
        ``(left, right, top, bottom)`` padding in pixels.
    """
    zoom: int
    center_x: float
    center_y: float
    scale: float
    tile_size: int
    width: int
    height: int
    padding: Tuple[float, float, float, float] = (0, 0, 0, 0)

    def with_scale(self, scale: float) -> "Viewport":
        return Viewport(self.zoom, self.center_x, self.center_y, scale,
                        self.tile_size, self.width, self.height, self.padding)

    def x_to_px(self, x: float) -> int:
        left, right, _, _ = self.padding
        return tile_to_pixel(x, self.center_x, self.scale, self.tile_size,
                             self.width, left, right)

    def y_to_py(self, y: float) -> int:
        _, _, top, bottom = self.padding
        return tile_to_pixel(y, self.center_y, self.scale, self.tile_size,
                             self.height, top, bottom)

    def lng_to_px(self, lng: float) -> int:
        return self.x_to_px(lng_to_tile_x(lng, self.zoom))

    def lat_to_py(self, lat: float) -> int:
        return self.y_to_py(lat_to_tile_y(lat, self.zoom))

    def latlng_to_pixel(self, point: LatLng) -> Tuple[int, int]:
        return self.lng_to_px(point.lng), self.lat_to_py(point.lat)

    def px_to_x(self, px: float) -> float:
        left, right, _, _ = self.padding
        return pixel_to_tile(px, self.center_x, self.scale, self.tile_size,
                             self.width, left, right)

    def py_to_y(self, py: float) -> float:
        _, _, top, bottom = self.padding
        return pixel_to_tile(py, self.center_y, self.scale, self.tile_size,
                             self.height, top, bottom)
