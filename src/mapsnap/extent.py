"""Extent resolution and zoom level selection."""
import logging
from typing import Iterable, Optional

from . import overlays as ov
from .errors import ExtentResolutionError, UnknownOverlayError
from .models import LatLngBounds
from .options import StaticMapOptions
from .projection import lat_to_tile_y, lng_to_tile_x

logger = logging.getLogger(__name__)


def overlay_extent(overlay) -> Optional[LatLngBounds]:
    """Geographic extent of a single overlay.

    Parameters
    ----------
    overlay : Overlay
        Any overlay variant.

    Returns
    -------
    LatLngBounds or None
        None for scale bars and for lines or polygons without vertices.

    Raises
    ------
    UnknownOverlayError
        If ``overlay`` is not one of the known kinds.
    """
    kind = getattr(overlay, "kind", None)
    if kind in (ov.IMAGE, ov.RECT):
        return overlay.bounds
    elif kind == ov.CIRCLE:
        return LatLngBounds.from_point(overlay.center)
    elif kind == ov.TEXT:
        return LatLngBounds.from_point(overlay.anchor)
    elif kind in (ov.LINE, ov.POLYGON):
        if not overlay.points:
            return None
        return LatLngBounds.from_points(overlay.points)
    elif kind == ov.SCALE:
        return None
    raise UnknownOverlayError(overlay)


def union_extent(extents: Iterable[Optional[LatLngBounds]]) -> Optional[LatLngBounds]:
    """Union of all given bounds, skipping None. None when nothing is left."""
    result = None
    for bounds in extents:
        if bounds is None:
            continue
        result = bounds if result is None else result.union(bounds)
    return result


def calculate_extent(overlays) -> Optional[LatLngBounds]:
    """Maximal enclosing bounds of all overlays, or None if none has an extent."""
    return union_extent(overlay_extent(o) for o in overlays)


def resolve_extent(options: StaticMapOptions, overlays) -> LatLngBounds:
    """Explicit extent from ``options`` or else the union of overlay extents.

    Raises
    ------
    ExtentResolutionError
        If neither source yields an extent.
    """
    if options.extent is not None:
        return options.extent
    extent = calculate_extent(overlays)
    if extent is None:
        raise ExtentResolutionError()
    return extent


def projected_size(extent: LatLngBounds, zoom: int, tile_size: int):
    """Pixel width and height of ``extent`` at ``zoom`` without scaling."""
    w = (lng_to_tile_x(extent.max.lng, zoom) - lng_to_tile_x(extent.min.lng, zoom)) * tile_size
    h = (lat_to_tile_y(extent.min.lat, zoom) - lat_to_tile_y(extent.max.lat, zoom)) * tile_size
    return w, h


def calculate_zoom(extent: LatLngBounds, options: StaticMapOptions) -> int:
    """Highest zoom level at which ``extent`` fits the padded viewport.

    Scans from ``options.tile_max_zoom`` down to 0 and falls back to 0 when
    no level fits.
    """
    for zoom in range(options.tile_max_zoom, -1, -1):
        w, h = projected_size(extent, zoom, options.tile_size)
        if w > options.inner_width:
            continue
        if h > options.inner_height:
            continue
        logger.debug(f"zoom={zoom} -> (w, h)=({w:.1f}, {h:.1f})")
        return zoom
    return 0
