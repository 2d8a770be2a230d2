"""Tile grid compositor.

Chooses the zoom level and fit scale for an extent, enumerates the tiles
visible in the viewport and draws them onto a :class:`~mapsnap.surface.Surface`.
Tiles are loaded one after another, each through the tile cache when one is
configured, and drawn before the next one is requested.
"""
import io
import logging
import math

import numpy as np
from PIL import Image

from ..data_sources.fetch import fetch_bytes
from ..extent import calculate_zoom
from ..models import LatLngBounds, tile_key
from ..options import StaticMapOptions
from ..projection import Viewport, lat_to_tile_y, lng_to_tile_x

logger = logging.getLogger(__name__)


def tile_url(template, key):
    """Substitute zoom and tile indices into a URL template."""
    return (template
            .replace("{z}", str(key.z))
            .replace("{x}", str(key.x))
            .replace("{y}", str(key.y)))


def fit_scale(extent: LatLngBounds, viewport: Viewport, options: StaticMapOptions) -> float:
    """Uniform scale that makes ``extent`` fill the padded viewport.

    The tighter of the two axis factors wins so nothing overflows. An axis
    along which the extent has no pixel size does not constrain the scale;
    if neither axis does, the scale is 1.
    """
    span_x = abs(viewport.lng_to_px(extent.max.lng) - viewport.lng_to_px(extent.min.lng))
    span_y = abs(viewport.lat_to_py(extent.min.lat) - viewport.lat_to_py(extent.max.lat))
    factors = []
    if span_x > 0 and options.inner_width > 0:
        factors.append(options.inner_width / span_x)
    if span_y > 0 and options.inner_height > 0:
        factors.append(options.inner_height / span_y)
    if not factors:
        return 1.0
    return min(factors)


def compute_viewport(extent: LatLngBounds, options: StaticMapOptions) -> Viewport:
    """Zoom, center and scale for rendering ``extent`` with ``options``.

    Parameters
    ----------
    extent : LatLngBounds
        The resolved map extent.
    options : StaticMapOptions
        Size, padding, tile and scaling options.

    Returns
    -------
    Viewport
    """
    zoom = calculate_zoom(extent, options)
    center = extent.center
    viewport = Viewport(
        zoom=zoom,
        center_x=lng_to_tile_x(center.lng, zoom),
        center_y=lat_to_tile_y(center.lat, zoom),
        scale=1.0,
        tile_size=options.tile_size,
        width=options.width,
        height=options.height,
        padding=options.paddings,
    )
    if options.scaling:
        viewport = viewport.with_scale(fit_scale(extent, viewport, options))
    logger.debug(f"zoom={viewport.zoom} scale={viewport.scale:.4f}")
    return viewport


def tile_range(viewport: Viewport):
    """Unwrapped tile index ranges ``(xs, ys)`` covering the viewport.

    For scale 1 and symmetric padding this is
    ``[floor(c - 0.5 * size / tile_size), ceil(c + 0.5 * size / tile_size))``
    on each axis.
    """
    min_x = math.floor(viewport.px_to_x(0))
    max_x = math.ceil(viewport.px_to_x(viewport.width))
    min_y = math.floor(viewport.py_to_y(0))
    max_y = math.ceil(viewport.py_to_y(viewport.height))
    return range(min_x, max_x), range(min_y, max_y)


def grayscale(surface):
    """Replace R, G and B of every pixel with their unweighted mean.

    Alpha is left as is. The mean is rounded half to even, as an 8-bit
    clamped store does.
    """
    data = surface.get_image_data()
    lightness = np.round(data[..., :3].astype(np.float64).sum(axis=2) / 3.0)
    data[..., :3] = lightness.astype(np.uint8)[..., np.newaxis]
    surface.put_image_data(data)


class TileCompositor:
    """Draw the tile layer of a map.

    Parameters
    ----------
    options : StaticMapOptions
        Tile template, size and user agent.
    fetcher : callable, optional
        ``fetcher(url, user_agent=None) -> bytes``, by default
        :func:`mapsnap.data_sources.fetch.fetch_bytes`.
    cache : TileCache, optional
        Cache consulted before the fetcher.
    """

    def __init__(self, options: StaticMapOptions, fetcher=None, cache=None):
        self.options = options
        self.fetcher = fetcher if fetcher is not None else fetch_bytes
        self.cache = cache

    def load_tile(self, key):
        """Load and decode one tile. Failures are logged and re-raised."""
        url = tile_url(self.options.tile_url, key)

        def generate(_key):
            return self.fetcher(url, user_agent=self.options.user_agent)

        try:
            if self.cache is not None:
                data = self.cache.pass_through(key, generate)
            else:
                data = generate(key)
            img = Image.open(io.BytesIO(data))
            img.load()
        except Exception as err:
            logger.error(f"Failed to load tile {key.z}/{key.x}/{key.y} from '{url}': {err}")
            raise
        return img

    def draw(self, surface, viewport: Viewport):
        """Draw every tile intersecting the viewport onto ``surface``.

        Indices are wrapped modulo ``2**zoom`` for the request while the
        unwrapped index positions the tile, so views across the
        antimeridian stay continuous.
        """
        max_tile = 2 ** viewport.zoom
        xs, ys = tile_range(viewport)
        logger.debug(f"tiles x={xs.start}..{xs.stop - 1} y={ys.start}..{ys.stop - 1}")
        for x in xs:
            for y in ys:
                key = tile_key(viewport.zoom, x % max_tile, y % max_tile)
                img = self.load_tile(key)
                px = viewport.x_to_px(x)
                py = viewport.y_to_py(y)
                dx = viewport.x_to_px(x + 1) - px
                dy = viewport.y_to_py(y + 1) - py
                surface.draw_image(img, px, py, dx, dy)
