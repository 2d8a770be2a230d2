"""Generate static map images with overlays.

Example
-------
>>> from mapsnap import StaticMap
>>> smap = StaticMap(width=640, height=480, padding=32)
>>> smap.add_line([(52.5, 13.4), (48.9, 2.3), (48.1, 11.6)], stroke="blue", width=3)
>>> smap.add_circle((53.6, 10.0), stroke="red", fill="rgba(255,0,0,0.3)")
>>> png = smap.render_to_buffer()
"""
import logging

from . import overlays as ov
from .data_sources.tilecache import TileCache
from .extent import calculate_extent, resolve_extent
from .options import StaticMapOptions
from .render import draw_overlays
from .surface import Surface
from .tilers.compositor import TileCompositor, compute_viewport, grayscale

logger = logging.getLogger(__name__)


class StaticMap:
    """A static map: options, a tile source and an ordered list of overlays.

    Parameters
    ----------
    options : StaticMapOptions, optional
        Render options. When None they are built from the settings.
    fetcher : callable, optional
        ``fetcher(url, user_agent=None) -> bytes`` used for tiles.
    **option_overrides
        Option fields applied on top of the settings when ``options`` is
        None.
    """

    def __init__(self, options=None, fetcher=None, **option_overrides):
        if options is None:
            options = StaticMapOptions.from_settings(**option_overrides)
        elif option_overrides:
            raise TypeError("pass either an options object or option fields, not both")
        self.options = options
        self.fetcher = fetcher
        self.cache = TileCache(options.tile_cache) if options.tile_cache else None
        self._overlays = []

    @property
    def overlays(self):
        """Overlays in drawing order."""
        return tuple(self._overlays)

    @property
    def extent(self):
        """Explicit extent from the options, else the union of overlay extents.

        None when neither exists.
        """
        if self.options.extent is not None:
            return self.options.extent
        return calculate_extent(self._overlays)

    # Builders ----------------------------------------------------------------

    def add_overlay(self, overlay):
        """Append an overlay on top of all earlier ones."""
        self._overlays.append(overlay)
        return self

    def add_image(self, src, bounds):
        return self.add_overlay(ov.image(src, bounds))

    def add_line(self, points, style=None, **style_fields):
        return self.add_overlay(ov.line(points, style, **style_fields))

    def add_polygon(self, points, style=None, **style_fields):
        return self.add_overlay(ov.polygon(points, style, **style_fields))

    def add_circle(self, center, style=None, **style_fields):
        return self.add_overlay(ov.circle(center, style, **style_fields))

    def add_rect(self, bounds, style=None, **style_fields):
        return self.add_overlay(ov.rect(bounds, style, **style_fields))

    def add_text(self, anchor, text, style=None, **style_fields):
        return self.add_overlay(ov.text(anchor, text, style, **style_fields))

    def add_scale(self, style=None, **style_fields):
        return self.add_overlay(ov.scale(style, **style_fields))

    # Rendering ---------------------------------------------------------------

    def render_to_surface(self):
        """Render tiles and overlays onto a new surface.

        The surface may be drawn on further before it is exported.

        Raises
        ------
        ExtentResolutionError
            If no extent can be determined; raised before any tile request.
        """
        extent = resolve_extent(self.options, self._overlays)
        viewport = compute_viewport(extent, self.options)
        surface = Surface(self.options.width, self.options.height,
                          background=self.options.background_color)
        TileCompositor(self.options, fetcher=self.fetcher, cache=self.cache).draw(surface, viewport)
        if self.options.grayscale:
            grayscale(surface)
        draw_overlays(surface, viewport, self._overlays, extent,
                      user_agent=self.options.user_agent)
        logger.debug(f"rendered {self.options.width}x{self.options.height} map "
                     f"with {len(self._overlays)} overlays")
        return surface

    def render_to_buffer(self, format="PNG"):
        """Render and encode the map, PNG by default."""
        return self.render_to_surface().to_buffer(format)

    def render_to_data_url(self, mimetype="image/png"):
        """Render the map to a base64 data URI."""
        return self.render_to_surface().to_data_url(mimetype)
