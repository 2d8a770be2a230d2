"""Render options for a static map.

Padding is resolved through a chain where the more specific field wins:
``padding`` is the fallback for ``padding_x``/``padding_y``, which in turn
are the fallbacks for ``padding_left``/``padding_right`` and
``padding_top``/``padding_bottom``.
"""
from dataclasses import dataclass, fields
from typing import Optional

from . import config
from .models import LatLngBounds, as_bounds

DEFAULT_TILE_URL = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"


@dataclass
class StaticMapOptions:
    """Options controlling size, tiles and post-processing of a map.

    Attributes
    ----------
    width, height : int
        Size of the map image in pixels, by default 512 x 512.
    padding : float
        Padding on all sides in pixels (beyond the extent), by default 0.
    padding_x, padding_y : float, optional
        Horizontal and vertical padding, overriding ``padding``.
    padding_left, padding_right, padding_top, padding_bottom : float, optional
        Per-side padding, overriding ``padding_x``/``padding_y``.
    extent : LatLngBounds, optional
        Explicit extent. When None, the union of overlay extents is used.
    scaling : bool
        Scale tiles so the extent fills the padded viewport, by default True.
    tile_url : str
        Tile URL template with ``{z}``, ``{x}`` and ``{y}`` placeholders.
    tile_size : int
        Tile size in pixels, by default 256.
    tile_max_zoom : int
        Highest zoom level to consider, by default 20.
    tile_cache : str, optional
        Tile cache directory, or None for no cache.
    user_agent : str, optional
        User-Agent header for tile requests.
    background_color : str, optional
        Background fill (only visible behind transparent tiles).
    grayscale : bool
        Grayscale the tiles (not the overlays), by default False.
    """
    width: int = 512
    height: int = 512
    padding: float = 0
    padding_x: Optional[float] = None
    padding_y: Optional[float] = None
    padding_left: Optional[float] = None
    padding_right: Optional[float] = None
    padding_top: Optional[float] = None
    padding_bottom: Optional[float] = None
    extent: Optional[LatLngBounds] = None
    scaling: bool = True
    tile_url: str = DEFAULT_TILE_URL
    tile_size: int = 256
    tile_max_zoom: int = 20
    tile_cache: Optional[str] = None
    user_agent: Optional[str] = None
    background_color: Optional[str] = None
    grayscale: bool = False

    def __post_init__(self):
        if self.extent is not None:
            self.extent = as_bounds(self.extent)
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"map size must be positive, got {self.width}x{self.height}")
        if self.tile_size <= 0:
            raise ValueError(f"tile size must be positive, got {self.tile_size}")

    @classmethod
    def from_settings(cls, settings=None, **overrides) -> "StaticMapOptions":
        """Build options from Dynaconf settings with keyword overrides on top.

        Parameters
        ----------
        settings : Dynaconf or mapping, optional
            Settings to read, by default ``mapsnap.config.settings``.
        **overrides
            Option values that take precedence over settings.

        Returns
        -------
        StaticMapOptions
        """
        if settings is None:
            settings = config.settings
        values = {}
        for field in fields(cls):
            value = settings.get(field.name, None)
            if value is not None:
                values[field.name] = value
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def padding_left_px(self) -> float:
        return _first(self.padding_left, self.padding_x, self.padding)

    @property
    def padding_right_px(self) -> float:
        return _first(self.padding_right, self.padding_x, self.padding)

    @property
    def padding_top_px(self) -> float:
        return _first(self.padding_top, self.padding_y, self.padding)

    @property
    def padding_bottom_px(self) -> float:
        return _first(self.padding_bottom, self.padding_y, self.padding)

    @property
    def paddings(self):
        """Resolved ``(left, right, top, bottom)`` padding."""
        return (self.padding_left_px, self.padding_right_px,
                self.padding_top_px, self.padding_bottom_px)

    @property
    def inner_width(self) -> float:
        """Width available to the extent after horizontal padding."""
        return self.width - self.padding_left_px - self.padding_right_px

    @property
    def inner_height(self) -> float:
        """Height available to the extent after vertical padding."""
        return self.height - self.padding_top_px - self.padding_bottom_px


def _first(*values):
    for value in values:
        if value is not None:
            return value
    return 0
