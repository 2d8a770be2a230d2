"""Tile layer composition for static maps.

This package enumerates and draws the slippy map tiles underneath the
overlays of a static map.
"""

from .compositor import TileCompositor, compute_viewport, grayscale, tile_range, tile_url
