"""Tile and image sources: HTTP retrieval and the on-disk tile cache."""

from .fetch import base64img, fetch_bytes, load_image
from .tilecache import TileCache
