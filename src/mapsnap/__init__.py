"""Static slippy map images with overlays.

Renders a Web Mercator tile view of an extent into a single raster, with
images, lines, polygons, circles, rectangles, text labels and a scale bar
drawn on top.
"""

__version__ = "0.3.0"

from .errors import ExtentResolutionError, MapsnapError, TileFetchError, UnknownOverlayError
from .models import LatLng, LatLngBounds, Point, TileKey
from .options import StaticMapOptions
from .overlays import (CircleStyle, LineStyle, PolygonStyle, RectStyle, ScaleStyle,
                       TextStyle)
from .staticmap import StaticMap
