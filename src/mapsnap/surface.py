"""A 2-D drawing surface on top of Pillow.

The surface mimics the parts of an HTML canvas context that the renderer
needs: rectangles, scaled images, paths with stroke and fill, text, raw
RGBA pixel access and PNG export. Vector drawing goes to a transparent
layer which is then alpha-composited, so translucent colors blend with
what is already on the surface.
"""
import base64
import io
import logging
import math
import re
from functools import lru_cache
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image, ImageColor, ImageDraw, ImageFont

from .overlays import TextStyle

logger = logging.getLogger(__name__)

_RGBA_RE = re.compile(
    r"^rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+%?)\s*)?\)$")

FONT_FILES = {
    "sans-serif": "DejaVuSans.ttf",
    "serif": "DejaVuSerif.ttf",
    "monospace": "DejaVuSansMono.ttf",
}

_H_ANCHOR = {"left": "l", "center": "m", "right": "r"}
_V_ANCHOR = {
    "top": "t",
    "hanging": "a",
    "middle": "m",
    "alphabetic": "s",
    "ideographic": "d",
    "bottom": "b",
}


def parse_color(value) -> Tuple[int, int, int, int]:
    """Convert a color value to an RGBA tuple.

    Parameters
    ----------
    value : str or tuple
        CSS color name, hex string, ``rgb()``/``rgba()`` (alpha may be a
        fraction as in CSS) or an RGB/RGBA tuple.

    Returns
    -------
    tuple of int
        ``(r, g, b, a)`` in 0..255.
    """
    if isinstance(value, (tuple, list)):
        if len(value) == 3:
            return (int(value[0]), int(value[1]), int(value[2]), 255)
        if len(value) == 4:
            return tuple(int(v) for v in value)
        raise ValueError(f"color tuple must have 3 or 4 items: {value!r}")
    match = _RGBA_RE.match(value.strip().lower())
    if match:
        r, g, b, a = match.groups()
        alpha = 255
        if a is not None:
            if a.endswith("%"):
                alpha = float(a[:-1]) / 100.0 * 255
            elif float(a) <= 1.0:
                alpha = float(a) * 255
            else:
                alpha = float(a)
        return (int(float(r)), int(float(g)), int(float(b)), int(round(alpha)))
    return ImageColor.getcolor(value, "RGBA")


@lru_cache(maxsize=64)
def load_font(font: str, size: int):
    """Load a TrueType font by family name or file path.

    Falls back to Pillow's default font when the file cannot be found.
    """
    filename = FONT_FILES.get(font, font)
    if not filename.lower().endswith((".ttf", ".otf", ".ttc")):
        filename = filename + ".ttf"
    try:
        return ImageFont.truetype(filename, size)
    except OSError:
        logger.warning(f"Font {font!r} not found, using the default font")
        return ImageFont.load_default(size=size)


def _has_anchors(font) -> bool:
    return isinstance(font, ImageFont.FreeTypeFont)


class Surface:
    """An RGBA raster with canvas-like drawing operations.

    Parameters
    ----------
    width, height : int
        Size in pixels.
    background : color, optional
        Initial fill; transparent when None.
    """

    def __init__(self, width: int, height: int, background=None):
        color = parse_color(background) if background is not None else (0, 0, 0, 0)
        self.image = Image.new("RGBA", (int(width), int(height)), color)
        self._subpaths: List[List[Tuple[float, float]]] = []
        self._closed: List[bool] = []

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    # Layers ------------------------------------------------------------------

    def _layer(self):
        layer = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
        return layer, ImageDraw.Draw(layer)

    def _composite(self, layer):
        self.image.alpha_composite(layer)

    # Rectangles and images ---------------------------------------------------

    def fill_rect(self, x: float, y: float, w: float, h: float, color):
        """Fill an axis-aligned rectangle."""
        layer, draw = self._layer()
        x0, x1 = sorted((x, x + w))
        y0, y1 = sorted((y, y + h))
        draw.rectangle([x0, y0, x1 - 1, y1 - 1], fill=parse_color(color))
        self._composite(layer)

    def draw_image(self, img: Image.Image, x: int, y: int, w: int, h: int):
        """Draw ``img`` scaled into the ``w`` x ``h`` box at ``(x, y)``.

        Negative sizes mirror the image, like a canvas does. Parts outside
        the surface are clipped before scaling, so only the visible part is
        ever resampled.
        """
        x, y, w, h = int(x), int(y), int(w), int(h)
        if w == 0 or h == 0:
            return
        if w < 0:
            img = img.transpose(Image.FLIP_LEFT_RIGHT)
            x, w = x + w, -w
        if h < 0:
            img = img.transpose(Image.FLIP_TOP_BOTTOM)
            y, h = y + h, -h

        left, top = max(x, 0), max(y, 0)
        right, bottom = min(x + w, self.width), min(y + h, self.height)
        if right <= left or bottom <= top:
            return
        img = img.convert("RGBA")
        sx = img.width / w
        sy = img.height / h
        box = ((left - x) * sx, (top - y) * sy, (right - x) * sx, (bottom - y) * sy)
        size = (right - left, bottom - top)
        if size == img.size and box == (0, 0, img.width, img.height):
            visible = img
        else:
            visible = img.resize(size, Image.LANCZOS, box=box)
        self.image.alpha_composite(visible, dest=(left, top))

    # Paths -------------------------------------------------------------------

    def begin_path(self):
        self._subpaths = []
        self._closed = []

    def move_to(self, x: float, y: float):
        self._subpaths.append([(x, y)])
        self._closed.append(False)

    def line_to(self, x: float, y: float):
        if not self._subpaths or self._closed[-1]:
            self.move_to(x, y)
            return
        self._subpaths[-1].append((x, y))

    def close_path(self):
        if not self._subpaths:
            return
        self._closed[-1] = True

    def arc(self, x: float, y: float, radius: float,
            start: float = 0.0, end: float = 2 * math.pi):
        """Add a clockwise arc, approximated by line segments.

        A line joins the current point to the start of the arc. A full
        circle is added as its own closed subpath.
        """
        sweep = end - start
        segments = max(16, int(abs(sweep) * max(radius, 1.0) / 2.0))
        points = [(x + radius * math.cos(start + sweep * i / segments),
                   y + radius * math.sin(start + sweep * i / segments))
                  for i in range(segments + 1)]
        if abs(sweep) >= 2 * math.pi:
            self.move_to(*points[0])
            for px, py in points[1:-1]:
                self.line_to(px, py)
            self.close_path()
            return
        for px, py in points:
            self.line_to(px, py)

    def rect(self, x: float, y: float, w: float, h: float):
        self.move_to(x, y)
        self.line_to(x + w, y)
        self.line_to(x + w, y + h)
        self.line_to(x, y + h)
        self.close_path()

    def stroke(self, color, width: float = 1.0, cap: str = "butt", join: str = "miter"):
        """Stroke every subpath of the current path."""
        ink = parse_color(color)
        line_width = max(1, int(round(width)))
        layer, draw = self._layer()
        for points, closed in zip(self._subpaths, self._closed):
            if len(points) < 2:
                continue
            if closed:
                points = points + [points[0]]
            elif cap == "square":
                points = _extend_ends(points, width / 2.0)
            draw.line(points, fill=ink, width=line_width,
                      joint="curve" if join == "round" else None)
            if cap == "round" and not closed and line_width > 1:
                r = width / 2.0
                for px, py in (points[0], points[-1]):
                    draw.ellipse([px - r, py - r, px + r, py + r], fill=ink)
        self._composite(layer)

    def fill(self, color):
        """Fill every subpath of the current path."""
        ink = parse_color(color)
        layer, draw = self._layer()
        for points in self._subpaths:
            if len(points) < 3:
                continue
            draw.polygon(points, fill=ink)
        self._composite(layer)

    # Text --------------------------------------------------------------------

    def _font_for(self, text: str, style: TextStyle):
        size = max(1, int(round(style.size)))
        font = load_font(style.font, size)
        if style.max_width is not None and style.max_width > 0:
            width = font.getlength(text)
            if width > style.max_width:
                size = max(1, int(size * style.max_width / width))
                font = load_font(style.font, size)
        return font

    def measure_text(self, text: str, style: TextStyle) -> Tuple[float, float]:
        """Width and height of ``text`` in pixels."""
        left, top, right, bottom = self._font_for(text, style).getbbox(text)
        return right - left, bottom - top

    def _text_position(self, text: str, x: float, y: float, style: TextStyle, font):
        align = style.align
        if align == "start":
            align = "right" if style.direction == "rtl" else "left"
        elif align == "end":
            align = "left" if style.direction == "rtl" else "right"
        h_anchor = _H_ANCHOR.get(align, "l")
        v_anchor = _V_ANCHOR.get(style.baseline, "s")
        if _has_anchors(font):
            return (x, y), h_anchor + v_anchor
        # bitmap fonts know no anchors, place the bounding box by hand
        left, top, right, bottom = font.getbbox(text)
        dx = {"l": 0, "m": -(right - left) / 2.0, "r": -(right - left)}[h_anchor]
        dy = {"t": 0, "a": 0, "m": -(bottom - top) / 2.0}.get(v_anchor, -(bottom - top))
        return (x + dx, y + dy), None

    def fill_text(self, text: str, x: float, y: float, style: TextStyle, color=None):
        """Draw filled text anchored at ``(x, y)``."""
        font = self._font_for(text, style)
        xy, anchor = self._text_position(text, x, y, style, font)
        layer, draw = self._layer()
        draw.text(xy, text, font=font, anchor=anchor,
                  fill=parse_color(color if color is not None else style.fill))
        self._composite(layer)

    def stroke_text(self, text: str, x: float, y: float, style: TextStyle,
                    color=None, width: Optional[float] = None):
        """Draw the outline of text anchored at ``(x, y)``."""
        font = self._font_for(text, style)
        xy, anchor = self._text_position(text, x, y, style, font)
        stroke_width = max(1, int(round(width if width is not None else style.stroke_width)))
        layer, draw = self._layer()
        draw.text(xy, text, font=font, anchor=anchor, fill=(0, 0, 0, 0),
                  stroke_width=stroke_width,
                  stroke_fill=parse_color(color if color is not None else style.stroke))
        self._composite(layer)

    # Pixels and export -------------------------------------------------------

    def get_image_data(self) -> np.ndarray:
        """Copy of the raw pixels as a ``(height, width, 4)`` uint8 array."""
        return np.array(self.image, dtype=np.uint8)

    def put_image_data(self, data: np.ndarray):
        """Replace the surface pixels with a ``(height, width, 4)`` array."""
        data = np.asarray(data, dtype=np.uint8)
        if data.shape != (self.height, self.width, 4):
            raise ValueError(f"expected shape {(self.height, self.width, 4)}, got {data.shape}")
        self.image = Image.fromarray(data)

    def to_buffer(self, format: str = "PNG") -> bytes:
        """Encode the surface, PNG by default."""
        buf = io.BytesIO()
        self.image.save(buf, format=format)
        return buf.getvalue()

    def to_data_url(self, mimetype: str = "image/png") -> str:
        format = mimetype.split("/", 1)[-1].upper()
        encoded = base64.b64encode(self.to_buffer(format)).decode("ascii")
        return f"data:{mimetype};base64,{encoded}"


def _extend_ends(points, distance):
    """Lengthen an open polyline by ``distance`` at both ends (square caps)."""
    def push(p, q):
        dx, dy = p[0] - q[0], p[1] - q[1]
        norm = math.hypot(dx, dy)
        if norm == 0:
            return p
        return (p[0] + dx / norm * distance, p[1] + dy / norm * distance)

    points = list(points)
    points[0] = push(points[0], points[1])
    points[-1] = push(points[-1], points[-2])
    return points
