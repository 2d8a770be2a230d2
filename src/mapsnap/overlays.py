"""Overlay variants and their style records.

Every overlay is a frozen dataclass with a ``kind`` tag; together they form
the closed set handled by :mod:`mapsnap.render` and :mod:`mapsnap.extent`.
Styles are flat records with per-field defaults, one per overlay kind.
Colors are anything :func:`mapsnap.surface.parse_color` accepts: CSS names,
hex strings, ``rgb()``/``rgba()`` with fractional alpha, or RGB(A) tuples.
"""
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, Union

from .models import LatLng, LatLngBounds, as_bounds, as_latlng

IMAGE = "image"
LINE = "line"
POLYGON = "polygon"
CIRCLE = "circle"
RECT = "rect"
TEXT = "text"
SCALE = "scale"

Color = Union[str, Tuple[int, ...]]


# Styles ----------------------------------------------------------------------


@dataclass(frozen=True)
class LineStyle:
    """Stroke of a polyline. A None stroke draws nothing.

    ``cap`` is one of ``butt``, ``round``, ``square``; ``join`` one of
    ``miter``, ``round``, ``bevel``.
    """
    stroke: Optional[Color] = "black"
    width: float = 1.0
    cap: str = "butt"
    join: str = "miter"


@dataclass(frozen=True)
class PolygonStyle:
    """Stroke and fill of a closed polygon. Either may be None."""
    stroke: Optional[Color] = "black"
    width: float = 1.0
    cap: str = "butt"
    join: str = "miter"
    fill: Optional[Color] = None


@dataclass(frozen=True)
class CircleStyle:
    """A fixed-size marker; ``radius`` and ``width`` are in pixels."""
    radius: float = 8.0
    stroke: Optional[Color] = "black"
    width: float = 1.0
    fill: Optional[Color] = None


@dataclass(frozen=True)
class RectStyle:
    stroke: Optional[Color] = "black"
    width: float = 1.0
    join: str = "miter"
    fill: Optional[Color] = None


@dataclass(frozen=True)
class TextStyle:
    """Typography and paint of a text label.

    Attributes
    ----------
    font : str
        Font family or path to a TrueType file, by default ``sans-serif``.
    size : float
        Font size in pixels.
    align : str
        ``start``, ``end``, ``left``, ``right`` or ``center``.
    baseline : str
        ``top``, ``hanging``, ``middle``, ``alphabetic``, ``ideographic``
        or ``bottom``.
    direction : str
        ``ltr`` or ``rtl``; decides what ``start`` and ``end`` mean.
    max_width : float, optional
        Shrink the text to fit this width in pixels.
    offset_x, offset_y : float
        Pixel offset from the projected anchor.
    fill : color, optional
        Text fill, None for no fill.
    stroke : color, optional
        Text outline, None for no outline.
    stroke_width : float
        Outline width in pixels.
    """
    font: str = "sans-serif"
    size: float = 12.0
    align: str = "start"
    baseline: str = "alphabetic"
    direction: str = "ltr"
    max_width: Optional[float] = None
    offset_x: float = 0.0
    offset_y: float = 0.0
    fill: Optional[Color] = "black"
    stroke: Optional[Color] = None
    stroke_width: float = 1.0


@dataclass(frozen=True)
class ScaleStyle:
    """Layout and paint of the scale bar.

    Attributes
    ----------
    units : str
        ``metric`` or ``imperial``.
    max_width : float
        Longest bar as a fraction of the extent's width, by default 0.2.
    position : str
        ``bottomleft``, ``bottomright``, ``topleft`` or ``topright``.
    margin_x, margin_y : float
        Distance from the viewport edges as a fraction of width/height.
    height : float
        Bar height in pixels.
    stroke, fill : color, optional
        Bar outline and fill.
    width : float
        Bar outline width.
    font, font_size, text_color : str, float, color
        Label typography.
    label_gap : float
        Space between the bar and its label in pixels.
    """
    units: str = "metric"
    max_width: float = 0.2
    position: str = "bottomleft"
    margin_x: float = 0.03
    margin_y: float = 0.03
    height: float = 6.0
    stroke: Optional[Color] = "black"
    fill: Optional[Color] = "rgba(255,255,255,0.6)"
    width: float = 1.0
    font: str = "sans-serif"
    font_size: float = 11.0
    text_color: Color = "black"
    label_gap: float = 2.0


# Overlays --------------------------------------------------------------------


@dataclass(frozen=True)
class ImageOverlay:
    """An image stretched over geographic bounds.

    ``src`` is a PIL image, encoded bytes, a data URI, an http(s) URL or a
    file path.
    """
    src: Any
    bounds: LatLngBounds
    kind: str = field(default=IMAGE, init=False)


@dataclass(frozen=True)
class LineOverlay:
    points: Tuple[LatLng, ...]
    style: LineStyle = LineStyle()
    kind: str = field(default=LINE, init=False)


@dataclass(frozen=True)
class PolygonOverlay:
    points: Tuple[LatLng, ...]
    style: PolygonStyle = PolygonStyle()
    kind: str = field(default=POLYGON, init=False)


@dataclass(frozen=True)
class CircleOverlay:
    center: LatLng
    style: CircleStyle = CircleStyle()
    kind: str = field(default=CIRCLE, init=False)


@dataclass(frozen=True)
class RectOverlay:
    bounds: LatLngBounds
    style: RectStyle = RectStyle()
    kind: str = field(default=RECT, init=False)


@dataclass(frozen=True)
class TextOverlay:
    anchor: LatLng
    text: str
    style: TextStyle = TextStyle()
    kind: str = field(default=TEXT, init=False)


@dataclass(frozen=True)
class ScaleOverlay:
    """A scale bar anchored to a viewport corner rather than a position."""
    style: ScaleStyle = ScaleStyle()
    kind: str = field(default=SCALE, init=False)


Overlay = Union[ImageOverlay, LineOverlay, PolygonOverlay, CircleOverlay,
                RectOverlay, TextOverlay, ScaleOverlay]


# Builders --------------------------------------------------------------------


def _style(cls, style, style_fields):
    if style is None:
        return cls(**style_fields)
    if style_fields:
        raise TypeError("pass either a style object or style fields, not both")
    return style


def image(src, bounds) -> ImageOverlay:
    return ImageOverlay(src=src, bounds=as_bounds(bounds))


def line(points, style: Optional[LineStyle] = None, **style_fields) -> LineOverlay:
    return LineOverlay(points=tuple(as_latlng(p) for p in points),
                       style=_style(LineStyle, style, style_fields))


def polygon(points, style: Optional[PolygonStyle] = None, **style_fields) -> PolygonOverlay:
    return PolygonOverlay(points=tuple(as_latlng(p) for p in points),
                          style=_style(PolygonStyle, style, style_fields))


def circle(center, style: Optional[CircleStyle] = None, **style_fields) -> CircleOverlay:
    return CircleOverlay(center=as_latlng(center),
                         style=_style(CircleStyle, style, style_fields))


def rect(bounds, style: Optional[RectStyle] = None, **style_fields) -> RectOverlay:
    return RectOverlay(bounds=as_bounds(bounds),
                       style=_style(RectStyle, style, style_fields))


def text(anchor, content: str, style: Optional[TextStyle] = None, **style_fields) -> TextOverlay:
    return TextOverlay(anchor=as_latlng(anchor), text=str(content),
                       style=_style(TextStyle, style, style_fields))


def scale(style: Optional[ScaleStyle] = None, **style_fields) -> ScaleOverlay:
    return ScaleOverlay(style=_style(ScaleStyle, style, style_fields))
