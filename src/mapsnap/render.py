"""Overlay rendering.

Overlays are drawn in insertion order on top of the tile layer. Geometry is
projected with the render's :class:`~mapsnap.projection.Viewport`; circle
radii, line widths and text sizes stay in pixels.
"""
import logging

from . import overlays as ov
from .data_sources.fetch import load_image
from .errors import UnknownOverlayError
from .geodesy import distance, scale_length
from .models import LatLng
from .projection import round_half_up

logger = logging.getLogger(__name__)

CORNERS = ("topleft", "topright", "bottomleft", "bottomright")


def draw_overlays(surface, viewport, overlays, extent, user_agent=None):
    """Draw all ``overlays`` in order.

    Parameters
    ----------
    surface : Surface
        Target surface, already holding the tile layer.
    viewport : Viewport
        Projection of the current render.
    overlays : sequence of Overlay
        Overlays in z-order, bottom first.
    extent : LatLngBounds
        Resolved extent, used by scale bars.
    user_agent : str, optional
        User-Agent for image overlays loaded from URLs.
    """
    for overlay in overlays:
        draw_overlay(surface, viewport, overlay, extent, user_agent=user_agent)


def draw_overlay(surface, viewport, overlay, extent, user_agent=None):
    """Draw a single overlay, dispatching on its kind.

    Raises
    ------
    UnknownOverlayError
        If the overlay kind is not known.
    """
    kind = getattr(overlay, "kind", None)
    if kind == ov.IMAGE:
        _draw_image(surface, viewport, overlay, user_agent)
    elif kind == ov.LINE:
        _draw_path(surface, viewport, overlay.points, overlay.style, closed=False)
    elif kind == ov.POLYGON:
        _draw_path(surface, viewport, overlay.points, overlay.style, closed=True)
    elif kind == ov.CIRCLE:
        _draw_circle(surface, viewport, overlay)
    elif kind == ov.RECT:
        _draw_rect(surface, viewport, overlay)
    elif kind == ov.TEXT:
        _draw_text(surface, viewport, overlay)
    elif kind == ov.SCALE:
        draw_scale(surface, viewport, extent, overlay.style)
    else:
        raise UnknownOverlayError(overlay)


def _draw_image(surface, viewport, overlay, user_agent):
    img = load_image(overlay.src, user_agent=user_agent)
    bounds = overlay.bounds
    x = viewport.lng_to_px(bounds.min.lng)
    y = viewport.lat_to_py(bounds.max.lat)
    dx = viewport.lng_to_px(bounds.max.lng) - x
    dy = viewport.lat_to_py(bounds.min.lat) - y
    surface.draw_image(img, x, y, dx, dy)


def _draw_path(surface, viewport, points, style, closed):
    if len(points) < 2:
        return
    surface.begin_path()
    first, *rest = [viewport.latlng_to_pixel(p) for p in points]
    surface.move_to(*first)
    for px, py in rest:
        surface.line_to(px, py)
    if closed:
        surface.close_path()
        if style.fill is not None:
            surface.fill(style.fill)
    if style.stroke is not None:
        surface.stroke(style.stroke, style.width, style.cap, style.join)


def _draw_circle(surface, viewport, overlay):
    style = overlay.style
    x, y = viewport.latlng_to_pixel(overlay.center)
    surface.begin_path()
    surface.arc(x, y, style.radius)
    if style.fill is not None:
        surface.fill(style.fill)
    if style.stroke is not None:
        surface.stroke(style.stroke, style.width)


def _draw_rect(surface, viewport, overlay):
    style = overlay.style
    bounds = overlay.bounds
    x = viewport.lng_to_px(bounds.min.lng)
    y = viewport.lat_to_py(bounds.max.lat)
    dx = viewport.lng_to_px(bounds.max.lng) - x
    dy = viewport.lat_to_py(bounds.min.lat) - y
    surface.begin_path()
    surface.rect(x, y, dx, dy)
    if style.fill is not None:
        surface.fill(style.fill)
    if style.stroke is not None:
        surface.stroke(style.stroke, style.width, join=style.join)


def _draw_text(surface, viewport, overlay):
    style = overlay.style
    x, y = viewport.latlng_to_pixel(overlay.anchor)
    x += style.offset_x
    y += style.offset_y
    if style.fill is not None:
        surface.fill_text(overlay.text, x, y, style)
    if style.stroke is not None:
        surface.stroke_text(overlay.text, x, y, style)


def scale_bar_geometry(viewport, extent, style):
    """Length and label of the scale bar for ``extent``.

    The bar measures the parallel through the extent's center between its
    western and eastern edge. Its maximum length is ``style.max_width`` of
    that line, snapped down to a nice number.

    Returns
    -------
    tuple of (int, ScaleLength) or None
        Bar length in pixels and the rounded length, None when the extent
        has no width.
    """
    lat = extent.center.lat
    west = LatLng(lat, extent.min.lng)
    east = LatLng(lat, extent.max.lng)
    meters = distance(west, east)
    pixels = abs(viewport.lng_to_px(east.lng) - viewport.lng_to_px(west.lng))
    if meters <= 0 or pixels <= 0:
        return None
    length = scale_length(meters * style.max_width, style.units)
    if length.meters <= 0:
        return None
    return round_half_up(pixels * length.meters / meters), length


def draw_scale(surface, viewport, extent, style):
    """Draw a scale bar in one of the viewport corners."""
    if style.position not in CORNERS:
        raise ValueError(f"scale position must be one of {CORNERS}, got {style.position!r}")
    geometry = scale_bar_geometry(viewport, extent, style)
    if geometry is None:
        logger.debug("extent has no width, scale bar skipped")
        return
    bar, length = geometry
    label_style = ov.TextStyle(font=style.font, size=style.font_size, align="center",
                               baseline="top", fill=style.text_color)
    _, label_height = surface.measure_text(length.label, label_style)

    margin_x = style.margin_x * viewport.width
    margin_y = style.margin_y * viewport.height
    if style.position.endswith("left"):
        x = margin_x
    else:
        x = viewport.width - margin_x - bar
    if style.position.startswith("top"):
        y = margin_y
    else:
        y = viewport.height - margin_y - style.height - style.label_gap - label_height

    surface.begin_path()
    surface.rect(x, y, bar, style.height)
    if style.fill is not None:
        surface.fill(style.fill)
    if style.stroke is not None:
        surface.stroke(style.stroke, style.width)
    surface.fill_text(length.label, x + bar / 2.0, y + style.height + style.label_gap,
                      label_style)
