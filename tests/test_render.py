"""Tests for the mapsnap.render module."""

from unittest.mock import MagicMock, patch

import pytest
from PIL import Image

from mapsnap import overlays as ov
from mapsnap import render
from mapsnap.errors import UnknownOverlayError
from mapsnap.models import LatLng, LatLngBounds
from mapsnap.options import StaticMapOptions
from mapsnap.projection import Viewport
from mapsnap.surface import Surface
from mapsnap.tilers import compute_viewport


@pytest.fixture
def viewport():
    """Zoom 0 world view, 256 x 256 px, with (0, 0) at the center."""
    return Viewport(zoom=0, center_x=0.5, center_y=0.5, scale=1.0,
                    tile_size=256, width=256, height=256)


def call_names(surface):
    return [name for name, _, _ in surface.method_calls]


class TestDispatch:
    """Tests for draw_overlay dispatch."""

    def test_unknown_kind_raises(self, viewport, berlin_extent):
        with pytest.raises(UnknownOverlayError):
            render.draw_overlay(MagicMock(), viewport, object(), berlin_extent)

    def test_draws_in_order(self, viewport, berlin_extent):
        surface = MagicMock()
        overlays = [ov.circle((0, 0), fill="red", stroke=None),
                    ov.text((0, 0), "label")]

        render.draw_overlays(surface, viewport, overlays, berlin_extent)

        names = call_names(surface)
        assert names.index("fill") < names.index("fill_text")


class TestPaths:
    """Tests for lines and polygons."""

    def test_line_needs_two_points(self, viewport, berlin_extent):
        surface = MagicMock()
        render.draw_overlay(surface, viewport, ov.line([(0, 0)]), berlin_extent)
        assert surface.method_calls == []

    def test_line_is_stroked(self, viewport, berlin_extent):
        surface = MagicMock()
        overlay = ov.line([(0, -90), (0, 90)], stroke="blue", width=3, cap="round")

        render.draw_overlay(surface, viewport, overlay, berlin_extent)

        surface.move_to.assert_called_once_with(64, 128)
        surface.line_to.assert_called_once_with(192, 128)
        surface.stroke.assert_called_once_with("blue", 3, "round", "miter")
        surface.close_path.assert_not_called()

    def test_line_without_stroke_is_not_stroked(self, viewport, berlin_extent):
        surface = MagicMock()
        overlay = ov.line([(0, -90), (0, 90)], stroke=None)

        render.draw_overlay(surface, viewport, overlay, berlin_extent)

        surface.stroke.assert_not_called()
        surface.fill.assert_not_called()

    def test_polygon_fills_then_strokes(self, viewport, berlin_extent):
        surface = MagicMock()
        overlay = ov.polygon([(0, 0), (10, 10), (0, 20)], fill="green", stroke="black")

        render.draw_overlay(surface, viewport, overlay, berlin_extent)

        assert call_names(surface) == ["begin_path", "move_to", "line_to", "line_to",
                                       "close_path", "fill", "stroke"]

    def test_polygon_without_stroke(self, viewport, berlin_extent):
        surface = MagicMock()
        overlay = ov.polygon([(0, 0), (10, 10), (0, 20)], fill="green", stroke=None)

        render.draw_overlay(surface, viewport, overlay, berlin_extent)

        surface.fill.assert_called_once_with("green")
        surface.stroke.assert_not_called()


class TestMarkers:
    """Tests for circles, rectangles and text."""

    def test_circle_radius_is_in_pixels(self, viewport, berlin_extent):
        surface = MagicMock()
        render.draw_overlay(surface, viewport, ov.circle((0, 0), radius=5), berlin_extent)
        surface.arc.assert_called_once_with(128, 128, 5.0)
        surface.fill.assert_not_called()
        surface.stroke.assert_called_once_with("black", 1.0)

    def test_rect_spans_bounds(self, viewport, berlin_extent):
        surface = MagicMock()
        overlay = ov.rect(((0, 0), (0, 90)), stroke=None, fill="yellow")

        render.draw_overlay(surface, viewport, overlay, berlin_extent)

        surface.rect.assert_called_once_with(128, 128, 64, 0)
        surface.fill.assert_called_once_with("yellow")
        surface.stroke.assert_not_called()

    def test_text_offsets(self, viewport, berlin_extent):
        surface = MagicMock()
        overlay = ov.text((0, 0), "hello", offset_x=5, offset_y=-3)

        render.draw_overlay(surface, viewport, overlay, berlin_extent)

        surface.fill_text.assert_called_once_with("hello", 133, 125, overlay.style)
        surface.stroke_text.assert_not_called()

    def test_text_stroke_only(self, viewport, berlin_extent):
        surface = MagicMock()
        overlay = ov.text((0, 0), "hello", fill=None, stroke="white")

        render.draw_overlay(surface, viewport, overlay, berlin_extent)

        surface.fill_text.assert_not_called()
        surface.stroke_text.assert_called_once_with("hello", 128, 128, overlay.style)


class TestImage:
    """Tests for image overlays."""

    def test_image_is_stretched_over_bounds(self, viewport, berlin_extent):
        surface = MagicMock()
        img = Image.new("RGBA", (4, 4), "red")
        overlay = ov.image(img, ((0, -90), (0, 90)))

        render.draw_overlay(surface, viewport, overlay, berlin_extent)

        surface.draw_image.assert_called_once_with(img, 64, 128, 128, 0)

    @patch.object(render, "load_image")
    def test_image_source_is_loaded(self, mock_load, viewport, berlin_extent):
        render.draw_overlay(MagicMock(), viewport,
                            ov.image("https://img.test/a.png", ((0, 0), (1, 1))),
                            berlin_extent, user_agent="ua")
        mock_load.assert_called_once_with("https://img.test/a.png", user_agent="ua")


class TestScale:
    """Tests for the scale bar."""

    def test_berlin_geometry(self, berlin_extent):
        viewport = compute_viewport(berlin_extent, StaticMapOptions())
        bar, length = render.scale_bar_geometry(viewport, berlin_extent, ov.ScaleStyle())
        assert length.label == "2 km"
        width = viewport.lng_to_px(berlin_extent.max.lng) - viewport.lng_to_px(berlin_extent.min.lng)
        assert 0 < bar <= 0.2 * width

    def test_imperial_label(self, berlin_extent):
        viewport = compute_viewport(berlin_extent, StaticMapOptions())
        _, length = render.scale_bar_geometry(viewport, berlin_extent,
                                              ov.ScaleStyle(units="imperial"))
        assert length.unit == "mi"

    def test_point_extent_has_no_bar(self, viewport):
        bounds = LatLngBounds.from_point(LatLng(10, 10))
        assert render.scale_bar_geometry(viewport, bounds, ov.ScaleStyle()) is None

    def test_invalid_position(self, viewport, berlin_extent):
        with pytest.raises(ValueError):
            render.draw_scale(MagicMock(), viewport, berlin_extent,
                              ov.ScaleStyle(position="center"))

    @pytest.mark.parametrize("position", render.CORNERS)
    def test_bar_is_drawn_in_corner(self, berlin_extent, position):
        options = StaticMapOptions()
        viewport = compute_viewport(berlin_extent, options)
        surface = Surface(options.width, options.height)

        render.draw_overlay(surface, viewport, ov.scale(position=position, fill="red"),
                            berlin_extent)

        data = surface.get_image_data()
        top = data[: options.height // 2, ..., 3].any()
        left = data[:, : options.width // 2, 3].any()
        assert top == position.startswith("top")
        assert left == position.endswith("left")
