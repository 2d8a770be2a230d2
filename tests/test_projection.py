"""Tests for the mapsnap.projection module."""

import math

import mercantile
import pytest

from mapsnap.models import LatLng, Point
from mapsnap.projection import (Viewport, lat_to_tile_y, latlng_to_tile, lng_to_tile_x,
                                pixel_to_tile, round_half_up, tile_to_latlng,
                                tile_to_pixel, wrap)


class TestWrap:
    """Tests for the wrap function."""

    def test_in_range_values_unchanged(self):
        """Values inside the range, including the ends, are returned as is."""
        assert wrap(180, -180, 180) == 180
        assert wrap(-180, -180, 180) == -180
        assert wrap(13.4, -180, 180) == 13.4

    def test_out_of_range_values_wrapped(self):
        """Values outside the range are reduced with a modulo."""
        assert wrap(190, -180, 180) == pytest.approx(-170)
        assert wrap(-200, -180, 180) == pytest.approx(160)
        assert wrap(540, -180, 180) == pytest.approx(-180)


class TestTileCoordinates:
    """Tests for the degree to tile space transforms."""

    def test_known_values(self):
        """Origin and antimeridian map to the expected tile coordinates."""
        assert lng_to_tile_x(0, 0) == 0.5
        assert lng_to_tile_x(-180, 1) == 0
        assert lng_to_tile_x(180, 1) == 2
        assert lat_to_tile_y(0, 1) == pytest.approx(1.0)

    def test_matches_mercantile(self):
        """Integer parts agree with mercantile's tile lookup."""
        for lat, lng, zoom in [(52.5, 13.4, 11), (-33.9, 151.2, 7), (40.7, -74.0, 15)]:
            tile = mercantile.tile(lng, lat, zoom)
            assert int(lng_to_tile_x(lng, zoom)) == tile.x
            assert int(lat_to_tile_y(lat, zoom)) == tile.y

    @pytest.mark.parametrize("zoom", [0, 1, 5, 12, 20])
    def test_round_trip(self, zoom):
        """Projecting and inverting recovers the position."""
        for lat, lng in [(52.5, 13.4), (-33.9, 151.2), (0.0, 0.0), (85.0, -179.9), (-70.0, 45.0)]:
            result = tile_to_latlng(latlng_to_tile(LatLng(lat, lng), zoom), zoom)
            assert result.lat == pytest.approx(lat, abs=1e-9)
            assert result.lng == pytest.approx(lng, abs=1e-9)

    @pytest.mark.parametrize("zoom", [0, 3, 10, 20])
    def test_longitude_wrap(self, zoom):
        """lng and lng +/- 360 agree modulo 2**zoom."""
        n = 2 ** zoom
        for lng in [-170.0, -45.5, 0.0, 13.4, 179.0]:
            x = lng_to_tile_x(lng, zoom)
            for shifted in (lng + 360, lng - 360):
                diff = lng_to_tile_x(shifted, zoom) - x
                assert diff / n == pytest.approx(round(diff / n), abs=1e-9)
        assert lng_to_tile_x(180, zoom) - lng_to_tile_x(-180, zoom) == n

    def test_poles_are_finite(self):
        """The poles project to finite values instead of raising."""
        assert math.isfinite(lat_to_tile_y(90, 4))
        assert math.isfinite(lat_to_tile_y(-90, 4))

    def test_out_of_range_latitude_does_not_raise(self):
        """Latitudes outside [-90, 90] are wrapped before projecting."""
        assert lat_to_tile_y(100, 3) == pytest.approx(lat_to_tile_y(-80, 3))


class TestPixelMapping:
    """Tests for tile_to_pixel and its inverse."""

    def test_center_maps_to_viewport_center(self):
        assert tile_to_pixel(3.25, 3.25, 1.0, 256, 512) == 256

    def test_offset_and_scale(self):
        assert tile_to_pixel(1.5, 1.0, 1.0, 256, 512) == 384
        assert tile_to_pixel(1.5, 1.0, 2.0, 256, 512) == 512

    def test_asymmetric_padding_shifts_center(self):
        """Unequal near/far padding recenters the viewport."""
        assert tile_to_pixel(1.0, 1.0, 1.0, 256, 512, 100, 0) == 306
        assert tile_to_pixel(1.0, 1.0, 1.0, 256, 512, 0, 100) == 206

    def test_rounds_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2
        assert round_half_up(2.4999) == 2

    def test_pixel_to_tile_inverts(self):
        for px in (0, 100, 256, 511):
            tile = pixel_to_tile(px, 2.5, 1.5, 256, 512, 10, 30)
            assert tile_to_pixel(tile, 2.5, 1.5, 256, 512, 10, 30) == px


class TestViewport:
    """Tests for the Viewport helper."""

    def test_tile_and_pixel_round_trip(self):
        viewport = Viewport(zoom=3, center_x=2.5, center_y=4.0, scale=1.0,
                            tile_size=256, width=512, height=512)
        assert viewport.x_to_px(3.0) == 384
        assert viewport.px_to_x(384) == pytest.approx(3.0)
        assert viewport.y_to_py(4.0) == 256

    def test_latlng_to_pixel_uses_zoom(self):
        viewport = Viewport(zoom=0, center_x=0.5, center_y=0.5, scale=1.0,
                            tile_size=256, width=256, height=256)
        assert viewport.latlng_to_pixel(LatLng(0.0, 0.0)) == (128, 128)
        assert viewport.lng_to_px(-180) == 0
        assert viewport.lng_to_px(180) == 256

    def test_with_scale_keeps_geometry(self):
        viewport = Viewport(zoom=3, center_x=2.5, center_y=4.0, scale=1.0,
                            tile_size=256, width=512, height=400, padding=(1, 2, 3, 4))
        scaled = viewport.with_scale(2.0)
        assert scaled.scale == 2.0
        assert scaled.padding == (1, 2, 3, 4)
        assert scaled.height == 400


def test_latlng_to_tile_returns_point():
    assert latlng_to_tile(LatLng(0, 0), 1) == Point(1.0, 1.0)
