"""Shared pytest fixtures for mapsnap tests."""

import io
import tempfile
from pathlib import Path

import pytest
from PIL import Image

from mapsnap.models import LatLng, LatLngBounds


def png_bytes(color=(255, 255, 255, 255), size=256):
    """Encode a solid-color square as PNG."""
    buf = io.BytesIO()
    Image.new("RGBA", (size, size), color).save(buf, format="PNG")
    return buf.getvalue()


class FakeFetcher:
    """Stand-in for the HTTP fetcher that records every requested URL."""

    def __init__(self, color=(255, 255, 255, 255), size=256):
        self.data = png_bytes(color, size)
        self.calls = []

    def __call__(self, url, user_agent=None):
        self.calls.append(url)
        return self.data


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fetcher():
    """A fetcher returning opaque white 256 px tiles."""
    return FakeFetcher()


@pytest.fixture
def berlin_extent():
    """The extent of central Berlin."""
    return LatLngBounds(min=LatLng(52.4, 13.3), max=LatLng(52.6, 13.5))
