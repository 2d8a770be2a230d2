"""Image retrieval over HTTP and from local sources.

Tile servers such as tile.openstreetmap.org require an identifying
User-Agent header, which every request sends.
"""
import base64
import io
import logging
import pathlib

import requests
from PIL import Image

from .. import __version__, config
from ..errors import TileFetchError

settings = config.settings
logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"mapsnap/{__version__}"


def fetch_bytes(url, user_agent=None, timeout=None):
    """Download ``url`` and return the response body.

    Parameters
    ----------
    url : str
        The URL to request.
    user_agent : str, optional
        User-Agent header, by default ``mapsnap/<version>``.
    timeout : float, optional
        Request timeout in seconds, by default the ``request_timeout``
        setting (30 s when unset).

    Returns
    -------
    bytes
        The encoded image.

    Raises
    ------
    TileFetchError
        If the server does not answer with status 200.
    requests.RequestException
        On transport failures.
    """
    if timeout is None:
        timeout = settings.get("request_timeout", 30)
    headers = {"User-Agent": user_agent or DEFAULT_USER_AGENT}
    logger.debug(f"GET {url}")
    response = requests.get(url, headers=headers, timeout=timeout)
    if response.status_code != 200:
        raise TileFetchError(url, response.status_code)
    return response.content


def to_data_url(data, mimetype="image/png"):
    """Encode raw bytes as a base64 data URI."""
    encoded = base64.b64encode(data).decode("ascii")
    return "data:" + mimetype.strip() + ";base64," + encoded


def base64img(url, mimetype="image/png", user_agent=None):
    """Download ``url`` and return it as a base64 data URI."""
    return to_data_url(fetch_bytes(url, user_agent=user_agent), mimetype)


def decode_data_url(src):
    """Return the bytes carried by a base64 data URI."""
    header, _, payload = src.partition(",")
    if not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError(f"not a base64 data URI: {src[:40]}...")
    return base64.b64decode(payload)


def load_image(src, user_agent=None):
    """Resolve an image source to a PIL image.

    Parameters
    ----------
    src : PIL.Image.Image, bytes, str or pathlib.Path
        An image, encoded image bytes, a data URI, an http(s) URL or a
        file path.
    user_agent : str, optional
        User-Agent header for URLs.

    Returns
    -------
    PIL.Image.Image
    """
    if isinstance(src, Image.Image):
        return src
    if isinstance(src, (bytes, bytearray)):
        data = bytes(src)
    elif isinstance(src, pathlib.Path):
        return Image.open(src)
    elif src.startswith("data:"):
        data = decode_data_url(src)
    elif src.startswith(("http://", "https://")):
        data = fetch_bytes(src, user_agent=user_agent)
    else:
        return Image.open(src)
    img = Image.open(io.BytesIO(data))
    img.load()
    return img
