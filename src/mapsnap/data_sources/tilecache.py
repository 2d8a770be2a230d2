"""Directory-backed tile cache.

Tiles are stored as ``{z}_{x}_{y}.png`` files under the cache directory.
A key always maps to the same file, so several maps may share a directory.
Writes go to a temporary file that is renamed into place; concurrent writers
of the same key leave one complete file behind.
"""
import logging
import os
import pathlib
import tempfile

from ..models import TileKey

logger = logging.getLogger(__name__)


class TileCache:
    """A key to blob store for map tiles.

    Parameters
    ----------
    path : str or pathlib.Path
        Directory for the cached tiles. Created if missing.

    Attributes
    ----------
    FN_TEMPLATE : str
        File name template for a tile.
    """

    FN_TEMPLATE = "{z}_{x}_{y}.png"

    def __init__(self, path):
        self.path = pathlib.Path(path)
        self.path.mkdir(parents=True, exist_ok=True)

    def tile_path(self, key: TileKey) -> pathlib.Path:
        """Cache file for ``key``."""
        fn = self.FN_TEMPLATE.format(z=key.z, x=key.x, y=key.y)
        return self.path / fn

    def get(self, key: TileKey):
        """Cached bytes for ``key`` or None."""
        fn = self.tile_path(key)
        if not fn.is_file():
            return None
        return fn.read_bytes()

    def put(self, key: TileKey, data: bytes):
        """Store ``data`` under ``key``, replacing any previous entry."""
        fn = self.tile_path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.path, prefix=fn.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, fn)
        except BaseException:
            pathlib.Path(tmp_name).unlink(missing_ok=True)
            raise

    def pass_through(self, key: TileKey, generator):
        """Return cached data, or generate, store and return it.

        Parameters
        ----------
        key : TileKey
            Tile to look up.
        generator : callable
            Called with ``key`` on a cache miss; must return bytes.

        Returns
        -------
        bytes
        """
        data = self.get(key)
        if data is not None:
            logger.debug(f"cache hit {key.z}/{key.x}/{key.y}")
            return data
        logger.debug(f"cache miss {key.z}/{key.x}/{key.y}")
        data = generator(key)
        self.put(key, data)
        return data
