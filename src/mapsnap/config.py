"""Settings for mapsnap, loaded with Dynaconf.

Files are read in order of increasing priority:

1. ``/etc/mapsnap/settings.toml`` (and ``.secrets.toml``)
2. ``~/.config/mapsnap/settings.toml`` (and ``.secrets.toml``)
3. ``./settings.toml`` (and ``.secrets.toml``)
4. The file named by ``MAPSNAP_SETTINGS_FILE_FOR_DYNACONF``

Environment variables prefixed with ``MAPSNAP_`` override file values, e.g.
``MAPSNAP_TILE_CACHE=/var/cache/mapsnap``. Every key is optional;
:meth:`mapsnap.options.StaticMapOptions.from_settings` falls back to the
built-in defaults for anything not set.

Recognized keys
---------------
width, height, padding : map size and padding in pixels
tile_url, tile_size, tile_max_zoom : tile source
tile_cache : tile cache directory
user_agent, request_timeout : HTTP requests
background_color, grayscale, scaling : rendering

Example ``settings.toml``::

    [default]
    tile_cache = "~/.cache/mapsnap"

    [production]
    user_agent = "example.org map renderer"
    tile_url = "https://tiles.example.org/{z}/{x}/{y}.png"
"""
import os
import pathlib

from dynaconf import Dynaconf, Validator

USER_DIR = pathlib.Path("~/.config/mapsnap").expanduser()
GLOB_DIR = pathlib.Path("/etc/mapsnap/")
CURR_DIR = pathlib.Path("./").absolute()


def _settings_files():
    files = []
    for directory in (GLOB_DIR, USER_DIR, CURR_DIR):
        files.append(directory / "settings.toml")
        files.append(directory / ".secrets.toml")
    extra_file = os.getenv("MAPSNAP_SETTINGS_FILE_FOR_DYNACONF")
    if extra_file:
        files.append(pathlib.Path(extra_file).absolute())
    return [str(fn) for fn in files]


validators = [
    Validator("width", "height", "tile_size", gte=1),
    Validator("padding", gte=0),
    Validator("tile_max_zoom", gte=0, lte=30),
    Validator("request_timeout", gt=0),
    Validator("tile_url", cont="{z}"),
]

settings = Dynaconf(
    merge_enabled=True,
    envvar_prefix="MAPSNAP",
    settings_files=_settings_files(),
    environments=True,
    load_dotenv=True,
    validators=validators,
)


def change_env(new_env):
    """Switch the active settings environment.

    Parameters
    ----------
    new_env : str
        Environment section to activate (e.g. 'production').
    """
    settings.setenv(new_env)
    settings.reload()
