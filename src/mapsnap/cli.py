"""Command-line interface for mapsnap.

Renders static maps to PNG files using the Typer framework. Defaults come
from the Dynaconf settings (see :mod:`mapsnap.config`).
"""
import logging
import pathlib
from typing import List, Optional

import typer

from . import config
from .errors import MapsnapError
from .models import LatLngBounds, LatLng, tile_key
from .options import StaticMapOptions
from .staticmap import StaticMap
from .tilers.compositor import tile_url as format_tile_url

app = typer.Typer(add_completion=False)


def _floats(raw: str, count: int, name: str) -> List[float]:
    try:
        values = [float(v) for v in raw.split(",")]
    except ValueError:
        raise typer.BadParameter(f"{name} must be {count} comma separated numbers")
    if len(values) != count:
        raise typer.BadParameter(f"{name} must be {count} comma separated numbers")
    return values


def parse_extent(raw: Optional[str]) -> Optional[LatLngBounds]:
    """Parse ``minlat,minlng,maxlat,maxlng``."""
    if raw is None:
        return None
    lat1, lng1, lat2, lng2 = _floats(raw, 4, "extent")
    return LatLngBounds(min=LatLng(lat1, lng1), max=LatLng(lat2, lng2))


def parse_latlng(raw: str) -> LatLng:
    """Parse ``lat,lng``."""
    lat, lng = _floats(raw, 2, "marker")
    return LatLng(lat, lng)


@app.callback()
def callback():
    """
    Render static slippy map images with overlays.
    """


@app.command()
def render(
    output: pathlib.Path = typer.Argument(..., help="PNG file to write."),
    extent: Optional[str] = typer.Option(None, help="minlat,minlng,maxlat,maxlng"),
    width: Optional[int] = typer.Option(None, help="Image width in pixels."),
    height: Optional[int] = typer.Option(None, help="Image height in pixels."),
    padding: Optional[float] = typer.Option(None, help="Padding on all sides in pixels."),
    tile_url: Optional[str] = typer.Option(None, help="Tile URL template with {z}, {x}, {y}."),
    tile_cache: Optional[str] = typer.Option(None, help="Tile cache directory."),
    grayscale: Optional[bool] = typer.Option(None, "--grayscale/--no-grayscale"),
    scaling: Optional[bool] = typer.Option(None, "--scaling/--no-scaling"),
    scale_bar: Optional[str] = typer.Option(None, help="Add a scale bar: metric or imperial."),
    marker: List[str] = typer.Option([], help="lat,lng of a circle marker (repeatable)."),
    env: str = typer.Option("DEFAULT", help="Settings environment."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Render a map and write it as PNG."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    if env != "DEFAULT":
        config.change_env(env)
    options = StaticMapOptions.from_settings(
        extent=parse_extent(extent), width=width, height=height, padding=padding,
        tile_url=tile_url, tile_cache=tile_cache, grayscale=grayscale, scaling=scaling)
    smap = StaticMap(options)
    for raw in marker:
        smap.add_circle(parse_latlng(raw), stroke="red", fill="rgba(255,0,0,0.3)")
    if scale_bar is not None:
        smap.add_scale(units=scale_bar)
    try:
        data = smap.render_to_buffer()
    except MapsnapError as err:
        typer.echo(f"Error: {err}", err=True)
        raise typer.Exit(code=1)
    output.write_bytes(data)
    typer.echo(f"Wrote {output} ({options.width}x{options.height})")


@app.command("tile-url")
def tile_url(
    z: int = typer.Argument(...),
    x: int = typer.Argument(...),
    y: int = typer.Argument(...),
    template: Optional[str] = typer.Option(None, "--tile-url", help="Tile URL template."),
):
    """Print the URL of a single tile."""
    options = StaticMapOptions.from_settings(tile_url=template)
    typer.echo(format_tile_url(options.tile_url, tile_key(z, x, y)))


if __name__ == "__main__":
    app()
