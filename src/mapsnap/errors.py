"""Exceptions raised while resolving and rendering a map."""


class MapsnapError(Exception):
    """Base class for all mapsnap errors."""


class ExtentResolutionError(MapsnapError):
    """Raised when neither an explicit extent nor any overlay extent exists."""

    def __init__(self, message="no renderable extent"):
        super().__init__(message)


class TileFetchError(MapsnapError):
    """Raised when a tile server answers with a non-200 status."""

    def __init__(self, url, status):
        self.url = url
        self.status = status
        super().__init__(f"Server status {status} for request '{url}'")


class UnknownOverlayError(MapsnapError):
    """Raised when an overlay of an unrecognized kind reaches the renderer."""

    def __init__(self, overlay):
        self.overlay = overlay
        kind = getattr(overlay, "kind", type(overlay).__name__)
        super().__init__(f"Unknown overlay kind: {kind!r}")
