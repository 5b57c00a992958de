"""Exception taxonomy for the pixmap core.

Every failure the core reports is one of these types:
    - FormatError: malformed or incomplete pixmap text
    - ShapeError: dimension mismatch (construction or composition)
    - RangeError: channel or max value out of bounds
    - PixelIndexError: out-of-bounds get/set on a PixelBuffer
    - CanvasStateError: drawing on a canvas after finalize()

All derive from PixmapError and from the matching builtin, so callers may
catch either ``PixmapError`` or e.g. ``ValueError`` / ``IndexError``.
"""

from typing import Optional


class PixmapError(Exception):
    """Base class for all pixmap errors."""

    pass


class FormatError(PixmapError, ValueError):
    """Raised when pixmap text cannot be decoded.

    Attributes
    ----------
    pixel_index : int, optional
        Row-major index of the offending pixel, if any
    channel : str, optional
        Offending channel name ("r", "g" or "b"), if any
    """

    def __init__(
        self,
        message: str,
        *,
        pixel_index: Optional[int] = None,
        channel: Optional[str] = None
    ):
        super().__init__(message)
        self.pixel_index = pixel_index
        self.channel = channel


class ShapeError(PixmapError, ValueError):
    """Raised when dimensions and pixel data disagree."""

    pass


class RangeError(PixmapError, ValueError):
    """Raised when a channel or max value is out of bounds."""

    pass


class PixelIndexError(PixmapError, IndexError):
    """Raised by strict accessors for out-of-bounds coordinates."""

    pass


class CanvasStateError(PixmapError, RuntimeError):
    """Raised when a primitive is invoked on a finalized canvas."""

    pass
