"""Pixmap core: buffer model, text codec, compositor, drawing canvas.

Layers:

    Canvas        mutable drawing surface → finalize() → PixelBuffer
    compositor    PixelBuffer(s) → new PixelBuffer
    codec         text ⇄ PixelBuffer
    PixelBuffer   immutable row-major RGB pixels (+ width, height, max_value)

Scene rendering (src.pixmap.scene) sits on top and is imported explicitly.

Quick Start
-----------
    from src.pixmap import Canvas, codec, compositor

    img = Canvas(8, 8, background=(255, 255, 255)).circle(4, 4, 3, (255, 0, 0)).finalize()
    print(codec.encode(compositor.scale(img, 2)))
"""

from .errors import (
    CanvasStateError,
    FormatError,
    PixelIndexError,
    PixmapError,
    RangeError,
    ShapeError,
)
from .buffer import MAX_CHANNEL, PixelBuffer, RGBPixel
from . import codec
from . import compositor
from .canvas import Canvas
from .codec import decode, encode

__all__ = [
    # Model
    "PixelBuffer",
    "RGBPixel",
    "MAX_CHANNEL",
    # Codec
    "codec",
    "decode",
    "encode",
    # Drawing
    "Canvas",
    "compositor",
    # Errors
    "PixmapError",
    "FormatError",
    "ShapeError",
    "RangeError",
    "PixelIndexError",
    "CanvasStateError",
]
