"""Pure buffer-to-buffer compositing operations.

Every function takes PixelBuffers and returns a NEW PixelBuffer; inputs are
never modified.

Provides:
    - blend: per-channel integer mean of two same-shape buffers
    - invert: max_value - channel
    - flip_horizontal / flip_vertical: mirror columns / rows
    - beside / above: concatenate, padding the short side with BACKGROUND
    - tile_horizontal / tile_vertical: repeated beside / above
    - crop: clamped sub-rectangle
    - scale: nearest-neighbor integer upscale

Edge cases:
    - tile_* with n=0 and scale with factor=0 return the input unchanged
    - crop never raises for out-of-range origins; the result shrinks to fit
    - negative counts, factors and crop extents raise RangeError
    - blend raises ShapeError when shapes differ
"""

import logging

from .buffer import PixelBuffer, RGBPixel
from .errors import RangeError, ShapeError

logger = logging.getLogger(__name__)

BACKGROUND = RGBPixel(0, 0, 0)


def _require_non_negative(name: str, value: int) -> None:
    if value < 0:
        raise RangeError(f"{name} must be non-negative, got {value}")


def blend(a: PixelBuffer, b: PixelBuffer) -> PixelBuffer:
    """Average two buffers channel by channel (integer division).

    The result keeps ``a.max_value``.

    Raises
    ------
    ShapeError
        If a and b differ in width or height
    """
    if a.shape != b.shape:
        raise ShapeError(
            f"Cannot blend {a.width}x{a.height} with {b.width}x{b.height}"
        )
    pixels = tuple(
        RGBPixel((p.r + q.r) // 2, (p.g + q.g) // 2, (p.b + q.b) // 2)
        for p, q in zip(a.pixels, b.pixels)
    )
    return PixelBuffer(a.width, a.height, a.max_value, pixels)


def invert(img: PixelBuffer) -> PixelBuffer:
    m = img.max_value
    return img.map(lambda p: (m - p.r, m - p.g, m - p.b))


def flip_horizontal(img: PixelBuffer) -> PixelBuffer:
    """Mirror column order within each row."""
    pixels = tuple(p for row in img.rows() for p in reversed(row))
    return PixelBuffer(img.width, img.height, img.max_value, pixels)


def flip_vertical(img: PixelBuffer) -> PixelBuffer:
    """Mirror row order."""
    pixels = tuple(p for row in reversed(list(img.rows())) for p in row)
    return PixelBuffer(img.width, img.height, img.max_value, pixels)


def _padded_row(img: PixelBuffer, row: int, width: int) -> tuple:
    """Row ``row`` of img, right-padded with BACKGROUND to ``width``."""
    if row < img.height:
        start = row * img.width
        src = img.pixels[start:start + img.width]
    else:
        src = ()
    return src + (BACKGROUND,) * (width - len(src))


def beside(a: PixelBuffer, b: PixelBuffer) -> PixelBuffer:
    """Place b to the right of a; the shorter one is padded at the bottom."""
    height = max(a.height, b.height)
    pixels = []
    for row in range(height):
        pixels.extend(_padded_row(a, row, a.width))
        pixels.extend(_padded_row(b, row, b.width))
    return PixelBuffer(a.width + b.width, height, max(a.max_value, b.max_value), tuple(pixels))


def above(a: PixelBuffer, b: PixelBuffer) -> PixelBuffer:
    """Place a on top of b; the narrower one is padded on the right."""
    width = max(a.width, b.width)
    pixels = []
    for img in (a, b):
        for row in range(img.height):
            pixels.extend(_padded_row(img, row, width))
    return PixelBuffer(width, a.height + b.height, max(a.max_value, b.max_value), tuple(pixels))


def tile_horizontal(img: PixelBuffer, n: int) -> PixelBuffer:
    """n copies of img side by side; n=0 returns img unchanged."""
    _require_non_negative("n", n)
    result = img
    for _ in range(n - 1):
        result = beside(result, img)
    return result


def tile_vertical(img: PixelBuffer, n: int) -> PixelBuffer:
    """n copies of img stacked; n=0 returns img unchanged."""
    _require_non_negative("n", n)
    result = img
    for _ in range(n - 1):
        result = above(result, img)
    return result


def crop(img: PixelBuffer, x: int, y: int, w: int, h: int) -> PixelBuffer:
    """Cut the w x h rectangle whose top-left corner is column x, row y.

    Parameters
    ----------
    img : PixelBuffer
        Source buffer
    x, y : int
        Top-left corner (column, row), non-negative
    w, h : int
        Requested size, non-negative

    Returns
    -------
    PixelBuffer
        Buffer of size min(w, img.width - x) by min(h, img.height - y),
        clamped at zero when the origin lies outside the source

    Raises
    ------
    RangeError
        If any argument is negative
    """
    for name, value in (("x", x), ("y", y), ("w", w), ("h", h)):
        _require_non_negative(name, value)
    out_w = max(0, min(w, img.width - x))
    out_h = max(0, min(h, img.height - y))
    pixels = tuple(
        img.pixels[(y + row) * img.width + x + col]
        for row in range(out_h)
        for col in range(out_w)
    )
    if out_w < w or out_h < h:
        logger.debug(f"Crop clamped from {w}x{h} to {out_w}x{out_h}")
    return PixelBuffer(out_w, out_h, img.max_value, pixels)


def scale(img: PixelBuffer, factor: int) -> PixelBuffer:
    """Nearest-neighbor upscale: each pixel becomes a factor x factor block.

    factor=0 returns img unchanged.
    """
    _require_non_negative("factor", factor)
    if factor in (0, 1):
        return img
    pixels = []
    for row in img.rows():
        wide = tuple(p for p in row for _ in range(factor))
        for _ in range(factor):
            pixels.extend(wide)
    return PixelBuffer(img.width * factor, img.height * factor, img.max_value, tuple(pixels))
