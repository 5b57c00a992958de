"""Mutable drawing surface that finalizes into an immutable PixelBuffer.

Lifecycle:
    Canvas(...)  → drawing (every cell preset to background)
    .finalize()  → PixelBuffer snapshot; canvas is marked finalized

Any drawing primitive called after finalize() raises CanvasStateError.
finalize() itself may be called again and returns an equal snapshot.

Coordinates:
    x is the column, y is the row, origin top-left.

Clipping:
    Every primitive silently discards the part of a shape that falls
    outside the canvas, negative coordinates included. Only get_pixel()
    is strict (PixelIndexError), matching PixelBuffer.get().

Gradients:
    Per-cell parameter t in [0, 255]; output channel is
    (c1 * (255 - t) + c2 * t) // 255. t is 0 everywhere when the governing
    length is <= 1, so single-row/column canvases never divide by zero.

Usage:
    from src.pixmap.canvas import Canvas

    img = (Canvas(16, 16, background=(255, 255, 255))
           .circle(8, 8, 5, (255, 0, 0))
           .line(0, 0, 15, 15, (0, 0, 0))
           .finalize())
"""

import logging
from typing import Iterable, Tuple

import numpy as np

from .buffer import DEFAULT_MAX_VALUE, MAX_CHANNEL, PixelBuffer, RGBPixel
from .errors import CanvasStateError, PixelIndexError, RangeError, ShapeError

logger = logging.getLogger(__name__)

Color = Iterable[int]

_T_MAX = 255


def _as_color(color: Color) -> np.ndarray:
    c = np.asarray(tuple(color), dtype=np.int64)
    if c.shape != (3,):
        raise ShapeError(f"Color must have 3 channels, got {tuple(color)!r}")
    if c.min() < 0 or c.max() > MAX_CHANNEL:
        raise RangeError(f"Color channels must be in [0, {MAX_CHANNEL}], got {tuple(c.tolist())}")
    return c


class Canvas:
    """Drawing surface backed by a private (H, W, 3) int64 array.

    Attributes
    ----------
    width : int
        Number of columns
    height : int
        Number of rows
    max_value : int
        Channel ceiling carried into the finalized buffer
    """

    def __init__(
        self,
        width: int,
        height: int,
        max_value: int = DEFAULT_MAX_VALUE,
        background: Color = (0, 0, 0)
    ):
        if width < 0 or height < 0:
            raise ShapeError(f"Dimensions must be non-negative, got {width}x{height}")
        if not (1 <= max_value <= MAX_CHANNEL):
            raise RangeError(f"max_value must be in [1, {MAX_CHANNEL}], got {max_value}")

        self.width = width
        self.height = height
        self.max_value = max_value
        self._pixels = np.empty((height, width, 3), dtype=np.int64)
        self._pixels[:, :] = _as_color(background)
        self._finalized = False

    @classmethod
    def create(
        cls,
        width: int,
        height: int,
        max_value: int = DEFAULT_MAX_VALUE,
        background: Color = (0, 0, 0)
    ) -> "Canvas":
        return cls(width, height, max_value, background)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def _check_drawing(self) -> None:
        if self._finalized:
            raise CanvasStateError("Canvas already finalized; create a new canvas to draw")

    def _clip(self, x0: int, y0: int, x1: int, y1: int) -> Tuple[int, int, int, int]:
        """Clamp the half-open box [x0, x1) x [y0, y1) to the canvas."""
        return (max(x0, 0), max(y0, 0), min(x1, self.width), min(y1, self.height))

    def _fill_box(self, x0: int, y0: int, x1: int, y1: int, color: np.ndarray) -> None:
        x0, y0, x1, y1 = self._clip(x0, y0, x1, y1)
        if x0 < x1 and y0 < y1:
            self._pixels[y0:y1, x0:x1] = color

    # =========================================================================
    # Primitives
    # =========================================================================

    def set_pixel(self, x: int, y: int, color: Color) -> "Canvas":
        """Set one cell; off-canvas coordinates are ignored."""
        self._check_drawing()
        if 0 <= x < self.width and 0 <= y < self.height:
            self._pixels[y, x] = _as_color(color)
        return self

    def get_pixel(self, x: int, y: int) -> RGBPixel:
        """Read one cell. Raises PixelIndexError if off-canvas."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise PixelIndexError(
                f"({x}, {y}) out of bounds for {self.width}x{self.height} canvas"
            )
        return RGBPixel(*(int(v) for v in self._pixels[y, x]))

    def fill(self, color: Color) -> "Canvas":
        self._check_drawing()
        self._pixels[:, :] = _as_color(color)
        return self

    def rect(self, x: int, y: int, w: int, h: int, color: Color) -> "Canvas":
        """Fill the box [x, x+w) x [y, y+h)."""
        self._check_drawing()
        self._fill_box(x, y, x + w, y + h, _as_color(color))
        return self

    def border(self, x: int, y: int, w: int, h: int, thickness: int, color: Color) -> "Canvas":
        """Outline the box [x, x+w) x [y, y+h) with bands ``thickness`` wide."""
        self._check_drawing()
        if thickness <= 0 or w <= 0 or h <= 0:
            return self
        c = _as_color(color)
        self._fill_box(x, y, x + w, y + thickness, c)
        self._fill_box(x, y + h - thickness, x + w, y + h, c)
        self._fill_box(x, y, x + thickness, y + h, c)
        self._fill_box(x + w - thickness, y, x + w, y + h, c)
        return self

    def circle(self, cx: int, cy: int, radius: int, color: Color) -> "Canvas":
        """Fill cells with (x-cx)^2 + (y-cy)^2 <= radius^2."""
        return self.ellipse(cx, cy, radius, radius, color)

    def ellipse(self, cx: int, cy: int, rx: int, ry: int, color: Color) -> "Canvas":
        """Fill cells with dx^2*ry^2 + dy^2*rx^2 <= rx^2*ry^2."""
        self._check_drawing()
        if rx < 0 or ry < 0:
            return self
        x0, y0, x1, y1 = self._clip(cx - rx, cy - ry, cx + rx + 1, cy + ry + 1)
        if x0 >= x1 or y0 >= y1:
            return self
        ys, xs = np.ogrid[y0:y1, x0:x1]
        dx = xs - cx
        dy = ys - cy
        mask = dx * dx * ry * ry + dy * dy * rx * rx <= rx * rx * ry * ry
        self._pixels[y0:y1, x0:x1][mask] = _as_color(color)
        return self

    def line(self, x1: int, y1: int, x2: int, y2: int, color: Color) -> "Canvas":
        """Bresenham line from (x1, y1) to (x2, y2), both ends inclusive.

        Endpoints are ordered first, so line(a, b) and line(b, a) light the
        same cells.
        """
        self._check_drawing()
        c = _as_color(color)
        if (x1, y1) > (x2, y2):
            x1, y1, x2, y2 = x2, y2, x1, y1

        dx = abs(x2 - x1)
        dy = -abs(y2 - y1)
        sx = 1 if x1 < x2 else -1
        sy = 1 if y1 < y2 else -1
        err = dx + dy
        x, y = x1, y1
        while True:
            if 0 <= x < self.width and 0 <= y < self.height:
                self._pixels[y, x] = c
            if x == x2 and y == y2:
                break
            e2 = 2 * err
            if e2 >= dy:
                err += dy
                x += sx
            if e2 <= dx:
                err += dx
                y += sy
        return self

    def checkerboard(self, cell_size: int, c1: Color, c2: Color) -> "Canvas":
        """Alternate c1/c2 in cell_size squares; c1 where (x//s + y//s) is even."""
        self._check_drawing()
        if cell_size < 1:
            raise RangeError(f"cell_size must be >= 1, got {cell_size}")
        ys, xs = np.ogrid[0:self.height, 0:self.width]
        even = ((xs // cell_size + ys // cell_size) % 2) == 0
        self._pixels[even] = _as_color(c1)
        self._pixels[~even] = _as_color(c2)
        return self

    # =========================================================================
    # Gradients
    # =========================================================================

    def _apply_gradient(self, t: np.ndarray, c1: Color, c2: Color) -> "Canvas":
        a = _as_color(c1)
        b = _as_color(c2)
        t = np.broadcast_to(t, (self.height, self.width))[..., None]
        self._pixels[:, :] = (a * (_T_MAX - t) + b * t) // _T_MAX
        return self

    def horiz_gradient(self, c1: Color, c2: Color) -> "Canvas":
        """c1 at the left column to c2 at the right column."""
        self._check_drawing()
        xs = np.arange(self.width, dtype=np.int64)[None, :]
        t = xs * _T_MAX // (self.width - 1) if self.width > 1 else np.zeros_like(xs)
        return self._apply_gradient(t, c1, c2)

    def vert_gradient(self, c1: Color, c2: Color) -> "Canvas":
        """c1 at the top row to c2 at the bottom row."""
        self._check_drawing()
        ys = np.arange(self.height, dtype=np.int64)[:, None]
        t = ys * _T_MAX // (self.height - 1) if self.height > 1 else np.zeros_like(ys)
        return self._apply_gradient(t, c1, c2)

    def diag_gradient(self, c1: Color, c2: Color) -> "Canvas":
        """c1 at the top-left corner to c2 at the bottom-right corner."""
        self._check_drawing()
        ys, xs = np.ogrid[0:self.height, 0:self.width]
        span = self.width + self.height - 2
        t = (xs + ys) * _T_MAX // span if span > 0 else np.zeros((1, 1), dtype=np.int64)
        return self._apply_gradient(t, c1, c2)

    def radial_gradient(self, c1: Color, c2: Color) -> "Canvas":
        """c1 at the center to c2 at the corners (Euclidean distance).

        t is scaled by the center-to-corner distance, so the corners reach
        exactly 255 and no cell exceeds it.
        """
        self._check_drawing()
        cx = (self.width - 1) / 2.0
        cy = (self.height - 1) / 2.0
        d_max = float(np.hypot(cx, cy))
        if d_max <= 0.0:
            t = np.zeros((1, 1), dtype=np.int64)
        else:
            ys, xs = np.ogrid[0:self.height, 0:self.width]
            d = np.hypot(xs - cx, ys - cy)
            t = np.minimum(np.floor(d * _T_MAX / d_max), _T_MAX).astype(np.int64)
        return self._apply_gradient(t, c1, c2)

    # =========================================================================
    # Finalize
    # =========================================================================

    def finalize(self) -> PixelBuffer:
        """Snapshot the canvas into an immutable PixelBuffer."""
        self._finalized = True
        buffer = PixelBuffer.from_array(self._pixels, self.max_value)
        logger.debug(f"Finalized {self.width}x{self.height} canvas")
        return buffer
