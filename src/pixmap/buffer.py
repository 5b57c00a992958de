"""Immutable RGB pixel buffer.

PixelBuffer is the value type every other component produces or consumes:
    - Codec decodes text into buffers and encodes them back
    - Canvas finalizes its staging array into a buffer
    - Compositor maps buffers to new buffers

Invariants (checked once, in the constructor):
    - len(pixels) == width * height
    - 1 <= max_value <= 65535
    - every channel is in [0, 65535]
    - Pixels are row-major: index = row * width + col

Channel values are NOT checked against max_value here; that bound is
enforced at text-decode time only. Programmatic callers are trusted.

Usage:
    from src.pixmap.buffer import PixelBuffer, RGBPixel

    red = PixelBuffer.solid(4, 2, RGBPixel(255, 0, 0))
    px = red.get(1, 3)
    marked = red.set(0, 0, RGBPixel(0, 0, 0))  # new buffer, red unchanged
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, NamedTuple, Tuple

import numpy as np

from .errors import PixelIndexError, RangeError, ShapeError

MAX_CHANNEL = 65535
DEFAULT_MAX_VALUE = 255


class RGBPixel(NamedTuple):
    """One pixel: three unsigned channel values."""

    r: int
    g: int
    b: int


@dataclass(frozen=True)
class PixelBuffer:
    """Fixed-size, row-major, immutable array of RGB pixels.

    Attributes
    ----------
    width : int
        Number of columns
    height : int
        Number of rows
    max_value : int
        Declared channel ceiling, 1..65535
    pixels : tuple of RGBPixel
        Row-major pixel sequence of length width * height
    """

    width: int
    height: int
    max_value: int
    pixels: Tuple[RGBPixel, ...]

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ShapeError(
                f"Dimensions must be non-negative, got {self.width}x{self.height}"
            )
        if not (1 <= self.max_value <= MAX_CHANNEL):
            raise RangeError(
                f"max_value must be in [1, {MAX_CHANNEL}], got {self.max_value}"
            )

        pixels = tuple(RGBPixel(*p) for p in self.pixels)
        expected = self.width * self.height
        if len(pixels) != expected:
            raise ShapeError(
                f"Expected {expected} pixels for {self.width}x{self.height}, "
                f"got {len(pixels)}"
            )
        for i, p in enumerate(pixels):
            if min(p) < 0 or max(p) > MAX_CHANNEL:
                raise RangeError(
                    f"Pixel {i} channels must be in [0, {MAX_CHANNEL}], got {tuple(p)}"
                )
        object.__setattr__(self, 'pixels', pixels)

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def solid(
        cls,
        width: int,
        height: int,
        pixel: Iterable[int],
        max_value: int = DEFAULT_MAX_VALUE
    ) -> "PixelBuffer":
        """Build a buffer filled with a single color."""
        px = RGBPixel(*pixel)
        return cls(width, height, max_value, (px,) * (width * height))

    @classmethod
    def from_array(cls, arr: np.ndarray, max_value: int = DEFAULT_MAX_VALUE) -> "PixelBuffer":
        """Build a buffer from an (H, W, 3) integer array.

        Parameters
        ----------
        arr : np.ndarray
            Integer array, shape (H, W, 3)
        max_value : int
            Declared channel ceiling, default 255

        Returns
        -------
        PixelBuffer
            New buffer with the array's pixels in row-major order

        Raises
        ------
        ShapeError
            If the array is not (H, W, 3)
        """
        arr = np.asarray(arr)
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ShapeError(f"Expected array of shape (H, W, 3), got {arr.shape}")
        height, width = arr.shape[:2]
        flat = arr.reshape(-1, 3).tolist()
        return cls(width, height, max_value, tuple(RGBPixel(*p) for p in flat))

    # =========================================================================
    # Accessors
    # =========================================================================

    def _index(self, row: int, col: int) -> int:
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise PixelIndexError(
                f"({row}, {col}) out of bounds for {self.width}x{self.height} buffer"
            )
        return row * self.width + col

    def get(self, row: int, col: int) -> RGBPixel:
        """Return the pixel at (row, col). Raises PixelIndexError if out of bounds."""
        return self.pixels[self._index(row, col)]

    def set(self, row: int, col: int, pixel: Iterable[int]) -> "PixelBuffer":
        """Return a copy with (row, col) replaced. Raises PixelIndexError if out of bounds."""
        idx = self._index(row, col)
        pixels = list(self.pixels)
        pixels[idx] = RGBPixel(*pixel)
        return PixelBuffer(self.width, self.height, self.max_value, tuple(pixels))

    def rows(self) -> Iterator[Tuple[RGBPixel, ...]]:
        """Iterate rows top to bottom."""
        for row in range(self.height):
            start = row * self.width
            yield self.pixels[start:start + self.width]

    def __len__(self) -> int:
        return len(self.pixels)

    def __iter__(self) -> Iterator[RGBPixel]:
        return iter(self.pixels)

    @property
    def shape(self) -> Tuple[int, int]:
        """(width, height)."""
        return self.width, self.height

    # =========================================================================
    # Pixel-wise transforms
    # =========================================================================

    def map(self, f: Callable[[RGBPixel], Iterable[int]]) -> "PixelBuffer":
        """Apply ``f`` to every pixel; shape and max_value are preserved."""
        return PixelBuffer(
            self.width, self.height, self.max_value,
            tuple(RGBPixel(*f(p)) for p in self.pixels)
        )

    def map_indexed(self, f: Callable[[int, int, RGBPixel], Iterable[int]]) -> "PixelBuffer":
        """Like map(), but ``f`` also receives (row, col) of each pixel."""
        w = self.width
        return PixelBuffer(
            self.width, self.height, self.max_value,
            tuple(RGBPixel(*f(i // w, i % w, p)) for i, p in enumerate(self.pixels))
        )

    # =========================================================================
    # Export
    # =========================================================================

    def to_array(self) -> np.ndarray:
        """Export as an (H, W, 3) uint16 array (copy, read-only use)."""
        if not self.pixels:
            return np.zeros((self.height, self.width, 3), dtype=np.uint16)
        return np.array(self.pixels, dtype=np.uint16).reshape(self.height, self.width, 3)
