"""Channel rescaling and color parsing.

Provides:
    - to_8bit: project one pixel to 8-bit for display (linear rescale)
    - to_uint8_array: same projection over a whole buffer (numpy)
    - rescale_channel: value in [0, src_max] → value in [0, dst_max]
    - parse_color: [r, g, b] / "#rrggbb" / palette name → RGBPixel

Used by:
    - fs.atomic_save_image callers: PNG export of high-depth buffers
    - Scene configs: background/op colors written by hand in YAML

Invariants:
    - Projection never mutates its input
    - Rounding is half-up: floor(v * dst_max / src_max + 1/2)
    - Values above src_max saturate at dst_max
"""

from typing import Sequence, Union

import numpy as np

from ..pixmap.buffer import PixelBuffer, RGBPixel
from ..pixmap.errors import RangeError

DISPLAY_MAX = 255

# 8-bit sRGB-ish palette for config convenience; rescaled to max_value on use
PALETTE = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 255, 0),
    "blue": (0, 0, 255),
    "yellow": (255, 255, 0),
    "cyan": (0, 255, 255),
    "magenta": (255, 0, 255),
    "gray": (128, 128, 128),
}

ColorSpec = Union[str, Sequence[int]]


def rescale_channel(value: int, src_max: int, dst_max: int) -> int:
    """Rescale one channel value from [0, src_max] to [0, dst_max].

    Parameters
    ----------
    value : int
        Channel value, >= 0
    src_max : int
        Source ceiling, >= 1
    dst_max : int
        Target ceiling, >= 1

    Returns
    -------
    int
        Rescaled value, rounded half-up, saturated at dst_max
    """
    if src_max < 1:
        raise RangeError(f"src_max must be >= 1, got {src_max}")
    value = min(max(value, 0), src_max)
    return (value * dst_max * 2 + src_max) // (2 * src_max)


def to_8bit(pixel: Sequence[int], max_value: int) -> RGBPixel:
    """Project a pixel with channel ceiling ``max_value`` to 8-bit."""
    return RGBPixel(*(rescale_channel(v, max_value, DISPLAY_MAX) for v in pixel))


def to_uint8_array(buffer: PixelBuffer) -> np.ndarray:
    """Project a whole buffer to an (H, W, 3) uint8 array.

    Notes
    -----
    Vectorised equivalent of to_8bit() over every pixel; this is what PNG
    export and any display collaborator should consume.
    """
    m = buffer.max_value
    arr = np.minimum(buffer.to_array().astype(np.int64), m)
    out = (arr * DISPLAY_MAX * 2 + m) // (2 * m)
    return out.astype(np.uint8)


def parse_color(value: ColorSpec, max_value: int = DISPLAY_MAX) -> RGBPixel:
    """Parse a color from config-friendly notation.

    Parameters
    ----------
    value : str or sequence of int
        - [r, g, b]: raw channel values, each in [0, max_value]
        - "#rrggbb": 8-bit hex, rescaled to max_value
        - palette name (see PALETTE), rescaled to max_value
    max_value : int
        Target channel ceiling, default 255

    Returns
    -------
    RGBPixel
        Parsed color in [0, max_value]

    Raises
    ------
    RangeError
        If explicit channels fall outside [0, max_value]
    ValueError
        If the string is neither valid hex nor a known name
    """
    if isinstance(value, str):
        text = value.strip().lower()
        if text.startswith("#"):
            digits = text[1:]
            if len(digits) != 6:
                raise ValueError(f"Hex color must be #rrggbb, got {value!r}")
            try:
                rgb8 = tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))
            except ValueError as e:
                raise ValueError(f"Invalid hex color: {value!r}") from e
        elif text in PALETTE:
            rgb8 = PALETTE[text]
        else:
            raise ValueError(
                f"Unknown color {value!r}; use [r, g, b], #rrggbb or one of {sorted(PALETTE)}"
            )
        return RGBPixel(*(rescale_channel(c, DISPLAY_MAX, max_value) for c in rgb8))

    channels = tuple(value)
    if len(channels) != 3:
        raise ValueError(f"Color must have 3 channels, got {channels!r}")
    for c in channels:
        if not (0 <= c <= max_value):
            raise RangeError(f"Channel {c} out of range [0, {max_value}] in {channels!r}")
    return RGBPixel(*(int(c) for c in channels))
