"""ASCII pixmap text codec.

Read direction accepts variation:
    [MAGIC]        optional, "P3"
    WIDTH HEIGHT   two non-negative integers
    [MAXVAL]       optional, 1..65535, default 255
    R G B ...      exactly WIDTH*HEIGHT triples, row-major, each 0..MAXVAL

    '#' starts a comment that runs to end of line. Any whitespace
    (including newlines) separates tokens.

Write direction is canonical:
    P3
    W H
    MAXVAL
    one line per row, channel values separated by single spaces

Round-trip: decode(encode(b)) == b for every valid buffer b.

MAXVAL disambiguation:
    After WIDTH HEIGHT, the next token is taken as MAXVAL only if it is an
    integer in 1..65535 AND at least WIDTH*HEIGHT*3 tokens follow it.
    Otherwise it is the first red channel and MAXVAL defaults to 255, so
    an out-of-range MAXVAL such as 0 surfaces as trailing data.

Usage:
    from src.pixmap import codec

    buf = codec.decode("2 1\\n255 0 0  0 0 255")
    text = codec.encode(buf)
    codec.save(buf, "outputs/red_blue.ppm")
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..utils import fs
from .buffer import DEFAULT_MAX_VALUE, MAX_CHANNEL, PixelBuffer, RGBPixel
from .errors import FormatError

logger = logging.getLogger(__name__)

MAGIC = "P3"
COMMENT = "#"
_CHANNELS = ("r", "g", "b")


def tokenize(text: str) -> List[str]:
    """Strip '#' comments per line and split on whitespace."""
    tokens: List[str] = []
    for line in text.splitlines():
        cut = line.find(COMMENT)
        if cut >= 0:
            line = line[:cut]
        tokens.extend(line.split())
    return tokens


def _parse_uint(token: str) -> Optional[int]:
    # Plain ASCII digits only: no sign, no underscores, no unicode digits
    if not (token.isascii() and token.isdigit()):
        return None
    try:
        return int(token)
    except ValueError:
        # digit strings past sys.get_int_max_str_digits()
        return None


def decode(text: str) -> PixelBuffer:
    """Parse pixmap text into a PixelBuffer.

    Parameters
    ----------
    text : str
        Raw pixmap text (comments and free whitespace allowed)

    Returns
    -------
    PixelBuffer
        Validated buffer

    Raises
    ------
    FormatError
        Missing/invalid dimensions, too few or too many channel values, or a channel that is not an integer in
        [0, max_value]
    """
    tokens = tokenize(text)
    pos = 0

    if tokens and tokens[0] == MAGIC:
        pos = 1

    if len(tokens) < pos + 2:
        raise FormatError("missing width/height")
    width = _parse_uint(tokens[pos])
    height = _parse_uint(tokens[pos + 1])
    if width is None or height is None:
        raise FormatError(
            f"missing width/height: expected two non-negative integers, "
            f"got {tokens[pos]!r} {tokens[pos + 1]!r}"
        )
    pos += 2

    needed = width * height * 3
    max_value = DEFAULT_MAX_VALUE
    explicit = False
    if pos < len(tokens):
        candidate = _parse_uint(tokens[pos])
        remaining_after = len(tokens) - pos - 1
        in_range = candidate is not None and 1 <= candidate <= MAX_CHANNEL
        if in_range and remaining_after >= needed:
            max_value = candidate
            explicit = True
            pos += 1

    data = tokens[pos:]
    if len(data) < needed:
        raise FormatError(
            f"insufficient pixel data: expected {needed} channel values, "
            f"got {len(data)} (short by {needed - len(data)})"
        )
    if len(data) > needed:
        raise FormatError(
            f"trailing data: expected {needed} channel values, "
            f"got {len(data)} ({len(data) - needed} extra)"
        )

    pixels = []
    for i in range(width * height):
        channels = []
        for c, name in enumerate(_CHANNELS):
            token = data[i * 3 + c]
            value = _parse_uint(token)
            if value is None:
                raise FormatError(
                    f"pixel {i} channel {name}: {token!r} is not a non-negative integer",
                    pixel_index=i, channel=name
                )
            if value > max_value:
                raise FormatError(
                    f"pixel {i} channel {name}: {value} exceeds max value {max_value}",
                    pixel_index=i, channel=name
                )
            channels.append(value)
        pixels.append(RGBPixel(*channels))

    source = "explicit" if explicit else "default"
    logger.debug(f"Decoded {width}x{height} pixmap (max_value={max_value}, {source})")
    return PixelBuffer(width, height, max_value, tuple(pixels))


def encode(buffer: PixelBuffer) -> str:
    """Serialize a buffer to canonical pixmap text."""
    lines = [MAGIC, f"{buffer.width} {buffer.height}", str(buffer.max_value)]
    for row in buffer.rows():
        if row:
            lines.append(" ".join(f"{p.r} {p.g} {p.b}" for p in row))
    return "\n".join(lines) + "\n"


def decode_or_die(text: str) -> PixelBuffer:
    """Decode trusted literal text, aborting the program on failure.

    Notes
    -----
    Only for literals embedded in code. Untrusted input goes through
    decode(), which raises FormatError.
    """
    try:
        return decode(text)
    except FormatError as e:
        logger.critical(f"Invalid pixmap literal: {e}")
        raise SystemExit(1) from e


def load(path: Union[str, Path]) -> PixelBuffer:
    """Read and decode a pixmap text file.

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    FormatError
        If the content is not a valid pixmap
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Pixmap file not found: {path}")
    buffer = decode(path.read_text(encoding="utf-8"))
    logger.info(f"Loaded {path} ({buffer.width}x{buffer.height})")
    return buffer


def save(buffer: PixelBuffer, path: Union[str, Path]) -> None:
    """Encode and write a buffer atomically."""
    fs.atomic_write_text(path, encode(buffer))
    logger.info(f"Saved {path} ({buffer.width}x{buffer.height})")
