"""Test the ASCII pixmap codec.

Tests for src.pixmap.codec:
    - Max value lookahead: "255" after dims is a red channel when too few
      tokens follow it
    - Explicit max value (16-bit)
    - Optional magic token, comments, free whitespace
    - Errors: missing dims, insufficient data, trailing data, bad channel,
      channel above max value, out-of-range max value (not consumed), oversized tokens
    - Canonical encoding and decode(encode(b)) == b
    - File load/save and decode_or_die
    - Importing the codec does not load pydantic

Run:
    pytest tests/test_codec.py -v
"""

import subprocess
import sys

import pytest

from src.pixmap import codec
from src.pixmap.buffer import PixelBuffer, RGBPixel
from src.pixmap.errors import FormatError


# ============================================================================
# DECODE
# ============================================================================

def test_decode_max_value_omitted_lookahead():
    """'255' is the first red channel: too few tokens follow for max+pixels."""
    buf = codec.decode("2 2\n255 0 0 0 255 0 0 0 255 255 255 0")
    assert buf.width == 2 and buf.height == 2
    assert buf.max_value == 255
    assert buf.get(0, 0) == RGBPixel(255, 0, 0)
    assert buf.get(1, 1) == RGBPixel(255, 255, 0)


def test_decode_explicit_16bit_max_value():
    buf = codec.decode("P3\n1 1\n65535\n65535 0 0")
    assert buf.max_value == 65535
    assert buf.pixels == (RGBPixel(65535, 0, 0),)


def test_decode_insufficient_data():
    with pytest.raises(FormatError, match="insufficient pixel data"):
        codec.decode("2 2\n255\n255 0 0")


def test_decode_insufficient_reports_shortfall():
    # 255 is the first red channel here: only 3 tokens follow it, 12 are needed
    with pytest.raises(FormatError, match="short by 8"):
        codec.decode("2 2\n255\n255 0 0")


def test_decode_comments_and_whitespace():
    text = "P3   # magic\n# a full comment line\n  1\t1 \n\n3 # max\n1\n2 3  # pixel\n"
    buf = codec.decode(text)
    assert buf.max_value == 3
    assert buf.pixels == (RGBPixel(1, 2, 3),)


def test_decode_without_magic():
    assert codec.decode("1 1 7 1 2 3").max_value == 7


def test_decode_comment_hides_tokens():
    # Everything after '#' on the line is dropped, including digits
    buf = codec.decode("1 1 # 99 99\n10 20 30")
    assert buf.pixels == (RGBPixel(10, 20, 30),)
    assert buf.max_value == 255


@pytest.mark.parametrize("text", ["", "P3", "P3\n4", "# only comment\n", "P3 x 2 0 0 0"])
def test_decode_missing_dimensions(text):
    with pytest.raises(FormatError, match="missing width/height"):
        codec.decode(text)


def test_decode_negative_width_rejected():
    with pytest.raises(FormatError, match="width/height"):
        codec.decode("-1 1 0 0 0")


def test_decode_trailing_data():
    with pytest.raises(FormatError, match="trailing data"):
        codec.decode("1 1\n255\n1 2 3 4")


def test_decode_channel_not_integer():
    with pytest.raises(FormatError) as exc_info:
        codec.decode("2 1\n255\n1 2 3 4 x 6")
    assert exc_info.value.pixel_index == 1
    assert exc_info.value.channel == "g"


def test_decode_channel_above_max_value():
    with pytest.raises(FormatError) as exc_info:
        codec.decode("P3 2 1 10 0 0 0 0 0 11")
    assert exc_info.value.pixel_index == 1
    assert exc_info.value.channel == "b"
    assert "exceeds max value 10" in str(exc_info.value)


def test_decode_max_value_zero_not_consumed():
    # 0 is not a valid max value, so it counts as a channel
    with pytest.raises(FormatError, match="trailing data"):
        codec.decode("1 1\n0\n0 0 0")


def test_decode_max_value_too_large_not_consumed():
    with pytest.raises(FormatError, match="trailing data"):
        codec.decode("1 1\n65536\n0 0 0")


def test_decode_zero_sized():
    buf = codec.decode("P3\n0 0\n")
    assert buf.width == 0 and buf.height == 0 and len(buf) == 0
    assert codec.decode("0 0 15").max_value == 15


def test_decode_oversized_channel_token():
    with pytest.raises(FormatError) as exc_info:
        codec.decode("1 1\n" + "9" * 5000 + " 0 0")
    assert exc_info.value.pixel_index == 0
    assert exc_info.value.channel == "r"


def test_decode_oversized_width_token():
    with pytest.raises(FormatError, match="missing width/height"):
        codec.decode("1" * 5000 + " 1 0 0 0")


def test_format_error_is_value_error():
    with pytest.raises(ValueError):
        codec.decode("nonsense")


# ============================================================================
# ENCODE
# ============================================================================

def test_encode_canonical():
    buf = PixelBuffer(2, 2, 255, [(1, 2, 3), (4, 5, 6), (7, 8, 9), (10, 11, 12)])
    assert codec.encode(buf) == "P3\n2 2\n255\n1 2 3 4 5 6\n7 8 9 10 11 12\n"


def test_encode_has_no_comments():
    text = codec.encode(PixelBuffer.solid(3, 3, (1, 1, 1)))
    assert "#" not in text


@pytest.mark.parametrize("buf", [
    PixelBuffer.solid(1, 1, (0, 0, 0)),
    PixelBuffer.solid(3, 2, (255, 255, 255)),
    PixelBuffer.solid(2, 2, (1, 0, 1), max_value=1),
    PixelBuffer.solid(4, 1, (65535, 0, 12345), max_value=65535),
    PixelBuffer.solid(5, 4, (0, 0, 0)).map_indexed(lambda r, c, p: (r * 10, c * 10, r + c)),
    PixelBuffer(0, 0, 255, []),
    PixelBuffer(0, 3, 42, []),
])
def test_roundtrip(buf):
    assert codec.decode(codec.encode(buf)) == buf


def test_roundtrip_first_channel_equals_max():
    """Encoder output is never ambiguous, even if pixel 0 looks like a max value."""
    buf = PixelBuffer(1, 1, 100, [(100, 100, 100)])
    assert codec.decode(codec.encode(buf)) == buf


# ============================================================================
# FILES / WRAPPERS
# ============================================================================

def test_save_and_load(tmp_path):
    buf = PixelBuffer.solid(2, 3, (5, 6, 7))
    path = tmp_path / "nested" / "img.ppm"
    codec.save(buf, path)
    assert path.read_text().startswith("P3\n2 3\n255\n")
    assert codec.load(path) == buf


def test_load_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        codec.load(tmp_path / "missing.ppm")


def test_decode_or_die_ok():
    assert codec.decode_or_die("1 1 1 2 3").pixels == (RGBPixel(1, 2, 3),)


def test_decode_or_die_aborts():
    with pytest.raises(SystemExit) as exc_info:
        codec.decode_or_die("1 1 1 2")
    assert exc_info.value.code == 1


def test_decode_or_die_oversized_token_aborts():
    with pytest.raises(SystemExit) as exc_info:
        codec.decode_or_die("1 " + "1" * 5000 + " 0 0 0")
    assert exc_info.value.code == 1


def test_tokenize():
    assert codec.tokenize("a b # c d\n e\t#f\n\ng") == ["a", "b", "e", "g"]


def test_codec_import_does_not_load_pydantic(project_root):
    code = "import sys; import src.pixmap.codec; print('pydantic' in sys.modules)"
    result = subprocess.run(
        [sys.executable, "-c", code], cwd=project_root, capture_output=True, text=True, check=True
    )
    assert result.stdout.strip() == "False"
