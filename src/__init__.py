"""Pixmap Canvas: in-memory raster images, ASCII pixmap codec, procedural drawing.

Architecture layers (strict one-way dependency):
    scripts/ → src/pixmap/{scene} → src/pixmap/{canvas,compositor,codec} → src/pixmap/buffer
    src/utils/ (logging, fs, config, color) is shared by every layer

Key invariants:
    - PixelBuffer is immutable; len(pixels) == width * height always
    - 1 <= max_value <= 65535
    - Canvas is the only mutable surface and snapshots via finalize()
    - Single-threaded; no I/O inside the core except explicit load/save
"""

__version__ = "1.0.0"
