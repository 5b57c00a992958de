"""Render validated scene configs into PixelBuffers and output files.

Pipeline:
    SceneV1 → Canvas(width, height, max_value, background)
            → ops applied in file order
            → finalize()
            → compositor.scale(output.scale)
            → .ppm text (+ optional 8-bit .png)

Usage:
    from src.utils import validators
    from src.pixmap import scene as scene_mod

    scene = validators.load_scene("scene.yaml")
    buf = scene_mod.render_scene(scene)
    scene_mod.write_outputs(buf, scene.output)
"""

import logging
from typing import Dict

from ..utils import color, fs
from ..utils.validators import (
    BorderOp,
    CheckerboardOp,
    CircleOp,
    EllipseOp,
    FillOp,
    GradientOp,
    LineOp,
    OutputSpec,
    PixelOp,
    RectOp,
    SceneV1,
)
from . import codec, compositor
from .buffer import PixelBuffer
from .canvas import Canvas

logger = logging.getLogger(__name__)

_GRADIENTS = {
    "horizontal": Canvas.horiz_gradient,
    "vertical": Canvas.vert_gradient,
    "diagonal": Canvas.diag_gradient,
    "radial": Canvas.radial_gradient,
}


def apply_op(canvas: Canvas, op, max_value: int) -> Canvas:
    """Apply one validated drawing op to the canvas."""
    def c(value):
        return color.parse_color(value, max_value)

    if isinstance(op, FillOp):
        return canvas.fill(c(op.color))
    if isinstance(op, PixelOp):
        return canvas.set_pixel(op.x, op.y, c(op.color))
    if isinstance(op, RectOp):
        return canvas.rect(op.x, op.y, op.w, op.h, c(op.color))
    if isinstance(op, BorderOp):
        return canvas.border(op.x, op.y, op.w, op.h, op.thickness, c(op.color))
    if isinstance(op, CircleOp):
        return canvas.circle(op.cx, op.cy, op.radius, c(op.color))
    if isinstance(op, EllipseOp):
        return canvas.ellipse(op.cx, op.cy, op.rx, op.ry, c(op.color))
    if isinstance(op, LineOp):
        return canvas.line(op.x1, op.y1, op.x2, op.y2, c(op.color))
    if isinstance(op, GradientOp):
        return _GRADIENTS[op.kind](canvas, c(op.from_color), c(op.to_color))
    if isinstance(op, CheckerboardOp):
        first, second = op.colors()
        return canvas.checkerboard(op.cell_size, c(first), c(second))
    raise TypeError(f"Unsupported op: {type(op).__name__}")


def render_scene(scene: SceneV1) -> PixelBuffer:
    """Draw every op of the scene and return the (scaled) buffer."""
    cfg = scene.canvas
    canvas = Canvas(
        cfg.width, cfg.height, cfg.max_value,
        color.parse_color(cfg.background, cfg.max_value)
    )
    for i, op in enumerate(scene.ops):
        logger.debug(f"op {i}: {op.op}")
        apply_op(canvas, op, cfg.max_value)

    buffer = compositor.scale(canvas.finalize(), scene.output.scale)
    logger.info(
        f"Rendered {len(scene.ops)} ops on {cfg.width}x{cfg.height} canvas "
        f"→ {buffer.width}x{buffer.height}"
    )
    return buffer


def write_outputs(buffer: PixelBuffer, output: OutputSpec) -> Dict[str, str]:
    """Write the .ppm (and .png if configured); return {kind: path}."""
    written = {}
    codec.save(buffer, output.ppm)
    written["ppm"] = output.ppm
    if output.png:
        fs.atomic_save_image(color.to_uint8_array(buffer), output.png)
        logger.info(f"Saved PNG preview {output.png}")
        written["png"] = output.png
    return written
