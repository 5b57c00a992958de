"""Test scene rendering.

Tests for src.pixmap.scene:
    - Ops are applied in file order on a background-filled canvas
    - Colors are resolved against the canvas max_value
    - output.scale upscales the finalized buffer
    - write_outputs writes the pixmap (and PNG preview when configured)

Run:
    pytest tests/test_scene.py -v
"""

import pytest
from PIL import Image

from src.pixmap import codec
from src.pixmap import scene as scene_mod
from src.pixmap.buffer import RGBPixel
from src.pixmap.canvas import Canvas
from src.utils import validators


def make_scene(tmp_path, ops, **canvas):
    canvas_cfg = {"width": 4, "height": 4, "background": "black"}
    canvas_cfg.update(canvas)
    return validators.SceneV1(
        canvas=canvas_cfg,
        ops=ops,
        output={"ppm": str(tmp_path / "out.ppm"), "png": str(tmp_path / "out.png")},
    )


def test_empty_scene_is_background(tmp_path):
    buf = scene_mod.render_scene(make_scene(tmp_path, [], background="#102030"))
    assert buf.shape == (4, 4)
    assert set(buf) == {RGBPixel(16, 32, 48)}


def test_ops_apply_in_order(tmp_path):
    ops = [
        {"op": "fill", "color": "white"},
        {"op": "rect", "x": 0, "y": 0, "w": 2, "h": 2, "color": "red"},
        {"op": "pixel", "x": 1, "y": 1, "color": [0, 0, 255]},
    ]
    buf = scene_mod.render_scene(make_scene(tmp_path, ops))
    assert buf.get(0, 0) == (255, 0, 0)
    assert buf.get(1, 1) == (0, 0, 255)
    assert buf.get(3, 3) == (255, 255, 255)


def test_colors_resolved_against_max_value(tmp_path):
    ops = [{"op": "gradient", "kind": "horizontal", "from": "black", "to": "white"}]
    buf = scene_mod.render_scene(make_scene(tmp_path, ops, width=2, height=1, max_value=65535))
    assert buf.max_value == 65535
    assert buf.get(0, 1) == (65535, 65535, 65535)


def test_every_op_kind_renders(tmp_path):
    ops = [
        {"op": "checkerboard", "cell_size": 1, "colors": ["black", "white"]},
        {"op": "gradient", "kind": "radial", "from": "yellow", "to": "blue"},
        {"op": "border", "x": 0, "y": 0, "w": 4, "h": 4, "color": "gray"},
        {"op": "ellipse", "cx": 2, "cy": 2, "rx": 1, "ry": 0, "color": "cyan"},
        {"op": "circle", "cx": 0, "cy": 3, "radius": 0, "color": "magenta"},
        {"op": "line", "x1": 3, "y1": 0, "x2": 3, "y2": 3, "color": "green"},
    ]
    buf = scene_mod.render_scene(make_scene(tmp_path, ops))
    assert buf.get(0, 0) == (128, 128, 128)
    assert buf.get(2, 1) == (0, 255, 255)
    assert buf.get(3, 0) == (255, 0, 255)
    assert buf.get(1, 3) == (0, 255, 0)


def test_output_scale(tmp_path):
    scene = make_scene(tmp_path, [{"op": "pixel", "x": 0, "y": 0, "color": "red"}])
    scene.output.scale = 3
    buf = scene_mod.render_scene(scene)
    assert buf.shape == (12, 12)
    assert buf.get(2, 2) == (255, 0, 0)
    assert buf.get(3, 3) == (0, 0, 0)


def test_apply_op_unsupported():
    with pytest.raises(TypeError):
        scene_mod.apply_op(Canvas(1, 1), object(), 255)


def test_write_outputs(tmp_path):
    scene = make_scene(tmp_path, [{"op": "fill", "color": "red"}], max_value=65535)
    buf = scene_mod.render_scene(scene)
    written = scene_mod.write_outputs(buf, scene.output)

    assert set(written) == {"ppm", "png"}
    assert codec.load(written["ppm"]) == buf
    with Image.open(written["png"]) as png:
        assert png.size == (4, 4)
        assert png.getpixel((0, 0)) == (255, 0, 0)


def test_write_outputs_ppm_only(tmp_path):
    scene = validators.SceneV1(
        canvas={"width": 1, "height": 1},
        output={"ppm": str(tmp_path / "only.ppm")},
    )
    written = scene_mod.write_outputs(scene_mod.render_scene(scene), scene.output)
    assert written == {"ppm": str(tmp_path / "only.ppm")}
    assert not (tmp_path / "only.png").exists()
