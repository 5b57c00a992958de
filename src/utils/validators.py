"""YAML schema validation and config loading.

Provides centralized validation for scene files using pydantic:
    - Scene schema (scene.v1): canvas size/depth/background, an ordered
      list of drawing ops, output paths, logging settings

Fail fast with actionable messages (offending key, expected range) before
any drawing happens.

Colors may be written as [r, g, b], "#rrggbb" or a palette name
(see src.utils.color.PALETTE); explicit channels are checked against the
canvas max_value.

Example scene.yaml:
    schema: scene.v1
    canvas: {width: 32, height: 32, max_value: 255, background: white}
    ops:
      - {op: gradient, kind: radial, from: yellow, to: "#202020"}
      - {op: circle, cx: 16, cy: 16, radius: 6, color: [255, 0, 0]}
    output: {ppm: outputs/sun.ppm, png: outputs/sun.png, scale: 4}

Usage:
    from src.utils import validators
    scene = validators.load_scene("scene.yaml")
"""

from pathlib import Path
from typing import Annotated, List, Literal, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .color import parse_color

ColorValue = Union[str, Tuple[int, int, int]]


# ============================================================================
# CANVAS / OUTPUT / LOGGING
# ============================================================================

class CanvasSpec(BaseModel):
    """Canvas dimensions, channel depth and background."""
    width: int = Field(..., ge=0, description="Columns")
    height: int = Field(..., ge=0, description="Rows")
    max_value: int = Field(255, ge=1, le=65535, description="Channel ceiling")
    background: ColorValue = Field("black", description="Initial fill color")


class OutputSpec(BaseModel):
    """Where to write the rendered image."""
    ppm: str = Field(..., description="Pixmap text output path")
    png: Optional[str] = Field(None, description="Optional 8-bit PNG preview path")
    scale: int = Field(1, ge=1, le=64, description="Nearest-neighbor upscale factor")

    @field_validator('ppm')
    @classmethod
    def validate_ppm_suffix(cls, v: str) -> str:
        if not v.endswith(".ppm"):
            raise ValueError(f"ppm output must end with .ppm, got {v}")
        return v


class LoggingSpec(BaseModel):
    """Logging settings applied by the render CLI."""
    model_config = ConfigDict(populate_by_name=True)

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = None
    json_lines: bool = Field(False, alias="json", description="JSON lines in log file")


# ============================================================================
# DRAWING OPS
# ============================================================================

class _Op(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='forbid')

    def colors(self) -> List[ColorValue]:
        return [self.color]


class FillOp(_Op):
    op: Literal["fill"]
    color: ColorValue


class PixelOp(_Op):
    op: Literal["pixel"]
    x: int
    y: int
    color: ColorValue


class RectOp(_Op):
    op: Literal["rect"]
    x: int
    y: int
    w: int = Field(..., ge=0)
    h: int = Field(..., ge=0)
    color: ColorValue


class BorderOp(_Op):
    op: Literal["border"]
    x: int
    y: int
    w: int = Field(..., ge=0)
    h: int = Field(..., ge=0)
    thickness: int = Field(1, ge=1)
    color: ColorValue


class CircleOp(_Op):
    op: Literal["circle"]
    cx: int
    cy: int
    radius: int = Field(..., ge=0)
    color: ColorValue


class EllipseOp(_Op):
    op: Literal["ellipse"]
    cx: int
    cy: int
    rx: int = Field(..., ge=0)
    ry: int = Field(..., ge=0)
    color: ColorValue


class LineOp(_Op):
    op: Literal["line"]
    x1: int
    y1: int
    x2: int
    y2: int
    color: ColorValue


class GradientOp(_Op):
    op: Literal["gradient"]
    kind: Literal["horizontal", "vertical", "diagonal", "radial"]
    from_color: ColorValue = Field(..., alias="from")
    to_color: ColorValue = Field(..., alias="to")

    def colors(self) -> List[ColorValue]:
        return [self.from_color, self.to_color]


class CheckerboardOp(_Op):
    op: Literal["checkerboard"]
    cell_size: int = Field(..., ge=1)
    colors_: Tuple[ColorValue, ColorValue] = Field(..., alias="colors")

    def colors(self) -> List[ColorValue]:
        return list(self.colors_)


DrawOp = Annotated[
    Union[FillOp, PixelOp, RectOp, BorderOp, CircleOp, EllipseOp,
          LineOp, GradientOp, CheckerboardOp],
    Field(discriminator="op")
]


# ============================================================================
# SCENE V1
# ============================================================================

class SceneV1(BaseModel):
    """Scene schema v1 (canvas + ordered ops + outputs)."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("scene.v1", alias="schema", description="Schema version")
    canvas: CanvasSpec
    ops: List[DrawOp] = Field(default_factory=list, description="Drawing ops, applied in order")
    output: OutputSpec
    logging: LoggingSpec = Field(default_factory=LoggingSpec)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "scene.v1":
            raise ValueError(f"Expected schema 'scene.v1', got '{v}'")
        return v

    @model_validator(mode='after')
    def validate_colors(self) -> 'SceneV1':
        """Every color must parse within the canvas max_value."""
        max_value = self.canvas.max_value
        parse_color(self.canvas.background, max_value)
        for i, op in enumerate(self.ops):
            for c in op.colors():
                try:
                    parse_color(c, max_value)
                except ValueError as e:
                    raise ValueError(f"ops[{i}] ({op.op}): {e}") from e
        return self


# ============================================================================
# PUBLIC API
# ============================================================================

def load_scene(path: Union[str, Path]) -> SceneV1:
    """Load and validate a scene file from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to scene.v1 YAML file

    Returns
    -------
    SceneV1
        Validated scene

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scene file not found: {path}")

    try:
        data = fs.load_yaml(path)
    except yaml.YAMLError as e:
        raise ValueError(f"Scene validation failed at {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Scene validation failed at {path}: expected a mapping at top level")
    try:
        return SceneV1(**data)
    except ValueError as e:
        raise ValueError(f"Scene validation failed at {path}: {e}") from e
