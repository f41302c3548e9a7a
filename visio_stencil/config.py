"""
Settings and connection point definitions for stencil generation.
"""

import json
import os
import re
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator


ENV_PREFIX = "VISIO_STENCIL_"

# Environment variable suffix -> settings field
ENV_FIELDS = {
    "MAX_DIMENSION": "max_dimension",
    "CONNECTION_POINTS": "connection_points_file",
    "CONVERT_SVG": "convert_svg",
    "CONVERTER": "converter",
    "PNG_WIDTH": "png_width",
    "VISIBLE": "visible",
    "PROG_ID": "prog_id",
    "TEMPLATE": "stencil_template",
}

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")
_ROW_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _decimal_text(value: float) -> str:
    """Plain decimal notation with full float precision (no exponent)."""
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


class ConnectionPoint(BaseModel):
    """A named connection point, positioned relative to the shape's size."""
    name: str
    x: float = Field(ge=0.0, le=1.0)
    y: float = Field(ge=0.0, le=1.0)

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("connection point name must not be empty")
        if not _ROW_NAME.match(v):
            raise ValueError(f"connection point name must be letters, digits and underscores, got {v!r}")
        return v

    def formulas(self) -> Tuple[str, str]:
        """ShapeSheet X and Y formulas for this point."""
        return f"Width*{_decimal_text(self.x)}", f"Height*{_decimal_text(self.y)}"


class LabelStyle(BaseModel):
    """How the master's text label is cased, placed and formatted."""
    case: Literal["title", "upper", "lower", "none"] = "title"
    position: Literal["below", "above", "center"] = "below"
    font_size: str = "8 pt"
    color: str = "#000000"
    bold: bool = False
    font: Optional[str] = None

    @field_validator("color")
    @classmethod
    def _check_color(cls, v: str) -> str:
        if not _HEX_COLOR.match(v):
            raise ValueError(f"label color must look like #RRGGBB, got {v!r}")
        return v if v.startswith("#") else f"#{v}"

    def color_formula(self) -> str:
        value = self.color.lstrip("#")
        r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
        return f"RGB({r},{g},{b})"


class StencilSettings(BaseModel):
    """Validated settings for a stencil run."""
    max_dimension: float = Field(default=1.0, gt=0)
    extensions: Tuple[str, ...] = (".svg", ".png")
    convert_svg: bool = False
    converter: Literal["auto", "inkscape", "rsvg-convert"] = "auto"
    png_width: int = Field(default=256, gt=0)
    png_dir: Optional[Path] = None
    connection_points_file: Optional[Path] = None
    label: LabelStyle = Field(default_factory=LabelStyle)
    visible: bool = False
    prog_id: str = "Visio.Application"
    stencil_template: Optional[Path] = None
    overwrite: bool = False

    @field_validator("extensions", mode="before")
    @classmethod
    def _normalize_extensions(cls, v: Any) -> Tuple[str, ...]:
        if isinstance(v, str):
            v = v.replace(";", ",").split(",")
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                continue
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        if not normalized:
            raise ValueError("at least one image extension is required")
        return tuple(normalized)

    @field_validator("png_dir", "connection_points_file", "stencil_template", mode="before")
    @classmethod
    def _ensure_path(cls, v: Any) -> Optional[Path]:
        if v in (None, ""):
            return None
        return Path(v).expanduser()

    def connection_points(self) -> List[ConnectionPoint]:
        if self.connection_points_file is None:
            return []
        return load_connection_points(self.connection_points_file)


def load_connection_points(path) -> List[ConnectionPoint]:
    """Load connection point definitions from a JSON file.

    The file holds either a list of ``{"name", "x", "y"}`` objects or an
    object with that list under ``"connection_points"``.

    Args:
        path: Path to the JSON definition file

    Returns:
        List of validated connection points, in file order
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Connection point file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}")

    if isinstance(data, dict):
        data = data.get("connection_points")
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of connection points")

    try:
        points = [ConnectionPoint.model_validate(item) for item in data]
    except ValidationError as e:
        raise ValueError(f"Invalid connection point in {path}: {e}")

    seen = set()
    for point in points:
        key = point.name.lower()
        if key in seen:
            raise ValueError(f"Duplicate connection point name: {point.name}")
        seen.add(key)

    return points


def _read_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def _env_values() -> Dict[str, Any]:
    values = {}
    for suffix, field in ENV_FIELDS.items():
        raw = os.environ.get(ENV_PREFIX + suffix)
        if raw is not None and raw != "":
            values[field] = raw
    return values


def load_settings(config_file: Optional[str] = None, **overrides) -> StencilSettings:
    """Build settings from defaults, a config file, the environment and overrides.

    Later sources win. Override values of None are ignored so argparse
    defaults do not mask the config file. Label overrides are given as
    ``label_<field>`` keywords.
    """
    data: Dict[str, Any] = {}
    if config_file:
        data.update(_read_config_file(Path(config_file)))
    data.update(_env_values())

    label = dict(data.get("label") or {})
    for key, value in overrides.items():
        if value is None:
            continue
        if key.startswith("label_"):
            label[key[len("label_"):]] = value
        else:
            data[key] = value
    if label:
        data["label"] = label

    try:
        return StencilSettings.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid settings: {e}")
