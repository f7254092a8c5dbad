"""Rendering context passed to layer renderers."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass
class LayerContext:
    """Context passed to layer renderers."""
    token_id: int
    source: Path                 # asset paths are relative to this
    images: Any                  # AssetCache of decoded RGBA images, keyed by path
    fonts: Any                   # AssetCache of fonts, keyed by (path, pixel height)
