"""Thread-safe asset caches shared by all tokens of a run."""

import logging
import threading
from pathlib import Path
from typing import Any, Callable

from PIL import Image, ImageFont

from ..errors import AssetError
from ..models.options import SUPPORTED_FONT_EXTENSIONS, extension, is_image_extension

logger = logging.getLogger(__name__)


class AssetCache:
    """Memoize a loader by its arguments."""

    def __init__(self, loader: Callable[..., Any]):
        self.loader = loader
        self._items: dict[tuple, Any] = {}
        self._lock = threading.Lock()

    def get(self, *key) -> Any:
        with self._lock:
            if key in self._items:
                return self._items[key]
        # Load outside the lock; a concurrent duplicate load is harmless
        logger.debug(f"caching {key} for next use...")
        value = self.loader(*key)
        with self._lock:
            return self._items.setdefault(key, value)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


def open_image(path: Path) -> Image.Image:
    """Decode an image file as RGBA."""
    ext = extension(path)
    if not is_image_extension(ext):
        raise AssetError(f"unsupported image format '{ext}'", str(path))
    if not Path(path).is_file():
        raise AssetError("image not found", str(path))
    try:
        with Image.open(path) as img:
            img.load()
            return img.convert("RGBA")
    except (OSError, Image.DecompressionBombError) as e:
        raise AssetError(f"unable to open image ({e})", str(path))


def open_font(path: Path, height: float) -> ImageFont.FreeTypeFont:
    """Load an outline font at a pixel height."""
    ext = extension(path)
    if ext not in SUPPORTED_FONT_EXTENSIONS:
        raise AssetError(f"unsupported font format '{ext}'", str(path))
    if not Path(path).is_file():
        raise AssetError("font not found", str(path))
    try:
        return ImageFont.truetype(str(path), height)
    except OSError as e:
        raise AssetError(f"unable to load font ({e})", str(path))
