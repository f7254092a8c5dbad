"""Attribute option variants."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import ClassVar, Union

from PIL import Image, ImageColor

SUPPORTED_AUDIO_EXTENSIONS = ("aac", "flac", "m4a", "mp3", "wav")
SUPPORTED_FONT_EXTENSIONS = ("ttf", "otf", "ttc")


class OptionKind(Enum):
    AUDIO = "audio"
    COLOR = "color"
    IMAGE = "image"
    NONE = "none"
    TEXT = "text"


@dataclass(frozen=True)
class Color:
    """Hex colour with its parsed RGBA value."""

    hex: str
    rgba: tuple[int, int, int, int]

    @staticmethod
    def parse(value: str) -> "Color":
        """Parse "#RRGGBB" or "#RRGGBBAA". Raises ValueError on anything else."""
        if not isinstance(value, str) or not value.startswith("#"):
            raise ValueError(f"expected a hex colour like '#RRGGBB', got {value!r}")
        rgba = ImageColor.getcolor(value, "RGBA")
        return Color(hex=value, rgba=rgba)

    @property
    def opensea_hex(self) -> str:
        """Six hex digits without '#' (alpha dropped)."""
        r, g, b, _ = self.rgba
        return f"{r:02X}{g:02X}{b:02X}"


@dataclass(frozen=True)
class AudioOption:
    """Audio track - no pixels, switches the token to video output."""
    kind: ClassVar[OptionKind] = OptionKind.AUDIO
    file: Path
    weight: float = 1.0


@dataclass(frozen=True)
class ColorOption:
    """Flat full-canvas colour layer."""
    kind: ClassVar[OptionKind] = OptionKind.COLOR
    color: Color
    weight: float = 1.0


@dataclass(frozen=True)
class ImageOption:
    """Raster image layer."""
    kind: ClassVar[OptionKind] = OptionKind.IMAGE
    file: Path
    weight: float = 1.0


@dataclass(frozen=True)
class NoneOption:
    """Selectable absence of a layer."""
    kind: ClassVar[OptionKind] = OptionKind.NONE
    weight: float = 1.0


@dataclass(frozen=True)
class TextOption:
    """Rendered text layer. Negative x right-aligns the text."""
    kind: ClassVar[OptionKind] = OptionKind.TEXT
    font: Path
    text: str
    height: float
    x: int = 0
    y: int = 0
    color: Color = Color("#000000", (0, 0, 0, 255))
    weight: float = 1.0


Option = Union[AudioOption, ColorOption, ImageOption, NoneOption, TextOption]


def extension(path: Path) -> str:
    return Path(path).suffix.lstrip(".").lower()


def is_image_extension(ext: str) -> bool:
    """Check an extension against Pillow's registered formats."""
    return f".{ext}" in Image.registered_extensions()


def option_for_file(path: str, weight: float = 1.0) -> Option:
    """Classify a bare file path as audio or image by its extension."""
    ext = extension(Path(path))
    if not ext:
        raise ValueError(f"no file extension on '{path}'")
    if ext in SUPPORTED_AUDIO_EXTENSIONS:
        return AudioOption(file=Path(path), weight=weight)
    if is_image_extension(ext):
        return ImageOption(file=Path(path), weight=weight)
    raise ValueError(f"file extension '{ext}' not supported")


def option_files(option: Option) -> list[Path]:
    """Asset files an option reads."""
    if isinstance(option, (AudioOption, ImageOption)):
        return [option.file]
    if isinstance(option, TextOption):
        return [option.font]
    return []
