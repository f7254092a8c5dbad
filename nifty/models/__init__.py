"""Data models."""

from .config import Attribute, Configuration, load_config, parse_config, validate_assets
from .metadata import Metadata, Trait
from .options import (
    AudioOption,
    Color,
    ColorOption,
    ImageOption,
    NoneOption,
    Option,
    OptionKind,
    TextOption,
)
from .token import Artifact, Selection, Token

__all__ = [
    "Artifact",
    "Attribute",
    "AudioOption",
    "Color",
    "ColorOption",
    "Configuration",
    "ImageOption",
    "Metadata",
    "NoneOption",
    "Option",
    "OptionKind",
    "Selection",
    "TextOption",
    "Token",
    "Trait",
    "load_config",
    "parse_config",
    "validate_assets",
]
