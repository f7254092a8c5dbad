"""Collection configuration - parsed once, immutable afterwards."""

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..errors import ConfigError
from .options import (
    AudioOption,
    Color,
    ColorOption,
    ImageOption,
    NoneOption,
    Option,
    TextOption,
    SUPPORTED_AUDIO_EXTENSIONS,
    SUPPORTED_FONT_EXTENSIONS,
    extension,
    is_image_extension,
    option_for_file,
)

logger = logging.getLogger(__name__)

ID_PLACEHOLDER = "{id}"


@dataclass(frozen=True)
class Attribute:
    """One layer of the collection. Declaration order is z-order: first is top-most."""
    name: str
    options: dict[str, Option]
    include_in_metadata: bool = True

    def selectable(self) -> dict[str, Option]:
        """Options with weight > 0, in declaration order."""
        return {name: option for name, option in self.options.items() if option.weight > 0}


@dataclass(frozen=True)
class Configuration:
    """Root of the collection configuration."""
    name_template: str
    description: str
    supply: int
    attributes: tuple[Attribute, ...]
    start_token: int = 1
    background_color: Color | None = None
    external_url_template: str | None = None
    width: int | None = None
    height: int | None = None
    unique: bool = False

    @property
    def token_ids(self) -> range:
        return range(self.start_token, self.start_token + self.supply)

    @property
    def canvas_size(self) -> tuple[int, int] | None:
        if self.width is None:
            return None
        return (self.width, self.height)

    def combinations(self) -> int:
        """Number of distinct selectable attribute combinations."""
        return math.prod(len(a.selectable()) for a in self.attributes)

    def has_audio(self) -> bool:
        return any(
            isinstance(option, AudioOption)
            for attribute in self.attributes
            for option in attribute.options.values()
        )


def load_config(path: Path) -> Configuration:
    """Load and parse a configuration document from a JSON file."""
    path = Path(path)
    logger.debug(f"loading configuration from '{path}'")
    try:
        with open(path, encoding="utf-8") as f:
            document = json.load(f, object_pairs_hook=_reject_duplicate_keys)
    except FileNotFoundError:
        raise ConfigError(f"configuration file not found: {path}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON in {path}: {e}")
    return parse_config(document)


def _reject_duplicate_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise ConfigError(f"duplicate key '{key}'")
        result[key] = value
    return result


def parse_config(document: dict[str, Any]) -> Configuration:
    """Build a Configuration from a decoded JSON document."""
    if not isinstance(document, dict):
        raise ConfigError("configuration must be a JSON object")

    supply = _require(document, "supply", int)
    if supply < 1:
        raise ConfigError(f"must be a positive integer, got {supply}", field="supply")

    start_token = _optional(document, "start_token", int, 1)
    if start_token < 0:
        raise ConfigError(f"must not be negative, got {start_token}", field="start_token")

    width = _optional(document, "width", int, None)
    height = _optional(document, "height", int, None)
    if (width is None) != (height is None):
        raise ConfigError("width and height must be given together", field="width")
    for name, value in (("width", width), ("height", height)):
        if value is not None and value < 1:
            raise ConfigError(f"must be a positive integer, got {value}", field=name)

    background_color = None
    if document.get("background_color") is not None:
        background_color = _parse_color(document["background_color"], "background_color")

    raw_attributes = _require(document, "attributes", list)
    if not raw_attributes:
        raise ConfigError("at least one attribute is required", field="attributes")
    attributes = tuple(
        _parse_attribute(raw, f"attributes[{i}]")
        for i, raw in enumerate(raw_attributes)
    )

    config = Configuration(
        name_template=_require(document, "name", str),
        description=_require(document, "description", str),
        supply=supply,
        attributes=attributes,
        start_token=start_token,
        background_color=background_color,
        external_url_template=_optional(document, "external_url", str, None),
        width=width,
        height=height,
        unique=_optional(document, "unique", bool, False),
    )
    logger.debug(
        f"parsed configuration: {len(attributes)} attributes, supply {supply}, "
        f"{config.combinations()} combinations"
    )
    return config


def _parse_attribute(raw: Any, path: str) -> Attribute:
    if not isinstance(raw, dict):
        raise ConfigError("attribute must be an object", field=path)
    name = _require(raw, "name", str, path)

    include = raw.get("include_in_metadata", raw.get("metadata", True))
    if not isinstance(include, bool):
        raise ConfigError("must be a boolean", field=f"{path}.include_in_metadata")

    raw_options = _require(raw, "options", dict, path)
    options = {
        option_name: _parse_option(value, f"{path}.options.{option_name}")
        for option_name, value in raw_options.items()
        if not option_name.startswith("_")
    }
    if not options:
        raise ConfigError("at least one option is required", field=f"{path}.options")
    attribute = Attribute(name=name, options=options, include_in_metadata=include)
    if not attribute.selectable():
        raise ConfigError("no option has a weight above zero", field=f"{path}.options")
    return attribute


def _parse_option(value: Any, path: str) -> Option:
    if value is None:
        return NoneOption()
    if isinstance(value, str):
        try:
            return option_for_file(value)
        except ValueError as e:
            raise ConfigError(str(e), field=path)
    if not isinstance(value, dict):
        raise ConfigError("option must be null, a file path or an object", field=path)

    kind = _require(value, "type", str, path).lower()
    weight = _parse_weight(_optional(value, "weight", (int, float), 1.0, path), f"{path}.weight")

    if kind == "audio":
        return AudioOption(file=Path(_require(value, "file", str, path)), weight=weight)
    if kind == "color":
        color = _parse_color(_require(value, "color", str, path), f"{path}.color")
        return ColorOption(color=color, weight=weight)
    if kind == "image":
        return ImageOption(file=Path(_require(value, "file", str, path)), weight=weight)
    if kind == "none":
        return NoneOption(weight=weight)
    if kind == "text":
        height = _require(value, "height", (int, float), path)
        if height <= 0:
            raise ConfigError(f"must be positive, got {height}", field=f"{path}.height")
        return TextOption(
            font=Path(_require(value, "font", str, path)),
            text=_require(value, "text", str, path),
            height=float(height),
            x=_optional(value, "x", int, 0, path),
            y=_optional(value, "y", int, 0, path),
            color=_parse_color(value.get("color", "#000000"), f"{path}.color"),
            weight=weight,
        )
    raise ConfigError(f"unknown option type '{kind}'", field=f"{path}.type")


def _parse_weight(value: int | float, path: str) -> float:
    # json accepts Infinity and NaN, and integers too large for a float
    try:
        weight = float(value)
    except OverflowError:
        raise ConfigError(f"must be a finite number, got {value}", field=path)
    if not math.isfinite(weight):
        raise ConfigError(f"must be a finite number, got {value}", field=path)
    if weight < 0:
        raise ConfigError(f"must not be negative, got {value}", field=path)
    return weight


def _parse_color(value: Any, path: str) -> Color:
    try:
        return Color.parse(value)
    except ValueError as e:
        raise ConfigError(str(e), field=path)


def _field_path(parent: str | None, key: str) -> str:
    return f"{parent}.{key}" if parent else key


def _require(raw: dict, key: str, types, parent: str | None = None):
    if key not in raw or raw[key] is None:
        raise ConfigError("required field is missing", field=_field_path(parent, key))
    return _check_type(raw[key], types, _field_path(parent, key))


def _optional(raw: dict, key: str, types, default, parent: str | None = None):
    if raw.get(key) is None:
        return default
    return _check_type(raw[key], types, _field_path(parent, key))


def _check_type(value: Any, types, path: str):
    # bool is an int subclass; only accept it where bool is asked for
    wants_bool = types is bool or (isinstance(types, tuple) and bool in types)
    if isinstance(value, bool) and not wants_bool:
        raise ConfigError(f"unexpected boolean {value!r}", field=path)
    if not isinstance(value, types):
        expected = types.__name__ if isinstance(types, type) else " or ".join(t.__name__ for t in types)
        raise ConfigError(f"expected {expected}, got {type(value).__name__}", field=path)
    return value


def validate_assets(config: Configuration, source: Path):
    """Check every referenced asset exists and has a supported extension."""
    source = Path(source)
    logger.debug("validating configured assets...")
    for i, attribute in enumerate(config.attributes):
        for option_name, option in attribute.options.items():
            path = f"attributes[{i}].options.{option_name}"
            if isinstance(option, AudioOption):
                _validate_file(source, option.file, SUPPORTED_AUDIO_EXTENSIONS, path)
            elif isinstance(option, ImageOption):
                _validate_file(source, option.file, None, path)
            elif isinstance(option, TextOption):
                _validate_file(source, option.font, SUPPORTED_FONT_EXTENSIONS, f"{path}.font")


def _validate_file(source: Path, file: Path, extensions: tuple[str, ...] | None, path: str):
    ext = extension(file)
    supported = is_image_extension(ext) if extensions is None else ext in extensions
    if not supported:
        raise ConfigError(f"file extension '{ext}' not supported for '{file}'", field=path)
    full = source / file
    if not full.is_file():
        raise ConfigError(f"could not find '{full}' - correct the config and try again", field=path)
