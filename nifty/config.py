import math
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigError

load_dotenv()


def env_int(name: str, default: int) -> int:
    """Integer setting from the environment; ConfigError names the variable."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"expected an integer, got {value!r}", field=name)


def env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        number = float(value)
    except ValueError:
        raise ConfigError(f"expected a number, got {value!r}", field=name)
    if not math.isfinite(number):
        raise ConfigError(f"expected a finite number, got {value!r}", field=name)
    return number


def env_str(name: str, default: str) -> str:
    return os.getenv(name) or default


# Runtime settings - read from .env when settings are built, overridable from the command line
def _setting(reader, name: str, default):
    return field(default_factory=lambda: reader(name, default))


# Output layout defaults
CONFIG_FILE = "config.json"
OUTPUT_DIR = "output"
MEDIA_DIR = "media"
METADATA_DIR = "metadata"

# Pillow format name -> file extension
IMAGE_FORMATS: dict[str, str] = {
    "png": "png",
    "jpeg": "jpg",
    "webp": "webp",
    "gif": "gif",
}

VIDEO_EXTENSION = "mp4"


@dataclass(frozen=True)
class GenerationSettings:
    """Runtime settings for one generation run."""

    source: Path
    config_file: str = CONFIG_FILE
    output: str = OUTPUT_DIR
    media: str = MEDIA_DIR
    metadata: str = METADATA_DIR
    workers: int = _setting(env_int, "NIFTY_WORKERS", os.cpu_count() or 1)
    encoder_workers: int = _setting(env_int, "NIFTY_ENCODER_WORKERS", 2)
    encoder_timeout: float = _setting(env_float, "NIFTY_ENCODER_TIMEOUT", 300.0)
    encoder_retries: int = _setting(env_int, "NIFTY_ENCODER_RETRIES", 1)
    ffmpeg: str = _setting(env_str, "NIFTY_FFMPEG", "ffmpeg")
    ffprobe: str = _setting(env_str, "NIFTY_FFPROBE", "ffprobe")
    image_format: str = _setting(env_str, "NIFTY_IMAGE_FORMAT", "png")
    unique_attempts: int = _setting(env_int, "NIFTY_UNIQUE_ATTEMPTS", 1000)
    seed: str | None = None
    fail_fast: bool = True     # abort the run on the first token failure
    clean: bool = False        # remove an existing output directory first

    def __post_init__(self):
        object.__setattr__(self, "source", Path(self.source))
        object.__setattr__(self, "image_format", self.image_format.lower())
        self.validate()

    def validate(self):
        if self.image_format not in IMAGE_FORMATS:
            raise ConfigError(
                f"unsupported image format '{self.image_format}' (valid: {', '.join(IMAGE_FORMATS)})",
                field="image_format",
            )
        for name in ("workers", "encoder_workers", "unique_attempts"):
            if getattr(self, name) < 1:
                raise ConfigError("must be at least 1", field=name)
        if self.encoder_retries < 0:
            raise ConfigError("must not be negative", field="encoder_retries")
        if self.encoder_timeout <= 0:
            raise ConfigError("must be positive", field="encoder_timeout")

    @property
    def image_extension(self) -> str:
        return IMAGE_FORMATS[self.image_format]

    @property
    def config_path(self) -> Path:
        return self.source / self.config_file

    @property
    def output_path(self) -> Path:
        return self.source / self.output

    @property
    def media_path(self) -> Path:
        return self.output_path / self.media

    @property
    def metadata_path(self) -> Path:
        return self.output_path / self.metadata
