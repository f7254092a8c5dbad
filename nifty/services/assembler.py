"""Media assembler - writes the token image and, with audio, its video."""

import logging
import threading
from pathlib import Path

from PIL import Image

from ..clients.ffmpeg import FfmpegClient
from ..config import VIDEO_EXTENSION
from ..errors import AssetError, EncodingError, OutputError
from ..layers.caches import AssetCache
from ..models.options import SUPPORTED_AUDIO_EXTENSIONS, Color, extension
from ..models.token import Artifact, Token
from .output import OutputWriter, atomic_path

logger = logging.getLogger(__name__)

FLATTEN_FORMATS = ("jpeg",)   # formats without an alpha channel


class MediaAssembler:
    """Write the composited image; hand image+audio to ffmpeg when audio was selected."""

    def __init__(
        self,
        writer: OutputWriter,
        client: FfmpegClient,
        source: Path,
        image_format: str = "png",
        image_extension: str = "png",
        encoder_workers: int = 2,
        retries: int = 1,
        background: Color | None = None,
    ):
        self.writer = writer
        self.client = client
        self.source = Path(source)
        self.image_format = image_format
        self.image_extension = image_extension
        self.retries = retries
        self.background = background
        # Encodes are throttled separately from compositing work
        self.encoder_slots = threading.BoundedSemaphore(encoder_workers)
        self.durations = AssetCache(client.probe_duration)

    def assemble(self, token: Token, image: Image.Image) -> Artifact:
        image_path = self._save_image(token.id, image)
        if not token.has_audio:
            return Artifact(image_path=image_path)

        audio_path = self.source / token.audio.file
        self._check_audio(audio_path)
        video_path = self.writer.media_file(token.id, VIDEO_EXTENSION)
        with self.encoder_slots:
            self._encode(token.id, image_path, audio_path, video_path)
        return Artifact(image_path=image_path, video_path=video_path)

    def _save_image(self, token_id: int, image: Image.Image) -> Path:
        path = self.writer.media_file(token_id, self.image_extension)
        if self.image_format in FLATTEN_FORMATS:
            image = self._flatten(image)
        logger.debug(f"saving token #{token_id} media as '{path}'")
        try:
            with atomic_path(path) as tmp:
                image.save(tmp, format=self.image_format)
        except OSError as e:
            raise OutputError(f"unable to save image ({e})", str(path))
        return path

    def _flatten(self, image: Image.Image) -> Image.Image:
        """Drop alpha onto the background colour (white when none is configured)."""
        rgba = self.background.rgba[:3] + (255,) if self.background else (255, 255, 255, 255)
        base = Image.new("RGBA", image.size, rgba)
        return Image.alpha_composite(base, image).convert("RGB")

    def _check_audio(self, audio_path: Path):
        ext = extension(audio_path)
        if ext not in SUPPORTED_AUDIO_EXTENSIONS:
            raise AssetError(f"unsupported audio format '{ext}'", str(audio_path))
        if not audio_path.is_file():
            raise AssetError("audio not found", str(audio_path))

    def _encode(self, token_id: int, image_path: Path, audio_path: Path, video_path: Path):
        """Run the encoder, retrying failed or timed-out runs a bounded number of times."""
        duration = self.durations.get(audio_path)
        if duration:
            logger.debug(f"audio track '{audio_path.name}' is {duration:.3f}s")

        for attempt in range(self.retries + 1):
            try:
                with atomic_path(video_path) as tmp:
                    cmd = self.client.still_video_command(image_path, audio_path, tmp, duration)
                    self.client.run(cmd)
                logger.debug(f"token #{token_id}: generated '{video_path}'")
                return
            except EncodingError as e:
                if not e.retryable or attempt >= self.retries:
                    raise
                logger.warning(
                    f"token #{token_id}: encode attempt {attempt + 1} failed: {e}. Retrying..."
                )
