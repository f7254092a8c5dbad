"""ffmpeg client - external audio/video encoding."""

import logging
import shutil
import subprocess
from pathlib import Path

from ..errors import EncodingError

logger = logging.getLogger(__name__)


class FfmpegClient:
    """Runs ffmpeg/ffprobe as subprocesses. Performs no codec work itself."""

    def __init__(self, ffmpeg: str = "ffmpeg", ffprobe: str = "ffprobe", timeout: float = 300):
        self.ffmpeg = ffmpeg
        self.ffprobe = ffprobe
        self.timeout = timeout

    def check_available(self):
        """Raise EncodingError if ffmpeg is not on PATH."""
        logger.debug(f"checking for {self.ffmpeg}...")
        if shutil.which(self.ffmpeg) is None:
            raise EncodingError(f"'{self.ffmpeg}' was not found - check your PATH", retryable=False)

    def probe_duration(self, media_path: Path) -> float | None:
        """
        Get the duration of an audio/video file in seconds.

        Returns None when ffprobe is unavailable or cannot read the file,
        so callers can fall back to letting ffmpeg stop at the shortest stream.
        """
        try:
            result = subprocess.run(
                [
                    self.ffprobe,
                    "-v", "error",
                    "-show_entries", "format=duration",
                    "-of", "default=noprint_wrappers=1:nokey=1",
                    str(media_path),
                ],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"could not probe duration of '{media_path}': {e}")
            return None

        try:
            return float(result.stdout.strip())
        except ValueError:
            logger.warning(f"could not probe duration of '{media_path}': {result.stderr.strip()}")
            return None

    def still_video_command(
        self,
        image_path: Path,
        audio_path: Path,
        output_path: Path,
        duration: float | None = None,
    ) -> list[str]:
        """Build the command that loops a still image over an audio track."""
        cmd = [
            self.ffmpeg,
            "-nostdin", "-y",
            "-v", "error",
            "-loop", "1",
            "-framerate", "1",               # single image, single frame per second
            "-i", str(image_path),
            "-i", str(audio_path),
            "-vf", "scale=trunc(iw/2)*2:trunc(ih/2)*2",   # libx264 needs even dimensions
            "-c:v", "libx264",
            "-tune", "stillimage",
            "-pix_fmt", "yuv420p",           # required for player compatibility
            "-colorspace", "bt709",
            "-c:a", "aac",
        ]
        if duration:
            cmd += ["-t", f"{duration:.3f}"]
        else:
            cmd += ["-shortest"]
        cmd += ["-f", "mp4", str(output_path)]
        return cmd

    def run(self, cmd: list[str]):
        """Run an ffmpeg command, raising EncodingError on any failure."""
        logger.debug(f"running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise EncodingError(f"'{cmd[0]}' was not found - check your PATH", retryable=False)
        except subprocess.TimeoutExpired as e:
            raise EncodingError(f"'{cmd[0]}' timed out after {e.timeout}s")

        if result.returncode != 0:
            raise EncodingError(
                f"'{cmd[0]}' failed",
                returncode=result.returncode,
                stderr=result.stderr,
            )
