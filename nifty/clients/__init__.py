"""Clients for external tools."""

from .ffmpeg import FfmpegClient

__all__ = ["FfmpegClient"]
