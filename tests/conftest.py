"""
Pytest configuration and fixtures
"""

import json
import subprocess
from pathlib import Path
from typing import Any

import pytest
from PIL import Image

from nifty.config import GenerationSettings


def make_png(path: Path, size: tuple[int, int], color=(0, 0, 255, 255)) -> Path:
    """Write a solid RGBA PNG."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, color).save(path)
    return path


def write_config(source: Path, document: dict[str, Any], name: str = "config.json") -> Path:
    path = source / name
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


def base_document(**overrides) -> dict[str, Any]:
    """Minimal valid configuration with two colour-only attributes."""
    document = {
        "name": "Token #{id}",
        "description": "A test collection",
        "supply": 5,
        "start_token": 1,
        "width": 8,
        "height": 8,
        "attributes": [
            {
                "name": "Overlay",
                "options": {
                    "Clear": None,
                    "Tint": {"type": "color", "color": "#00FF0080"},
                },
            },
            {
                "name": "Background",
                "options": {
                    "Red": {"type": "color", "color": "#FF0000"},
                    "Blue": {"type": "color", "color": "#0000FF"},
                },
            },
        ],
    }
    document.update(overrides)
    return document


@pytest.fixture
def source(tmp_path: Path) -> Path:
    """Empty source directory."""
    directory = tmp_path / "collection"
    directory.mkdir()
    return directory


@pytest.fixture
def settings(source: Path) -> GenerationSettings:
    return GenerationSettings(source=source, workers=2, seed="test-seed")


class FakeFfmpeg:
    """Stands in for subprocess.run inside the ffmpeg client."""

    def __init__(self, returncode: int = 0, stderr: str = "", duration: str = "2.5"):
        self.returncode = returncode
        self.stderr = stderr
        self.duration = duration
        self.commands: list[list[str]] = []

    def __call__(self, cmd, **kwargs):
        self.commands.append(cmd)
        if cmd[0].endswith("ffprobe"):
            return subprocess.CompletedProcess(cmd, 0, stdout=f"{self.duration}\n", stderr="")
        if self.returncode == 0:
            Path(cmd[-1]).write_bytes(b"fake mp4")
        return subprocess.CompletedProcess(cmd, self.returncode, stdout="", stderr=self.stderr)

    @property
    def encodes(self) -> list[list[str]]:
        return [c for c in self.commands if not c[0].endswith("ffprobe")]


@pytest.fixture
def fake_ffmpeg(monkeypatch) -> FakeFfmpeg:
    fake = FakeFfmpeg()
    monkeypatch.setattr("nifty.clients.ffmpeg.subprocess.run", fake)
    monkeypatch.setattr("nifty.clients.ffmpeg.shutil.which", lambda name: f"/usr/bin/{name}")
    return fake
