"""Token model - one generated collection item."""

from dataclasses import dataclass
from pathlib import Path

from .config import Attribute
from .options import AudioOption, Option


@dataclass(frozen=True)
class Selection:
    """The option chosen for one attribute."""
    attribute: Attribute
    name: str
    option: Option


@dataclass(frozen=True)
class Token:
    """A token's id and its selections, one per attribute in declaration order."""
    id: int
    selections: tuple[Selection, ...]

    @property
    def has_audio(self) -> bool:
        return self.audio is not None

    @property
    def audio(self) -> AudioOption | None:
        """Top-most audio selection, if any."""
        for selection in self.selections:
            if isinstance(selection.option, AudioOption):
                return selection.option
        return None

    @property
    def fingerprint(self) -> tuple[str, ...]:
        return tuple(s.name for s in self.selections)


@dataclass(frozen=True)
class Artifact:
    """Media files written for a token."""
    image_path: Path
    video_path: Path | None = None
