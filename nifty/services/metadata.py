"""Metadata synthesizer - builds the per-token JSON document."""

from pathlib import Path
from typing import Any

from ..models.config import Configuration
from ..models.metadata import Metadata, Trait
from ..models.options import Color, ColorOption
from ..models.token import Artifact, Token
from ..utils import render_template


class MetadataSynthesizer:
    """Build token metadata from the configuration templates and the token's selections."""

    def __init__(self, config: Configuration, media_dir: str = "media"):
        self.config = config
        self.media_dir = media_dir

    def synthesize(self, token: Token, artifact: Artifact) -> dict[str, Any]:
        config = self.config
        external_url = None
        if config.external_url_template is not None:
            external_url = render_template(config.external_url_template, token.id)

        background = self._background_color(token)
        metadata = Metadata(
            id=token.id,
            name=render_template(config.name_template, token.id),
            description=config.description,
            image=self._media_url(artifact.image_path),
            external_url=external_url,
            attributes=[
                Trait(trait_type=s.attribute.name, value=s.name)
                for s in token.selections
                if s.attribute.include_in_metadata
            ],
            background_color=background.opensea_hex if background else None,
            animation_url=self._media_url(artifact.video_path) if artifact.video_path else None,
        )
        return metadata.to_dict()

    def _background_color(self, token: Token) -> Color | None:
        """Bottom-most selected colour layer, else the configured background."""
        for selection in reversed(token.selections):
            if isinstance(selection.option, ColorOption):
                return selection.option.color
        return self.config.background_color

    def _media_url(self, path: Path) -> str:
        # Relative to the output root; deploy rewrites it to the hosted location
        return f"/{self.media_dir}/{Path(path).name}"
