"""Layer compositor - renders a token's selections into one image."""

import logging
from pathlib import Path

from PIL import Image

from ..errors import AssetError
from ..layers import build_renderers
from ..layers.caches import AssetCache, open_font, open_image
from ..models.context import LayerContext
from ..models.options import ImageOption
from ..models.token import Token

logger = logging.getLogger(__name__)


class Compositor:
    """Composite selections bottom layer first (last-declared attribute first)."""

    def __init__(self, source: Path, canvas_size: tuple[int, int] | None = None):
        self.source = Path(source)
        self.canvas_size = canvas_size
        self.images = AssetCache(open_image)
        self.fonts = AssetCache(open_font)
        self.renderers = build_renderers()

    def composite(self, token: Token) -> Image.Image:
        """Render every selection of the token onto a transparent canvas."""
        size = self._resolve_canvas_size(token)
        canvas = Image.new("RGBA", size, (0, 0, 0, 0))
        context = LayerContext(
            token_id=token.id,
            source=self.source,
            images=self.images,
            fonts=self.fonts,
        )

        for layer, selection in enumerate(reversed(token.selections)):
            logger.debug(
                f"token #{token.id}: layer {layer} '{selection.attribute.name}' = "
                f"'{selection.name}' ({selection.option.kind.value})"
            )
            renderer = self.renderers[selection.option.kind]
            canvas = renderer.render(canvas, selection.option, context)

        return canvas

    def _resolve_canvas_size(self, token: Token) -> tuple[int, int]:
        """Configured size, else the size of the bottom-most selected image."""
        if self.canvas_size:
            return self.canvas_size
        for selection in reversed(token.selections):
            if isinstance(selection.option, ImageOption):
                return self.images.get(self.source / selection.option.file).size
        raise AssetError(
            "canvas size unknown - configure width and height or select an image layer",
            str(self.source),
        )
