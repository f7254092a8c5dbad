"""Raster image layer."""

import logging

from PIL import Image

from . import register
from .base import LayerRenderer
from ..models.context import LayerContext
from ..models.options import ImageOption, OptionKind

logger = logging.getLogger(__name__)


@register(OptionKind.IMAGE)
class ImageLayer(LayerRenderer):
    """Composites a decoded image, stretched to the canvas when sizes differ."""

    def render(self, canvas: Image.Image, option: ImageOption, context: LayerContext) -> Image.Image:
        layer = context.images.get(context.source / option.file)
        if layer.size != canvas.size:
            logger.debug(f"stretching '{option.file}' from {layer.size} to {canvas.size}")
            layer = layer.resize(canvas.size, Image.Resampling.LANCZOS)
        return self._over(canvas, layer)
