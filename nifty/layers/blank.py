"""Layers without pixels."""

from PIL import Image

from . import register
from .base import LayerRenderer
from ..models.context import LayerContext
from ..models.options import Option, OptionKind


@register(OptionKind.NONE, OptionKind.AUDIO)
class BlankLayer(LayerRenderer):
    """None and audio options leave the canvas untouched."""

    def render(self, canvas: Image.Image, option: Option, context: LayerContext) -> Image.Image:
        return canvas
