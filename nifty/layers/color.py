"""Solid colour layer."""

from PIL import Image

from . import register
from .base import LayerRenderer
from ..models.context import LayerContext
from ..models.options import ColorOption, OptionKind


@register(OptionKind.COLOR)
class ColorLayer(LayerRenderer):
    """Fills the whole canvas, honouring the colour's alpha."""

    def render(self, canvas: Image.Image, option: ColorOption, context: LayerContext) -> Image.Image:
        fill = Image.new("RGBA", canvas.size, option.color.rgba)
        return self._over(canvas, fill)
