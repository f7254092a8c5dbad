"""Rendered text layer."""

from PIL import Image, ImageDraw

from . import register
from .base import LayerRenderer
from ..models.context import LayerContext
from ..models.options import OptionKind, TextOption
from ..utils import render_template


@register(OptionKind.TEXT)
class TextLayer(LayerRenderer):
    """Draws the option text with its font, pixel height and colour.

    A negative x right-aligns the text: its right edge is placed abs(x)
    pixels from the right edge of the canvas.
    """

    def render(self, canvas: Image.Image, option: TextOption, context: LayerContext) -> Image.Image:
        text = render_template(option.text, context.token_id)
        font = context.fonts.get(context.source / option.font, option.height)

        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)

        x = option.x
        if x < 0:
            _, _, right, _ = draw.textbbox((0, 0), text, font=font)
            x = canvas.width + x - right

        draw.text((x, option.y), text, font=font, fill=option.color.rgba)
        return self._over(canvas, layer)
