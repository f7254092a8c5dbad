"""Layer renderer base class."""

from abc import ABC, abstractmethod

from PIL import Image

from ..models.context import LayerContext
from ..models.options import Option


class LayerRenderer(ABC):
    """Paints one selected option onto the token canvas."""

    @abstractmethod
    def render(self, canvas: Image.Image, option: Option, context: LayerContext) -> Image.Image:
        """Return the canvas with this layer alpha-composited over it."""
        pass

    @staticmethod
    def _over(canvas: Image.Image, layer: Image.Image) -> Image.Image:
        """Standard alpha-over of a canvas-sized RGBA layer."""
        return Image.alpha_composite(canvas, layer)
