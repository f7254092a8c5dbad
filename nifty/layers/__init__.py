"""Layer renderer registry - one renderer per option kind."""

from typing import Type

from ..models.options import OptionKind
from .base import LayerRenderer

_RENDERERS: dict[OptionKind, Type[LayerRenderer]] = {}


def _ensure_layers_loaded():
    """Import all renderer modules to trigger registration."""
    from . import blank  # noqa: F401
    from . import color  # noqa: F401
    from . import image  # noqa: F401
    from . import text  # noqa: F401


def register(*kinds: OptionKind):
    """Decorator to register a renderer for one or more option kinds."""
    def decorator(cls):
        for kind in kinds:
            _RENDERERS[kind] = cls
        return cls
    return decorator


def get_renderer_class(kind: OptionKind) -> Type[LayerRenderer]:
    """Get renderer class by option kind."""
    _ensure_layers_loaded()
    if kind not in _RENDERERS:
        raise ValueError(f"No renderer for option kind: {kind.value}")
    return _RENDERERS[kind]


def build_renderers() -> dict[OptionKind, LayerRenderer]:
    """Instantiate a renderer for every option kind, failing if any kind is unhandled."""
    _ensure_layers_loaded()
    missing = [kind.value for kind in OptionKind if kind not in _RENDERERS]
    if missing:
        raise RuntimeError(f"No renderer registered for option kinds: {', '.join(missing)}")
    return {kind: _RENDERERS[kind]() for kind in OptionKind}


__all__ = [
    "LayerRenderer",
    "register",
    "get_renderer_class",
    "build_renderers",
]
