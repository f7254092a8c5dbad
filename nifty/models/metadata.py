"""Token metadata document."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Trait:
    """A single metadata attribute entry."""
    trait_type: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"trait_type": self.trait_type, "value": self.value}


@dataclass
class Metadata:
    """Marketplace-style token metadata."""
    id: int
    name: str
    description: str
    image: str                                  # media path, rewritten on deploy
    external_url: str | None = None
    attributes: list[Trait] = field(default_factory=list)
    background_color: str | None = None         # six hex digits, no '#'
    animation_url: str | None = None            # video path, rewritten on deploy

    def to_dict(self) -> dict[str, Any]:
        """Serialize in document key order, omitting unset optionals."""
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image": self.image,
        }
        if self.external_url is not None:
            result["external_url"] = self.external_url
        result["attributes"] = [trait.to_dict() for trait in self.attributes]
        if self.background_color is not None:
            result["background_color"] = self.background_color
        if self.animation_url is not None:
            result["animation_url"] = self.animation_url
        return result
