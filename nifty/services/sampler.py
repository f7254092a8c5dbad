"""Weighted sampler - picks one option per attribute."""

import itertools
import logging
import math
import random
from typing import Iterator

from ..errors import ConfigError
from ..models.config import Attribute
from ..models.options import Option
from ..models.token import Selection, Token

logger = logging.getLogger(__name__)


class WeightedSampler:
    """Draw options with probability proportional to their weight.

    The pool is walked in declaration order and every option owns the
    half-open interval [cumulative_before, cumulative_before + weight) of
    [0, W). Zero-weight options own an empty interval and are excluded.
    """

    def sample(self, options: dict[str, Option], rng: random.Random) -> tuple[str, Option]:
        """Consume one draw from rng and return (name, option)."""
        pool = [(name, option) for name, option in options.items() if option.weight > 0]
        if not pool:
            raise ConfigError("attribute has no option with a weight above zero")

        total = sum(option.weight for _, option in pool)
        r = rng.random() * total

        cumulative = 0.0
        for name, option in pool:
            cumulative += option.weight
            if r < cumulative:
                return name, option

        # r can land on W itself after float rounding of the running sum
        return pool[-1]

    def sample_token(
        self,
        token_id: int,
        attributes: tuple[Attribute, ...],
        rng: random.Random,
    ) -> Token:
        """Sample every attribute independently, in declaration order."""
        selections = []
        for attribute in attributes:
            try:
                name, option = self.sample(attribute.options, rng)
            except ConfigError as e:
                raise ConfigError(str(e), field=f"attribute '{attribute.name}'")
            selections.append(Selection(attribute=attribute, name=name, option=option))
        return Token(id=token_id, selections=tuple(selections))

    def combinations(self, attributes: tuple[Attribute, ...]) -> Iterator[tuple[str, ...]]:
        """Every selectable combination of option names, in declaration order."""
        return itertools.product(*(list(attribute.selectable()) for attribute in attributes))

    def choose_combination(
        self,
        candidates: list[tuple[str, ...]],
        attributes: tuple[Attribute, ...],
        rng: random.Random,
    ) -> tuple[str, ...]:
        """Pick one of candidates, weighted by the product of its option weights."""
        weights = [
            math.prod(attribute.options[name].weight for attribute, name in zip(attributes, names))
            for names in candidates
        ]
        return rng.choices(candidates, weights=weights)[0]

    def token_from_names(
        self,
        token_id: int,
        attributes: tuple[Attribute, ...],
        names: tuple[str, ...],
    ) -> Token:
        selections = tuple(
            Selection(attribute=attribute, name=name, option=attribute.options[name])
            for attribute, name in zip(attributes, names)
        )
        return Token(id=token_id, selections=selections)


def token_rng(seed: str, token_id: int) -> random.Random:
    """Independent random stream for one token, reproducible from the run seed."""
    return random.Random(f"{seed}:{token_id}")
