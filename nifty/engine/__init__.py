"""Collection generation engine."""

from .engine import GenerationEngine
from .registry import UniquenessRegistry
from .report import GenerationReport, TokenFailure, TokenStatus

__all__ = [
    "GenerationEngine",
    "GenerationReport",
    "TokenFailure",
    "TokenStatus",
    "UniquenessRegistry",
]
