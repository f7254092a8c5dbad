"""Generation services."""

from .assembler import MediaAssembler
from .compositor import Compositor
from .deploy import DeployService
from .metadata import MetadataSynthesizer
from .output import OutputWriter
from .sampler import WeightedSampler

__all__ = [
    "Compositor",
    "DeployService",
    "MediaAssembler",
    "MetadataSynthesizer",
    "OutputWriter",
    "WeightedSampler",
]
