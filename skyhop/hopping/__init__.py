from .pathfinder import Pathfinder
from .types import FinalStep, Hop, PathResult, PathStatus, StarRef, TargetInfo

__all__ = [
    "Pathfinder",
    "PathResult",
    "PathStatus",
    "Hop",
    "FinalStep",
    "StarRef",
    "TargetInfo",
]
