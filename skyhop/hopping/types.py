from dataclasses import dataclass, field
from enum import Enum


class PathStatus(str, Enum):
    SUCCESS = "Success"
    TARGET_NOT_FOUND = "TargetNotFound"
    TARGET_NOT_VISIBLE = "TargetNotVisible"
    NO_STARTING_STAR_FOUND = "NoStartingStarFound"
    TARGET_IN_START_FOV = "TargetInStartFOV"
    PATH_NOT_FOUND = "PathNotFound"


@dataclass
class StarRef:
    name: str
    magnitude: float | None
    ra_hours: float
    dec_deg: float
    altitude_deg: float | None = None
    azimuth_deg: float | None = None


@dataclass
class TargetInfo:
    name: str
    ra_hours: float
    dec_deg: float
    altitude_deg: float
    azimuth_deg: float


@dataclass
class Hop:
    number: int
    from_star: StarRef
    to_star: StarRef
    bearing_deg: float
    cardinal: str
    distance_deg: float

    @property
    def direction(self) -> str:
        return f"towards {self.cardinal} (Bearing: {self.bearing_deg}°)"


@dataclass
class FinalStep:
    from_star: StarRef
    distance_deg: float
    bearing_deg: float
    cardinal: str
    message: str


@dataclass
class PathResult:
    target_name: str
    status: PathStatus
    summary: str
    fov_deg: float | None = None
    target: TargetInfo | None = None
    start_star: StarRef | None = None
    hops: list[Hop] = field(default_factory=list)
    final_step: FinalStep | None = None

    @property
    def reached(self) -> bool:
        return self.status in (PathStatus.SUCCESS, PathStatus.TARGET_IN_START_FOV)
