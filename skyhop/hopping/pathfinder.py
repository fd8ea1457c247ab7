import datetime
import logging

from skyhop.catalog.store import CatalogStore
from skyhop.catalog.types import EquatorialRecord
from skyhop.coords import angular_separation_deg, bearing
from skyhop.ephemeris.base import EphemerisBackend
from skyhop.ephemeris.types import HorizontalPosition, ObserverLocation
from skyhop.errors import ObjectNotFound
from skyhop.resolver import ObjectResolver
from .types import FinalStep, Hop, PathResult, PathStatus, StarRef, TargetInfo

logger = logging.getLogger(__name__)

DEFAULT_MAX_HOP_MAGNITUDE = 8.0
DEFAULT_INITIAL_SEARCH_RADIUS_DEG = 20.0
DEFAULT_START_STAR_MAGNITUDE_THRESHOLD = 3.5
DEFAULT_MAX_HOPS = 20


class _HorizonCache:
    """Alt/az per position, valid for a single pathfinding run."""

    def __init__(self, ephemeris: EphemerisBackend, observer: ObserverLocation, instant: datetime.datetime):
        self._ephemeris = ephemeris
        self._observer = observer
        self._instant = instant
        self._cache: dict[tuple[float, float], HorizontalPosition] = {}

    def __call__(self, record: EquatorialRecord) -> HorizontalPosition:
        key = (record.ra_hours, record.dec_deg)
        position = self._cache.get(key)
        if position is None:
            position = self._ephemeris.horizontal_position(
                record.ra_hours, record.dec_deg, self._observer, self._instant
            )
            self._cache[key] = position
        return position


def _star_ref(record: EquatorialRecord, horizontal: HorizontalPosition | None = None) -> StarRef:
    return StarRef(
        name=record.name,
        magnitude=record.magnitude,
        ra_hours=record.ra_hours,
        dec_deg=record.dec_deg,
        altitude_deg=horizontal.altitude_deg if horizontal else None,
        azimuth_deg=horizontal.azimuth_deg if horizontal else None,
    )


class Pathfinder:
    """Greedy star-hopping search from a bright star to a target.

    The start star is the brightest qualifying star near the target. Each hop
    then moves to the visible star within one field of view that lands closest
    to the target, until the target itself fits in the field.
    """

    def __init__(
        self,
        store: CatalogStore,
        resolver: ObjectResolver,
        ephemeris: EphemerisBackend,
        observer: ObserverLocation,
    ):
        self.store = store
        self.resolver = resolver
        self.ephemeris = ephemeris
        self.observer = observer

    def find_path(
        self,
        target_name: str,
        fov_deg: float,
        max_hop_magnitude: float = DEFAULT_MAX_HOP_MAGNITUDE,
        initial_search_radius_deg: float = DEFAULT_INITIAL_SEARCH_RADIUS_DEG,
        start_star_magnitude_threshold: float = DEFAULT_START_STAR_MAGNITUDE_THRESHOLD,
        max_hops: int = DEFAULT_MAX_HOPS,
        instant: datetime.datetime | None = None,
    ) -> PathResult:
        if fov_deg is None or fov_deg <= 0:
            raise ValueError("fov_deg must be positive")
        if initial_search_radius_deg <= 0:
            raise ValueError("initial_search_radius_deg must be positive")
        if max_hops <= 0:
            raise ValueError("max_hops must be positive")

        instant = instant or datetime.datetime.now(datetime.timezone.utc)
        horizon = _HorizonCache(self.ephemeris, self.observer, instant)

        try:
            target = self.resolver.resolve(target_name, instant)
        except ObjectNotFound as e:
            return PathResult(
                target_name=target_name,
                status=PathStatus.TARGET_NOT_FOUND,
                summary=f'Target object "{target_name}" not found in catalogs. {e}',
            )

        target_horizontal = horizon(target)
        target_info = TargetInfo(
            name=target.name,
            ra_hours=target.ra_hours,
            dec_deg=target.dec_deg,
            altitude_deg=target_horizontal.altitude_deg,
            azimuth_deg=target_horizontal.azimuth_deg,
        )
        result = PathResult(
            target_name=target_name,
            status=PathStatus.TARGET_NOT_VISIBLE,
            summary=f'Target "{target_name}" is currently below the horizon.',
            fov_deg=fov_deg,
            target=target_info,
        )
        if target_horizontal.altitude_deg <= 0:
            return result

        start = self._select_start_star(
            target, initial_search_radius_deg, start_star_magnitude_threshold, horizon
        )
        if start is None:
            result.status = PathStatus.NO_STARTING_STAR_FOUND
            result.summary = (
                f'No suitable starting star found within {initial_search_radius_deg}° of '
                f'"{target_name}" and brighter than magnitude {start_star_magnitude_threshold}.'
            )
            return result

        result.start_star = _star_ref(start, horizon(start))
        distance = angular_separation_deg(start, target)
        logger.debug("Start star %s (mag %s), %.2f° from %s", start.name, start.magnitude, distance, target.name)

        if distance <= fov_deg:
            result.status = PathStatus.TARGET_IN_START_FOV
            result.final_step = self._final_step(
                start, target, distance, horizon,
                lambda approx: f"The target {target_name} should be within your FOV, {approx} from {start.name}.",
            )
            result.summary = (
                f'Target "{target_name}" is already within FOV of the starting star "{start.name}".'
            )
            return result

        excluded = {target_name.strip().lower(), target.key}
        visited = {start.key}
        current = start

        for hop_number in range(1, max_hops + 1):
            candidate = self._next_hop(current, target, distance, fov_deg, max_hop_magnitude, visited, excluded, horizon)
            if candidate is None:
                result.status = PathStatus.PATH_NOT_FOUND
                result.final_step = self._final_step(
                    current, target, distance, horizon,
                    lambda approx: (
                        f"Pathfinding stopped. Target {target_name} is {approx} from {current.name}, "
                        "but no further hops could be found."
                    ),
                )
                result.summary = (
                    f'Could not find a complete hopping path to "{target_name}". '
                    f"Path generated with {len(result.hops)} hop(s)."
                )
                return result

            next_star, next_distance = candidate
            step = bearing(current, next_star)
            result.hops.append(
                Hop(
                    number=hop_number,
                    from_star=_star_ref(current, horizon(current)),
                    to_star=_star_ref(next_star, horizon(next_star)),
                    bearing_deg=step.degrees,
                    cardinal=step.cardinal,
                    distance_deg=round(angular_separation_deg(current, next_star), 1),
                )
            )
            logger.debug("Hop %d: %s -> %s (%.2f° to target)", hop_number, current.name, next_star.name, next_distance)
            current = next_star
            distance = next_distance
            visited.add(current.key)

            if distance <= fov_deg:
                result.status = PathStatus.SUCCESS
                result.final_step = self._final_step(
                    current, target, distance, horizon,
                    lambda approx: f"The target {target_name} should now be within your FOV, {approx} from {current.name}.",
                )
                result.summary = (
                    f'Successfully found a path with {len(result.hops)} hop(s) to "{target_name}".'
                )
                return result

        result.status = PathStatus.PATH_NOT_FOUND
        result.final_step = self._final_step(
            current, target, distance, horizon,
            lambda approx: f"Pathfinding stopped after maximum hops. Target {target_name} is {approx} from {current.name}.",
        )
        result.summary = (
            f'Path to "{target_name}" could not be completed within the maximum hop limit. '
            f"Path generated with {len(result.hops)} hop(s)."
        )
        return result

    def _select_start_star(self, target, radius_deg, magnitude_threshold, horizon) -> EquatorialRecord | None:
        candidates = []
        for _, star in self.store.star_items():
            if star.magnitude is None or star.magnitude > magnitude_threshold:
                continue
            if angular_separation_deg(star, target) > radius_deg:
                continue
            if horizon(star).altitude_deg <= 0:
                continue
            candidates.append(star)
        if not candidates:
            return None
        # Stable: equal magnitudes keep catalog order.
        candidates.sort(key=lambda s: s.magnitude)
        return candidates[0]

    def _next_hop(self, current, target, distance, fov_deg, max_magnitude, visited, excluded, horizon):
        best = None
        best_distance = distance
        for key, star in self.store.star_items():
            if key in visited or star.key in visited:
                continue
            if key in excluded or star.key in excluded:
                continue
            if star.magnitude is None or star.magnitude > max_magnitude:
                continue
            if angular_separation_deg(current, star) > fov_deg:
                continue
            to_target = angular_separation_deg(star, target)
            if to_target >= distance:
                continue
            if horizon(star).altitude_deg <= 0:
                continue
            if to_target < best_distance:
                best = star
                best_distance = to_target
        if best is None:
            return None
        return best, best_distance

    def _final_step(self, star, target, distance, horizon, describe) -> FinalStep:
        toward = bearing(star, target)
        message = describe(
            f"approx {distance:.1f}° towards {toward.cardinal} (Bearing: {toward.degrees}°)"
        )
        return FinalStep(
            from_star=_star_ref(star, horizon(star)),
            distance_deg=round(distance, 1),
            bearing_deg=toward.degrees,
            cardinal=toward.cardinal,
            message=message,
        )
