from dataclasses import asdict

from skyhop.util.format import format_degrees, format_hours
from .types import PathResult, StarRef


def path_to_dict(result: PathResult) -> dict:
    data = asdict(result)
    data["status"] = result.status.value
    for hop, raw in zip(result.hops, data["hops"]):
        raw["direction"] = hop.direction
    return data


def _star_line(star: StarRef) -> str:
    parts = [star.name]
    if star.magnitude is not None:
        parts.append(f"mag {star.magnitude:.1f}")
    parts.append(f"RA {format_hours(star.ra_hours)}")
    parts.append(f"Dec {format_degrees(star.dec_deg)}")
    if star.altitude_deg is not None:
        parts.append(f"alt {star.altitude_deg:.1f}°")
    return "  ".join(parts)


def format_text(result: PathResult) -> str:
    lines: list[str] = []
    title = f"Star hop to {result.target_name}"
    lines.append(title)
    lines.append("=" * len(title))
    lines.append(f"Status: {result.status.value}")

    if result.target is not None:
        target = result.target
        lines.append(
            f"Target: RA {format_hours(target.ra_hours)}  Dec {format_degrees(target.dec_deg)}  "
            f"alt {target.altitude_deg:.1f}°  az {target.azimuth_deg:.1f}°"
        )
    if result.fov_deg is not None:
        lines.append(f"Field of view: {result.fov_deg}°")
    if result.start_star is not None:
        lines.append(f"Start: {_star_line(result.start_star)}")

    if result.hops:
        lines.append("")
        for hop in result.hops:
            lines.append(
                f"{hop.number:>2}. {hop.from_star.name} -> {hop.to_star.name}  "
                f"{hop.distance_deg:.1f}° {hop.direction}"
            )

    if result.final_step is not None:
        lines.append("")
        lines.append(result.final_step.message)

    lines.append("")
    lines.append(result.summary)
    return "\n".join(lines)
