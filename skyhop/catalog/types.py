from dataclasses import dataclass, field


@dataclass(frozen=True)
class EquatorialRecord:
    ra_hours: float
    dec_deg: float
    name: str
    magnitude: float | None = None
    common_name: str | None = None
    object_type: str | None = None
    constellation: str | None = None
    designation: str | None = None
    aliases: tuple[str, ...] = field(default_factory=tuple)

    @property
    def key(self) -> str:
        return self.name.lower()
