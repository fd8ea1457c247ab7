import dataclasses
import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from .types import EquatorialRecord

_NUMBERED_GROUPS = (
    ("messier", "Messier Objects", re.compile(r"^m(\d+)$")),
    ("ic", "IC Objects", re.compile(r"^ic(\d+)$")),
    ("ngc", "NGC Objects", re.compile(r"^ngc(\d+)$")),
)

CATEGORY_LABELS = {
    "stars": "Stars",
    "messier": "Messier Objects",
    "ic": "IC Objects",
    "ngc": "NGC Objects",
    "other": "Other Deep Sky Objects",
}

DSO_GROUPS = ("messier", "ic", "ngc", "other")
STORE_CATEGORIES = ("all", "stars", "dso") + DSO_GROUPS


@dataclass
class CategoryPage:
    category: str
    total: int
    offset: int
    limit: int
    names: list[str] = field(default_factory=list)

    @property
    def object_count(self) -> int:
        return len(self.names)


def dso_group(key: str) -> str:
    for group, _, pattern in _NUMBERED_GROUPS:
        if pattern.match(key):
            return group
    return "other"


def _catalog_number(key: str) -> int:
    for _, _, pattern in _NUMBERED_GROUPS:
        match = pattern.match(key)
        if match:
            return int(match.group(1))
    return 0


def paginate(names: list[str], offset: int, limit: int | None) -> list[str]:
    # An offset only applies together with a limit.
    if limit is None:
        return names
    return names[offset:offset + limit]


class CatalogStore:
    """Stars and deep-sky objects keyed by lowercased canonical name.

    Built once by the loader and treated as read-only afterwards. The alias
    table maps a lowercased common name to the canonical DSO key that first
    registered it.
    """

    def __init__(self):
        self._stars: dict[str, EquatorialRecord] = {}
        self._dsos: dict[str, EquatorialRecord] = {}
        self._aliases: dict[str, str] = {}

    @classmethod
    def from_records(
        cls,
        stars: Iterable[EquatorialRecord] = (),
        dsos: Iterable[EquatorialRecord] = (),
    ) -> "CatalogStore":
        store = cls()
        for record in stars:
            store.add_star(record)
        for record in dsos:
            store.add_dso(record)
        return store

    def add_star(self, record: EquatorialRecord) -> None:
        self._stars[record.key] = record
        if record.designation:
            designation_key = record.designation.lower()
            if designation_key not in self._stars:
                self._stars[designation_key] = dataclasses.replace(record)

    def add_dso(self, record: EquatorialRecord) -> None:
        self._dsos[record.key] = record
        for alias in record.aliases:
            self._aliases.setdefault(alias.lower(), record.key)

    def lookup_star(self, name: str) -> EquatorialRecord | None:
        return self._stars.get(name.strip().lower())

    def lookup_dso(self, name: str) -> EquatorialRecord | None:
        return self._dsos.get(name.strip().lower())

    def resolve_alias(self, common_name: str) -> str | None:
        return self._aliases.get(common_name.strip().lower())

    def star_items(self) -> Iterator[tuple[str, EquatorialRecord]]:
        return iter(self._stars.items())

    @property
    def star_count(self) -> int:
        return len(self._stars)

    @property
    def dso_count(self) -> int:
        return len(self._dsos)

    @property
    def alias_count(self) -> int:
        return len(self._aliases)

    def list_by_category(
        self,
        category: str | None = None,
        limit: int | None = None,
        offset: int = 0,
        min_magnitude: float | None = None,
        constellation: str | None = None,
    ) -> list[CategoryPage]:
        category = (category or "all").strip().lower()
        if category not in STORE_CATEGORIES:
            raise ValueError(
                f"Unknown category {category!r}. Expected one of: {', '.join(STORE_CATEGORIES)}"
            )
        if limit is not None and limit <= 0:
            limit = None
        offset = max(0, offset or 0)
        wanted_constellation = constellation.strip().lower() if constellation else None

        def keep(record: EquatorialRecord) -> bool:
            if min_magnitude is not None:
                if record.magnitude is None or record.magnitude > min_magnitude:
                    return False
            if wanted_constellation:
                if not record.constellation or record.constellation.lower() != wanted_constellation:
                    return False
            return True

        if category == "all":
            groups = ("stars",) + DSO_GROUPS
        elif category == "dso":
            groups = DSO_GROUPS
        else:
            groups = (category,)

        pages = []
        for group in groups:
            if group == "stars":
                names = self._star_names(keep)
            else:
                names = self._dso_names(group, keep)
            pages.append(
                CategoryPage(
                    category=CATEGORY_LABELS[group],
                    total=len(names),
                    offset=offset,
                    limit=limit if limit is not None else len(names),
                    names=paginate(names, offset, limit),
                )
            )
        return pages

    def _star_names(self, keep) -> list[str]:
        seen = set()
        names = []
        for record in self._stars.values():
            if not keep(record):
                continue
            if record.key in seen:
                continue
            seen.add(record.key)
            names.append(record.name)
        names.sort()
        return names

    def _dso_names(self, group: str, keep) -> list[str]:
        keys = [
            key
            for key, record in self._dsos.items()
            if dso_group(key) == group and keep(record)
        ]
        if group == "other":
            keys.sort()
        else:
            keys.sort(key=_catalog_number)
        return [self._dsos[key].name for key in keys]
