"""Discovery listing of every object name the resolver can answer for."""
from dataclasses import dataclass, field

from skyhop.ephemeris.types import SOLAR_SYSTEM_BODIES
from .store import CategoryPage, CatalogStore, STORE_CATEGORIES, paginate

CATEGORIES = ("planets", "stars", "messier", "ic", "ngc", "dso", "all")

SOLAR_SYSTEM_LABEL = "Solar System Objects"


@dataclass
class ObjectListing:
    categories: list[CategoryPage] = field(default_factory=list)

    @property
    def total_categories(self) -> int:
        return len(self.categories)

    @property
    def total_objects(self) -> int:
        return sum(page.object_count for page in self.categories)


def _planet_page(limit: int | None, offset: int) -> CategoryPage:
    names = [body.capitalize() for body in SOLAR_SYSTEM_BODIES]
    page = paginate(names, offset, limit)
    return CategoryPage(
        category=SOLAR_SYSTEM_LABEL,
        total=len(names),
        offset=offset,
        limit=limit if limit is not None else len(names),
        names=page,
    )


def list_objects(
    store: CatalogStore,
    category: str | None = None,
    limit: int | None = None,
    offset: int = 0,
    min_magnitude: float | None = None,
    constellation: str | None = None,
) -> ObjectListing:
    """List object names by category with per-category pagination.

    Planets ignore the magnitude and constellation filters. Raises
    ``ValueError`` for an unknown category.
    """
    category = (category or "all").strip().lower()
    if category not in CATEGORIES:
        raise ValueError(
            f"Unknown category {category!r}. Available categories: {', '.join(CATEGORIES)}"
        )
    if limit is not None and limit <= 0:
        limit = None
    offset = max(0, offset or 0)

    pages = []
    if category in ("planets", "all"):
        pages.append(_planet_page(limit, offset))
    if category != "planets" and category in STORE_CATEGORIES:
        pages.extend(
            store.list_by_category(
                category,
                limit=limit,
                offset=offset,
                min_magnitude=min_magnitude,
                constellation=constellation,
            )
        )
    return ObjectListing(categories=pages)
