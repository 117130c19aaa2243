"""Static technology -> category -> URL catalog.

The catalog is an immutable value built once at startup and handed to the
tools, so adding a technology means editing data (or an extra JSON file),
never request-handling code. Lookups are exact and case-sensitive.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from devdocs_mcp.foundation.errors import CatalogError

ANGULAR_FULL_URL = "https://angular.dev/context/llm-files/llms-full.txt"
ANGULAR_SUMMARY_URL = "https://angular.dev/llms.txt"
ANGULAR_DOCS_URLS: tuple[str, str] = (ANGULAR_FULL_URL, ANGULAR_SUMMARY_URL)

DEFAULT_RESOURCES: dict[str, dict[str, list[str]]] = {
    "angular": {
        "docs": [ANGULAR_FULL_URL, ANGULAR_SUMMARY_URL],
        "guides": ["https://angular.dev/guide", "https://angular.dev/tutorial"],
        "api": ["https://angular.dev/api"],
        "cli": ["https://angular.dev/cli"],
    },
    "typescript": {
        "docs": ["https://www.typescriptlang.org/docs/"],
        "handbook": ["https://www.typescriptlang.org/docs/handbook/"],
    },
    "rxjs": {
        "docs": ["https://rxjs.dev/guide/overview"],
        "operators": ["https://rxjs.dev/guide/operators"],
    },
    "testing": {
        "jest": ["https://jestjs.io/docs/getting-started"],
    },
    "nx": {
        "docs": ["https://nx.dev/getting-started/intro"],
        "recipes": ["https://nx.dev/recipes"],
    },
}

# Advertised in the get_tech_docs schema; "jasmine" has no URLs and falls back to the whole technology.
CATEGORY_HINTS: tuple[str, ...] = (
    "docs", "guides", "api", "cli", "handbook", "operators", "jest", "jasmine", "recipes",
)

Categories = Mapping[str, tuple[str, ...]]


class CatalogFile(BaseModel):
    """Shape of an extra catalog file: {technology: {category: [url, ...]}}."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    technologies: dict[str, dict[str, list[str]]] = Field(default_factory=dict)

    @field_validator("technologies")
    @classmethod
    def _check_urls(cls, v: dict[str, dict[str, list[str]]]) -> dict[str, dict[str, list[str]]]:
        for tech, cats in v.items():
            if not tech:
                raise ValueError("technology names must be non-empty")
            for cat, urls in cats.items():
                bad = [u for u in urls if not u.startswith(("http://", "https://"))]
                if bad:
                    raise ValueError(f"{tech}.{cat}: URLs must start with http:// or https:// ({bad[0]})")
        return v


class ResourceCatalog(Mapping[str, Categories]):
    """Read-only technology -> category -> URLs table.

    Example:
        >>> catalog = ResourceCatalog(DEFAULT_RESOURCES)
        >>> catalog.resolve("rxjs", "operators")
        ('https://rxjs.dev/guide/operators',)
        >>> catalog.resolve("bogus") is None
        True
    """

    __slots__ = ("_data",)

    def __init__(self, resources: Mapping[str, Mapping[str, list[str] | tuple[str, ...]]]) -> None:
        self._data: Mapping[str, Categories] = MappingProxyType({
            tech: MappingProxyType({cat: tuple(urls) for cat, urls in cats.items()})
            for tech, cats in resources.items()
        })

    def __getitem__(self, technology: str) -> Categories:
        return self._data[technology]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def technologies(self) -> tuple[str, ...]:
        return tuple(self._data)

    def categories(self) -> tuple[str, ...]:
        """Every category name, in first-seen order."""
        return tuple(dict.fromkeys(cat for cats in self._data.values() for cat in cats))

    def resolve(self, technology: str, category: str | None = None) -> tuple[str, ...] | None:
        """URLs for a technology, narrowed to ``category`` when it exists there.

        Returns None for an unknown technology. An omitted or unknown category
        yields all of the technology's URLs, flattened in declaration order.
        """
        cats = self._data.get(technology)
        if cats is None:
            return None
        if category and category in cats:
            return cats[category]
        return tuple(url for urls in cats.values() for url in urls)

    def merged(self, extra: Mapping[str, Mapping[str, list[str] | tuple[str, ...]]]) -> ResourceCatalog:
        """New catalog with ``extra`` layered on top (same-named categories are replaced)."""
        combined: dict[str, dict[str, tuple[str, ...]]] = {t: dict(c) for t, c in self._data.items()}
        for tech, cats in extra.items():
            combined.setdefault(tech, {}).update({cat: tuple(urls) for cat, urls in cats.items()})
        return ResourceCatalog(combined)

    def to_dict(self) -> dict[str, dict[str, list[str]]]:
        return {t: {c: list(u) for c, u in cats.items()} for t, cats in self._data.items()}


def default_catalog() -> ResourceCatalog:
    return ResourceCatalog(DEFAULT_RESOURCES)


def load_catalog(path: Path | str | None = None) -> ResourceCatalog:
    """Built-in catalog, optionally merged with a JSON file.

    The file is either ``{"technologies": {...}}`` or the bare mapping.
    """
    catalog = default_catalog()
    if path is None:
        return catalog

    path = Path(path)
    try:
        raw = orjson.loads(path.read_bytes())
    except OSError as e:
        raise CatalogError(f"Cannot read catalog file {path}: {e}") from e
    except orjson.JSONDecodeError as e:
        raise CatalogError(f"Catalog file {path} is not valid JSON: {e}") from e

    if isinstance(raw, dict) and "technologies" not in raw:
        raw = {"technologies": raw}
    try:
        extra = CatalogFile.model_validate(raw)
    except ValidationError as e:
        raise CatalogError(f"Catalog file {path} has the wrong shape: {e}") from e
    return catalog.merged(extra.technologies)
