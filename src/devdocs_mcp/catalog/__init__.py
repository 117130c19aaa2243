"""Resource catalog: which URLs back each technology and category."""

from .catalog import (
    ANGULAR_DOCS_URLS,
    ANGULAR_FULL_URL,
    ANGULAR_SUMMARY_URL,
    CATEGORY_HINTS,
    DEFAULT_RESOURCES,
    CatalogFile,
    ResourceCatalog,
    default_catalog,
    load_catalog,
)

__all__ = [
    "ANGULAR_DOCS_URLS",
    "ANGULAR_FULL_URL",
    "ANGULAR_SUMMARY_URL",
    "CATEGORY_HINTS",
    "DEFAULT_RESOURCES",
    "CatalogFile",
    "ResourceCatalog",
    "default_catalog",
    "load_catalog",
]
