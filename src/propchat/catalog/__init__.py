"""Schema description provider with a process-wide cache."""

from .schema_catalog import (
    CatalogState,
    ColumnMetadata,
    SchemaCatalog,
    default_catalog,
    generate_schema_documentation,
    get_properties_schema,
    get_static_properties_schema,
    invalidate_schema_cache,
)

__all__ = [
    "CatalogState",
    "ColumnMetadata",
    "SchemaCatalog",
    "default_catalog",
    "generate_schema_documentation",
    "get_properties_schema",
    "get_static_properties_schema",
    "invalidate_schema_cache",
]
