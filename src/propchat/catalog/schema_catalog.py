"""Describes the queryable property attributes for the intent classifier."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database.property_repo import describe_property_columns
from ..utils.logging import get_logger

logger = get_logger(__name__)


class ColumnMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    display_name: str = Field(..., alias="displayName")
    type: str
    description: str


class CatalogState(str, Enum):
    UNINITIALIZED = "uninitialized"
    COMPUTED = "computed"
    INVALIDATED = "invalidated"


_STATIC_COLUMNS: List[Dict[str, str]] = [
    {"name": "id", "displayName": "ID", "type": "integer", "description": "Unique property identifier"},
    {"name": "name", "displayName": "Name", "type": "text", "description": "Property name"},
    {"name": "slug", "displayName": "Slug", "type": "text", "description": "URL-friendly property slug"},
    {"name": "address", "displayName": "Address", "type": "text", "description": "Property street address"},
    {"name": "created_at", "displayName": "Created At", "type": "timestamptz", "description": "When the property was added"},
    {"name": "wifi", "displayName": "WiFi", "type": "boolean", "description": "WiFi availability"},
    {"name": "area", "displayName": "Area", "type": "text", "description": "Property area or region"},
    {"name": "owner", "displayName": "Owner", "type": "text", "description": "Property owner name"},
]


def get_static_properties_schema() -> List[ColumnMetadata]:
    """Fallback column list used when live introspection fails."""
    return [ColumnMetadata(**col) for col in _STATIC_COLUMNS]


def _column_to_metadata(column_name: str, data_type: str) -> ColumnMetadata:
    display = column_name.replace("_", " ")
    return ColumnMetadata(
        name=column_name,
        display_name=display,
        type=data_type,
        description=f"Property {display}",
    )


def _introspect(session: Session) -> List[ColumnMetadata]:
    try:
        columns = describe_property_columns(session)
    except SQLAlchemyError as exc:
        logger.warning(f"Failed to introspect properties table, using static schema: {exc}")
        return get_static_properties_schema()

    if not columns:
        logger.warning("Properties table has no columns, using static schema")
        return get_static_properties_schema()

    schema = [_column_to_metadata(c["column_name"], c["data_type"]) for c in columns]
    return sorted(schema, key=lambda col: col.name)


class SchemaCatalog:
    """
    Compute-once, serve-many cache of the properties schema.

    State moves UNINITIALIZED -> COMPUTED, and COMPUTED -> INVALIDATED only
    through ``invalidate()``. No lock: concurrent misses may both compute
    and the last writer wins, which is harmless because the result depends
    only on the backing schema.
    """

    def __init__(self) -> None:
        self._schema: Optional[List[ColumnMetadata]] = None
        self._state = CatalogState.UNINITIALIZED

    @property
    def state(self) -> CatalogState:
        return self._state

    def get(self, session: Session) -> List[ColumnMetadata]:
        schema = self._schema
        if self._state is CatalogState.COMPUTED and schema is not None:
            return list(schema)

        schema = _introspect(session)
        self._schema = schema
        self._state = CatalogState.COMPUTED
        logger.debug(f"Schema catalog computed with {len(schema)} columns")
        return list(schema)

    def invalidate(self) -> None:
        self._schema = None
        self._state = CatalogState.INVALIDATED


default_catalog = SchemaCatalog()


def get_properties_schema(session: Session) -> List[ColumnMetadata]:
    return default_catalog.get(session)


def invalidate_schema_cache() -> None:
    default_catalog.invalidate()


def generate_schema_documentation(schema: List[ColumnMetadata]) -> str:
    """Render the column list handed to the intent classifier prompt."""
    columns = "\n".join(f"- {col.name} ({col.type}): {col.description}" for col in schema)
    return (
        "Available property columns:\n"
        f"{columns}\n\n"
        "Note: These are the columns you can query. When the user asks for "
        "information like wifi availability, area, or owner, map these to the "
        "available columns."
    )
