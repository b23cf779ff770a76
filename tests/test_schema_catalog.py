"""Tests for the schema catalog and its cache lifecycle."""

from propchat.catalog import schema_catalog as catalog_module
from propchat.catalog.schema_catalog import (
    CatalogState,
    ColumnMetadata,
    SchemaCatalog,
    generate_schema_documentation,
    get_static_properties_schema,
)


def test_introspected_schema_is_sorted_and_described(session):
    catalog = SchemaCatalog()

    schema = catalog.get(session)

    names = [col.name for col in schema]
    assert names == sorted(names)
    created = next(col for col in schema if col.name == "created_at")
    assert created.display_name == "created at"
    assert created.description == "Property created at"
    assert catalog.state is CatalogState.COMPUTED


def test_falls_back_to_static_schema_when_introspection_fails(broken_session):
    catalog = SchemaCatalog()

    schema = catalog.get(broken_session)

    assert schema == get_static_properties_schema()
    assert [col.name for col in schema][:2] == ["id", "name"]
    assert catalog.state is CatalogState.COMPUTED


def test_falls_back_when_no_columns(session, monkeypatch):
    monkeypatch.setattr(catalog_module, "describe_property_columns", lambda _s: [])

    schema = SchemaCatalog().get(session)

    assert schema == get_static_properties_schema()


def test_schema_is_computed_once(session, monkeypatch):
    calls = {"count": 0}

    def fake_describe(_session):
        calls["count"] += 1
        return [{"column_name": "name", "data_type": "varchar"}]

    monkeypatch.setattr(catalog_module, "describe_property_columns", fake_describe)
    catalog = SchemaCatalog()

    first = catalog.get(session)
    second = catalog.get(session)

    assert first == second
    assert calls["count"] == 1


def test_invalidate_forces_recompute(session, monkeypatch):
    columns = [{"column_name": "name", "data_type": "varchar"}]
    monkeypatch.setattr(catalog_module, "describe_property_columns", lambda _s: list(columns))
    catalog = SchemaCatalog()
    assert catalog.state is CatalogState.UNINITIALIZED

    catalog.get(session)
    columns.append({"column_name": "owner", "data_type": "varchar"})
    assert [c.name for c in catalog.get(session)] == ["name"]

    catalog.invalidate()
    assert catalog.state is CatalogState.INVALIDATED
    assert [c.name for c in catalog.get(session)] == ["name", "owner"]
    assert catalog.state is CatalogState.COMPUTED


def test_returned_list_does_not_alias_cache(session):
    catalog = SchemaCatalog()

    catalog.get(session).clear()

    assert catalog.get(session)


def test_column_metadata_serializes_display_name_alias():
    col = ColumnMetadata(name="wifi", displayName="WiFi", type="boolean", description="WiFi availability")

    assert col.model_dump(by_alias=True) == {
        "name": "wifi",
        "displayName": "WiFi",
        "type": "boolean",
        "description": "WiFi availability",
    }


def test_schema_documentation_lists_columns():
    doc = generate_schema_documentation(get_static_properties_schema())

    assert doc.startswith("Available property columns:")
    assert "- wifi (boolean): WiFi availability" in doc
    assert "- owner (text): Property owner name" in doc
