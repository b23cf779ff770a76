"""Tests for the aggregation engine."""

from propchat.query.aggregation import (
    AggregationKind,
    CountResult,
    DistinctValuesResult,
    TopOwnerResult,
    aggregate,
    compute_aggregation,
)
from propchat.query.models import PropertyRecord


def test_owner_with_most_properties_scenario(session, seed, sample_properties):
    seed(session, sample_properties)

    result = aggregate(session, "owner_with_most_properties")

    assert result == TopOwnerResult(name="Alice", count=2)


def test_top_owner_on_empty_store(session):
    result = aggregate(session, AggregationKind.OWNER_WITH_MOST_PROPERTIES)

    assert isinstance(result, TopOwnerResult)
    assert result.name == ""
    assert result.count == 0


def test_top_owner_tie_goes_to_first_owner_in_store_order():
    records = [
        PropertyRecord(id=1, name="A", owner="Bob"),
        PropertyRecord(id=2, name="B", owner="Alice"),
        PropertyRecord(id=3, name="C", owner="Alice"),
        PropertyRecord(id=4, name="D", owner="Bob"),
    ]

    result = compute_aggregation(records, "owner_with_most_properties")

    assert result.name == "Bob"
    assert result.count == 2


def test_top_owner_skips_records_without_owner():
    records = [PropertyRecord(id=i, name=str(i), owner=None) for i in range(3)]
    records.append(PropertyRecord(id=9, name="x", owner="Zed"))

    result = compute_aggregation(records, "owner_with_most_properties")

    assert result == TopOwnerResult(name="Zed", count=1)


def test_owner_count_is_distinct_non_empty_in_first_seen_order(session, seed):
    seed(session, [
        {"name": "A", "owner": "Carol"},
        {"name": "B", "owner": "Alice"},
        {"name": "C", "owner": "Carol"},
        {"name": "D", "owner": None},
        {"name": "E", "owner": ""},
    ])

    result = aggregate(session, "owner_count")

    assert isinstance(result, DistinctValuesResult)
    assert result.kind == "owner_count"
    assert result.count == 2
    assert result.values == ["Carol", "Alice"]


def test_area_count(session, seed):
    seed(session, [
        {"name": "A", "area": "North"},
        {"name": "B", "area": "South"},
        {"name": "C", "area": "North"},
        {"name": "D"},
    ])

    result = aggregate(session, "area_count")

    assert result.kind == "area_count"
    assert result.count == 2
    assert result.values == ["North", "South"]


def test_total_properties_counts_every_record(session, seed):
    seed(session, [{"name": f"P{i}"} for i in range(7)])

    assert aggregate(session, "total_properties") == CountResult(count=7)
    assert aggregate(session, " TOTAL_PROPERTIES ") == CountResult(count=7)


def test_total_properties_is_not_capped(session, seed):
    seed(session, [{"name": f"P{i}"} for i in range(130)])

    assert aggregate(session, "total_properties").count == 130


def test_unknown_kind_is_absent(session, seed, sample_properties):
    seed(session, sample_properties)

    assert aggregate(session, "average_price") is None
    assert aggregate(session, None) is None
    assert compute_aggregation([], "nope") is None


def test_store_error_is_absent(broken_session):
    assert aggregate(broken_session, "total_properties") is None
    assert aggregate(broken_session, "owner_with_most_properties") is None
