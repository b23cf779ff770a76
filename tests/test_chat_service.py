"""Tests for the chat service (classifier replaced by a stub)."""

import json

import pytest

from propchat.catalog.schema_catalog import SchemaCatalog
from propchat.chat.service import answer_question
from propchat.intent.models import FALLBACK_RESPONSE_TEXT, Intent, ParsedQuery
from propchat.output.chat_reply import NO_MATCH_TEXT, render_json


class StubClassifier:
    """Returns a fixed payload and records what it was asked."""

    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    def classify(self, message, schema_documentation):
        self.calls.append((message, schema_documentation))
        return ParsedQuery.from_payload(self.payload)


@pytest.fixture
def catalog():
    return SchemaCatalog()


def test_lookup_reply_has_table_and_paging_fields(session, seed, sample_properties, catalog):
    seed(session, sample_properties)
    classifier = StubClassifier({
        "intent": "property_lookup",
        "filters": {"property_name": "Ocean View"},
        "response_text": "Here it is.",
    })

    reply = answer_question(session, "Tell me about Ocean View", classifier, catalog=catalog)

    assert reply.intent is Intent.PROPERTY_LOOKUP
    assert [r.name for r in reply.results] == ["Ocean View"]
    assert reply.total == 1
    assert reply.has_more is False
    assert reply.match_mode == "exact"
    assert reply.response_text == "Found 1 property/properties. Showing 1 of 1."
    assert "| Name | Address | Owner |" in reply.response
    assert "| Ocean View | - | Alice |" in reply.response

    message, docs = classifier.calls[0]
    assert message == "Tell me about Ocean View"
    assert docs.startswith("Available property columns:")


def test_misspelled_lookup_uses_fuzzy_fallback(session, seed, sample_properties, catalog):
    seed(session, sample_properties)
    classifier = StubClassifier({"intent": "property_lookup", "filters": {"property_name": "Ocean Viw"}})

    reply = answer_question(session, "Ocean Viw?", classifier, catalog=catalog)

    assert reply.match_mode == "fuzzy"
    assert [r.name for r in reply.results] == ["Ocean View", "Ocean Vista"]


def test_location_reply_pages(session, seed, new_jersey_properties, catalog):
    seed(session, new_jersey_properties)
    classifier = StubClassifier({
        "intent": "location_filter",
        "filters": {"location": {"state": "New Jersey"}},
    })

    first = answer_question(session, "Properties in New Jersey", classifier, catalog=catalog)
    last = answer_question(session, "Properties in New Jersey", classifier, offset=10, catalog=catalog)

    assert len(first.results) == 5
    assert first.total == 12
    assert first.has_more is True
    assert first.response_text == "Found 12 properties in that location. Showing 5 of 12."
    assert len(last.results) == 2
    assert last.has_more is False
    assert last.current_offset == 10


def test_location_without_matches(session, seed, new_jersey_properties, catalog):
    seed(session, new_jersey_properties)
    classifier = StubClassifier({"intent": "location_filter", "filters": {"location": {"state": "Oregon"}}})

    reply = answer_question(session, "Oregon?", classifier, catalog=catalog)

    assert reply.results == []
    assert reply.response_text == NO_MATCH_TEXT[Intent.LOCATION_FILTER]
    assert reply.response == NO_MATCH_TEXT[Intent.LOCATION_FILTER]


def test_info_types_add_columns(session, seed, catalog):
    seed(session, [{"name": "Ocean View", "owner": "Alice", "wifi": True}])
    classifier = StubClassifier({
        "intent": "property_lookup",
        "filters": {"property_name": "Ocean", "info_type": ["wifi"]},
    })

    reply = answer_question(session, "Does Ocean View have wifi?", classifier, catalog=catalog)

    assert "| Name | Address | Owner | WiFi |" in reply.response
    assert "| Ocean View | - | Alice | Yes |" in reply.response


def test_aggregation_top_owner(session, seed, sample_properties, catalog):
    seed(session, sample_properties)
    classifier = StubClassifier({
        "intent": "aggregation",
        "filters": {"info_type": ["owner_with_most_properties"]},
    })

    reply = answer_question(session, "Who owns the most?", classifier, catalog=catalog)

    assert reply.aggregation == {"kind": "owner_with_most_properties", "name": "Alice", "count": 2}
    assert reply.response_text == "Alice has the most properties with 2 properties."
    assert reply.results == []


def test_aggregation_defaults_to_total(session, seed, sample_properties, catalog):
    seed(session, sample_properties)
    classifier = StubClassifier({"intent": "aggregation", "filters": {}})

    reply = answer_question(session, "How many properties?", classifier, catalog=catalog)

    assert reply.aggregation == {"kind": "total_properties", "count": 3}
    assert reply.response_text == "There are 3 properties."


def test_unsupported_aggregation_keeps_draft(session, seed, sample_properties, catalog):
    seed(session, sample_properties)
    classifier = StubClassifier({
        "intent": "aggregation",
        "filters": {"info_type": ["average_rent"]},
        "response_text": "Let me check.",
    })

    reply = answer_question(session, "Average rent?", classifier, catalog=catalog)

    assert reply.aggregation is None
    assert reply.response_text == "Let me check."


def test_metadata_lists_schema(session, catalog):
    classifier = StubClassifier({"intent": "metadata"})

    reply = answer_question(session, "What do you know?", classifier, catalog=catalog)

    assert reply.response_text.startswith("I have information about 8 property attributes including:")
    assert "wifi" in reply.response_text


def test_unknown_keeps_classifier_text(session, catalog):
    classifier = StubClassifier({"intent": "unknown", "response_text": FALLBACK_RESPONSE_TEXT})

    reply = answer_question(session, "asdf", classifier, catalog=catalog)

    assert reply.intent is Intent.UNKNOWN
    assert reply.response == FALLBACK_RESPONSE_TEXT
    assert reply.match_mode is None


def test_reply_serializes_to_json(session, seed, sample_properties, catalog):
    seed(session, sample_properties)
    classifier = StubClassifier({"intent": "property_lookup", "filters": {"property_name": "Mountain"}})

    payload = json.loads(render_json(answer_question(session, "Mountain?", classifier, catalog=catalog)))

    assert payload["intent"] == "property_lookup"
    assert payload["results"][0]["name"] == "Mountain Lodge"
    assert payload["has_more"] is False
