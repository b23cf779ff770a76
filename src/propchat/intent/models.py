"""Typed output of the external intent classifier."""

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from ..query.models import PropertyFilter

FALLBACK_RESPONSE_TEXT = "I couldn't understand your question. Could you please rephrase it?"


class Intent(str, Enum):
    PROPERTY_LOOKUP = "property_lookup"
    LOCATION_FILTER = "location_filter"
    AGGREGATION = "aggregation"
    METADATA = "metadata"
    UNKNOWN = "unknown"


def filter_from_payload(raw: Any) -> PropertyFilter:
    """
    Build a PropertyFilter from the classifier's ``filters`` object.

    Accepts the wire names (property_name, info_type) as well as the
    internal ones. Anything malformed is dropped, never rejected.
    """
    if not isinstance(raw, dict):
        return PropertyFilter()
    return PropertyFilter(
        name_term=raw.get("property_name", raw.get("name_term")),
        location=raw.get("location"),
        info_types=raw.get("info_type", raw.get("info_types")),
    )


class ParsedQuery(BaseModel):
    intent: Intent = Intent.UNKNOWN
    filters: PropertyFilter = Field(default_factory=PropertyFilter)
    response_text: str = ""

    @field_validator("intent", mode="before")
    @classmethod
    def _coerce_intent(cls, value: Any) -> Intent:
        if isinstance(value, Intent):
            return value
        if isinstance(value, str):
            try:
                return Intent(value.strip().lower())
            except ValueError:
                return Intent.UNKNOWN
        return Intent.UNKNOWN

    @field_validator("filters", mode="before")
    @classmethod
    def _coerce_filters(cls, value: Any) -> PropertyFilter:
        if isinstance(value, PropertyFilter):
            return value
        return filter_from_payload(value)

    @field_validator("response_text", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ParsedQuery":
        return cls(
            intent=payload.get("intent"),
            filters=payload.get("filters"),
            response_text=payload.get("response_text"),
        )


def fallback_parsed_query() -> ParsedQuery:
    return ParsedQuery(intent=Intent.UNKNOWN, response_text=FALLBACK_RESPONSE_TEXT)
