"""Pydantic models for filters, records and query results."""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .pagination import has_more as _has_more

_ABSENT_MARKERS = {"", "null", "none"}


def _clean_term(value: Any) -> Optional[str]:
    """Collapse non-strings, blanks and null markers to None."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    if value.lower() in _ABSENT_MARKERS:
        return None
    return value


class LocationFilter(BaseModel):
    city: Optional[str] = None
    state: Optional[str] = None

    @field_validator("city", "state", mode="before")
    @classmethod
    def _clean(cls, value: Any) -> Optional[str]:
        return _clean_term(value)


class PropertyFilter(BaseModel):
    """
    Structured query constraints.

    Every field is optional and absence means "no constraint". Input is
    coerced permissively: wrong types and blank strings become absent
    instead of failing validation.
    """
    name_term: Optional[str] = None
    location: LocationFilter = Field(default_factory=LocationFilter)
    info_types: List[str] = Field(default_factory=list)

    @field_validator("name_term", mode="before")
    @classmethod
    def _clean_name(cls, value: Any) -> Optional[str]:
        return _clean_term(value)

    @field_validator("location", mode="before")
    @classmethod
    def _clean_location(cls, value: Any) -> Any:
        if isinstance(value, LocationFilter):
            return value
        if not isinstance(value, dict):
            return {}
        return value

    @field_validator("info_types", mode="before")
    @classmethod
    def _clean_info_types(cls, value: Any) -> List[str]:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            return []
        cleaned = []
        for item in value:
            term = _clean_term(item)
            if term:
                cleaned.append(term)
        return cleaned

    @property
    def is_unconstrained(self) -> bool:
        return not (self.name_term or self.location.city or self.location.state)


class PropertyRecord(BaseModel):
    """One property as read from the store. Immutable from the core's view."""
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    name: str = ""
    slug: Optional[str] = None
    address: Optional[str] = None
    owner: Optional[str] = None
    area: Optional[str] = None
    wifi: Optional[bool] = None
    created_at: Optional[str] = None


class StoreResult(BaseModel):
    """Outcome of a store call: either Ok(items, total) or a store error."""
    items: List[PropertyRecord] = Field(default_factory=list)
    total: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class QueryResult(BaseModel):
    """
    A resolved page.

    ``total`` is measured over the universe of ``match_mode``: the whole
    store for exact matches, the capped candidate sample for fuzzy ones.
    """
    items: List[PropertyRecord] = Field(default_factory=list)
    total: int = 0
    offset: int = 0
    limit: int
    match_mode: Literal["exact", "fuzzy"] = "exact"
    error: Optional[str] = None

    @computed_field
    @property
    def has_more(self) -> bool:
        return _has_more(self.offset, self.limit, self.total)

    @property
    def ok(self) -> bool:
        return self.error is None
