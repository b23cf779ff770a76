"""Query resolution engine: store adapter, fuzzy fallback, aggregation.

Rules for this package:

1. Only ``store.py`` talks to the database layer; everything else goes
   through ``query_store`` / ``scan_store``.
2. Store failures never propagate: they become empty results or ``None``.
3. Page size is always a parameter; ``DEFAULT_PAGE_SIZE`` is only a default.
"""

from .aggregation import AggregationKind, aggregate, compute_aggregation
from .fuzzy import FUZZY_DISTANCE_THRESHOLD, FUZZY_SAMPLE_CAP, fuzzy_search, rank_candidates
from .models import LocationFilter, PropertyFilter, PropertyRecord, QueryResult, StoreResult
from .pagination import DEFAULT_PAGE_SIZE, PageRequest, has_more
from .resolver import resolve
from .store import query_store, scan_store

__all__ = [
    "AggregationKind",
    "DEFAULT_PAGE_SIZE",
    "FUZZY_DISTANCE_THRESHOLD",
    "FUZZY_SAMPLE_CAP",
    "LocationFilter",
    "PageRequest",
    "PropertyFilter",
    "PropertyRecord",
    "QueryResult",
    "StoreResult",
    "aggregate",
    "compute_aggregation",
    "fuzzy_search",
    "has_more",
    "query_store",
    "rank_candidates",
    "resolve",
    "scan_store",
]
