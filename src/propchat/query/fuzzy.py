"""Fuzzy fallback matcher for name searches that found no exact rows."""

from typing import List, Optional, Sequence, Tuple

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process
from sqlalchemy.orm import Session

from ..utils.logging import get_logger
from .models import PropertyRecord, QueryResult
from .pagination import PageRequest, window
from .store import scan_store

logger = get_logger(__name__)

# Candidates scanned in-process; the fuzzy total is a lower bound past this cap
FUZZY_SAMPLE_CAP = 100

# Max distance (1 - similarity) a match may have: 0.3 == 70% similarity
FUZZY_DISTANCE_THRESHOLD = 0.3

FUZZY_FIELDS = ("name", "address")


def field_distance(processed_term: str, value: Optional[str]) -> Optional[float]:
    """
    Distance in [0, 1] between an already-processed term and a raw field value.

    Scored with WRatio on lowercased, punctuation-free text, so a term can
    match part of a longer name or address. Returns None for empty fields
    so they never match.
    """
    if not value:
        return None
    processed_value = default_process(value)
    if not processed_value:
        return None
    similarity = fuzz.WRatio(processed_term, processed_value)
    return (100.0 - similarity) / 100.0


def record_distance(processed_term: str, record: PropertyRecord) -> Optional[float]:
    """Best (smallest) distance over the fuzzy fields of one record."""
    distances = [
        d for d in (field_distance(processed_term, getattr(record, f)) for f in FUZZY_FIELDS)
        if d is not None
    ]
    return min(distances) if distances else None


def rank_candidates(
    term: str,
    candidates: Sequence[PropertyRecord],
    threshold: float = FUZZY_DISTANCE_THRESHOLD,
) -> List[Tuple[PropertyRecord, float]]:
    """
    Score and rank candidates against a search term.

    Args:
        term: Raw search term
        candidates: Records in store order
        threshold: Max distance to keep (inclusive)

    Returns:
        (record, distance) pairs with distance <= threshold, best first.
        Ties keep store order.
    """
    processed_term = default_process(term or "")
    if not processed_term:
        return []

    scored = []
    for record in candidates:
        distance = record_distance(processed_term, record)
        if distance is not None and distance <= threshold:
            scored.append((record, distance))

    # sorted() is stable, so equal distances stay in store order
    return sorted(scored, key=lambda pair: pair[1])


def fuzzy_search(
    session: Session,
    term: str,
    offset: int = 0,
    limit: int = 5,
    sample_cap: int = FUZZY_SAMPLE_CAP,
    threshold: float = FUZZY_DISTANCE_THRESHOLD,
) -> QueryResult:
    """
    Approximate name search over a capped sample of the store.

    ``total`` counts matches inside the sample only, so it undercounts when
    the table is larger than ``sample_cap``.

    Args:
        session: SQLAlchemy session
        term: Name term to match against name and address
        offset: Number of ranked matches to skip
        limit: Page size
        sample_cap: Max candidate records fetched from the store
        threshold: Max distance kept

    Returns:
        QueryResult with match_mode "fuzzy"
    """
    page = PageRequest(offset=offset, limit=limit)
    sample = scan_store(session, limit=sample_cap)
    if not sample.ok or not sample.items:
        return QueryResult(
            items=[],
            total=0,
            offset=page.offset,
            limit=page.limit,
            match_mode="fuzzy",
            error=sample.error,
        )

    ranked = [record for record, _ in rank_candidates(term, sample.items, threshold=threshold)]
    logger.info(
        f"Fuzzy fallback for '{term}': {len(ranked)} of {len(sample.items)} sampled candidates matched"
    )

    return QueryResult(
        items=window(ranked, page),
        total=len(ranked),
        offset=page.offset,
        limit=page.limit,
        match_mode="fuzzy",
    )
