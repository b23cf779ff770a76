"""Query resolution: exact store query, fuzzy fallback, pagination."""

from sqlalchemy.orm import Session

from ..utils.logging import get_logger
from .fuzzy import FUZZY_DISTANCE_THRESHOLD, FUZZY_SAMPLE_CAP, fuzzy_search
from .models import PropertyFilter, QueryResult
from .pagination import DEFAULT_PAGE_SIZE, PageRequest, has_more
from .store import query_store

logger = get_logger(__name__)

__all__ = ["has_more", "resolve"]


def resolve(
    session: Session,
    filters: PropertyFilter,
    offset: int = 0,
    limit: int = DEFAULT_PAGE_SIZE,
    sample_cap: int = FUZZY_SAMPLE_CAP,
    threshold: float = FUZZY_DISTANCE_THRESHOLD,
) -> QueryResult:
    """
    Resolve a filter to one page of properties.

    The exact result is returned unless it matched nothing at all and a
    name term was given; then the fuzzy matcher runs on the name term alone
    (location constraints are not applied to the fuzzy path). Exact and
    fuzzy results are never merged.

    Args:
        session: SQLAlchemy session
        filters: Property filter
        offset: Number of matches to skip
        limit: Page size
        sample_cap: Candidate cap for the fuzzy path
        threshold: Max fuzzy distance

    Returns:
        QueryResult from whichever path produced it
    """
    page = PageRequest(offset=offset, limit=limit)
    if filters.is_unconstrained:
        logger.debug("Unconstrained filter, paging the whole store in natural order")
    exact = query_store(session, filters, page)

    if not exact.items and exact.total == 0 and filters.name_term:
        logger.info(f"No exact matches for '{filters.name_term}', trying fuzzy fallback")
        return fuzzy_search(
            session,
            filters.name_term,
            offset=page.offset,
            limit=page.limit,
            sample_cap=sample_cap,
            threshold=threshold,
        )

    return QueryResult(
        items=exact.items,
        total=exact.total,
        offset=page.offset,
        limit=page.limit,
        match_mode="exact",
        error=exact.error,
    )
