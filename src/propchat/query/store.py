"""Record store adapter: the only query module that touches the database layer."""

from typing import TYPE_CHECKING, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database.property_repo import count_properties, fetch_properties, scan_properties
from ..utils.logging import get_logger
from .models import PropertyFilter, PropertyRecord, StoreResult
from .pagination import PageRequest

if TYPE_CHECKING:
    from ..database.schema import Property

logger = get_logger(__name__)


def _property_row_to_record(row: "Property") -> PropertyRecord:
    """Convert Property ORM row to PropertyRecord Pydantic model."""
    return PropertyRecord(
        id=row.id,
        name=row.name or "",
        slug=row.slug,
        address=row.address,
        owner=row.owner,
        area=row.area,
        wifi=row.wifi,
        created_at=row.created_at,
    )


def _describe_error(exc: Exception) -> str:
    return f"{type(exc).__name__}: {exc}".splitlines()[0]


def query_store(session: Session, filters: PropertyFilter, page: PageRequest) -> StoreResult:
    """
    Run an exact filter query and return one page plus the full match count.

    Count and page fetch share the same filter, so ``total`` and the window
    never drift. Any store error yields an empty result with ``error`` set.

    Args:
        session: SQLAlchemy session
        filters: Property filter (absent fields are unconstrained)
        page: Offset/limit window

    Returns:
        StoreResult with items for the window and the total match count
    """
    criteria = {
        "name_term": filters.name_term,
        "city": filters.location.city,
        "state": filters.location.state,
    }
    try:
        total = count_properties(session, **criteria)
        rows = fetch_properties(session, **criteria, offset=page.offset, limit=page.limit)
    except SQLAlchemyError as exc:
        logger.error(f"Property query failed: {exc}", exc_info=True)
        return StoreResult(items=[], total=0, error=_describe_error(exc))

    return StoreResult(items=[_property_row_to_record(r) for r in rows], total=total)


def scan_store(session: Session, limit: Optional[int] = None) -> StoreResult:
    """
    Fetch up to ``limit`` records in store order (all records if None).

    Returns:
        StoreResult whose total is the number of records returned
    """
    try:
        rows = scan_properties(session, limit=limit)
    except SQLAlchemyError as exc:
        logger.error(f"Property scan failed: {exc}", exc_info=True)
        return StoreResult(items=[], total=0, error=_describe_error(exc))

    records = [_property_row_to_record(r) for r in rows]
    return StoreResult(items=records, total=len(records))
