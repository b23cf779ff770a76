"""Repository functions for properties table reads."""

from typing import Dict, List, Optional

from sqlalchemy import and_, func, inspect, or_
from sqlalchemy.orm import Query, Session

from propchat.database.schema import Property
from propchat.utils.logging import get_logger

logger = get_logger(__name__)

LIKE_ESCAPE = "\\"


def _contains_pattern(term: str) -> str:
    """Build a literal substring LIKE pattern (user wildcards are escaped)."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _filtered_query(
    session: Session,
    name_term: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
) -> Query:
    """
    Build the shared filtered query used by both count and page fetch.

    Constraints are AND-ed. The name term matches name OR slug; city and
    state are independent substring tests against the address field.
    """
    query = session.query(Property)
    conditions = []

    if name_term:
        pattern = _contains_pattern(name_term)
        conditions.append(
            or_(
                Property.name.ilike(pattern, escape=LIKE_ESCAPE),
                Property.slug.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )

    if state:
        conditions.append(Property.address.ilike(_contains_pattern(state), escape=LIKE_ESCAPE))

    if city:
        conditions.append(Property.address.ilike(_contains_pattern(city), escape=LIKE_ESCAPE))

    if conditions:
        query = query.filter(and_(*conditions))
    return query


def count_properties(
    session: Session,
    name_term: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
) -> int:
    """
    Count all properties matching the filter, ignoring any page window.

    Args:
        session: SQLAlchemy session
        name_term: Substring of name or slug (case-insensitive)
        city: Substring of address (case-insensitive)
        state: Substring of address (case-insensitive)

    Returns:
        Number of matching rows
    """
    query = _filtered_query(session, name_term=name_term, city=city, state=state)
    return query.with_entities(func.count(Property.id)).scalar() or 0


def fetch_properties(
    session: Session,
    name_term: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
    offset: int = 0,
    limit: int = 5,
) -> List[Property]:
    """
    Fetch one page of matching properties in natural order (id ascending).

    Args:
        session: SQLAlchemy session
        name_term: Substring of name or slug (case-insensitive)
        city: Substring of address (case-insensitive)
        state: Substring of address (case-insensitive)
        offset: Number of matching rows to skip
        limit: Maximum number of rows to return

    Returns:
        List of Property rows
    """
    query = _filtered_query(session, name_term=name_term, city=city, state=state)
    rows = query.order_by(Property.id.asc()).offset(offset).limit(limit).all()
    logger.debug(f"Fetched {len(rows)} properties (offset={offset}, limit={limit})")
    return rows


def scan_properties(session: Session, limit: Optional[int] = None) -> List[Property]:
    """
    Fetch properties without filters, in natural order.

    Args:
        session: SQLAlchemy session
        limit: Maximum number of rows (None for the whole table)

    Returns:
        List of Property rows
    """
    query = session.query(Property).order_by(Property.id.asc())
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def describe_property_columns(session: Session) -> List[Dict[str, str]]:
    """
    Introspect the live properties table.

    Returns:
        List of {"column_name", "data_type"} dicts in table order

    Raises:
        sqlalchemy.exc.NoSuchTableError: If the table doesn't exist
    """
    inspector = inspect(session.get_bind())
    columns = inspector.get_columns(Property.__tablename__)
    return [
        {"column_name": col["name"], "data_type": str(col["type"]).lower()}
        for col in columns
    ]
