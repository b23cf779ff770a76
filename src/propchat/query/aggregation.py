"""Dataset-wide statistics computed over the full record set."""

from enum import Enum
from typing import Dict, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..utils.logging import get_logger
from .models import PropertyRecord
from .store import scan_store

logger = get_logger(__name__)


class AggregationKind(str, Enum):
    OWNER_COUNT = "owner_count"
    AREA_COUNT = "area_count"
    OWNER_WITH_MOST_PROPERTIES = "owner_with_most_properties"
    TOTAL_PROPERTIES = "total_properties"


class DistinctValuesResult(BaseModel):
    """Distinct non-empty values of one attribute, in first-seen store order."""
    kind: Literal["owner_count", "area_count"]
    count: int
    values: List[str] = Field(default_factory=list)


class TopOwnerResult(BaseModel):
    kind: Literal["owner_with_most_properties"] = "owner_with_most_properties"
    name: str = ""
    count: int = 0


class CountResult(BaseModel):
    kind: Literal["total_properties"] = "total_properties"
    count: int


AggregationResult = Union[DistinctValuesResult, TopOwnerResult, CountResult]


def parse_kind(kind: Union[str, AggregationKind, None]) -> Optional[AggregationKind]:
    """Map a kind tag to AggregationKind, or None if unsupported."""
    if isinstance(kind, AggregationKind):
        return kind
    if not isinstance(kind, str):
        return None
    try:
        return AggregationKind(kind.strip().lower())
    except ValueError:
        return None


def _distinct(values: Sequence[Optional[str]]) -> List[str]:
    seen: Dict[str, None] = {}
    for value in values:
        if value:
            seen.setdefault(value, None)
    return list(seen)


def _top_owner(records: Sequence[PropertyRecord]) -> TopOwnerResult:
    counts: Dict[str, int] = {}
    for record in records:
        if record.owner:
            counts[record.owner] = counts.get(record.owner, 0) + 1

    # dicts keep first-seen order; strict > keeps the earliest owner on ties
    top = TopOwnerResult()
    for owner, count in counts.items():
        if count > top.count:
            top = TopOwnerResult(name=owner, count=count)
    return top


def compute_aggregation(
    records: Sequence[PropertyRecord],
    kind: Union[str, AggregationKind, None],
) -> Optional[AggregationResult]:
    """
    Compute a statistic over an in-memory record set.

    Args:
        records: All records, in store order
        kind: Statistic tag

    Returns:
        Result for the kind, or None if the kind is unsupported
    """
    parsed = parse_kind(kind)
    if parsed is None:
        return None

    if parsed is AggregationKind.OWNER_COUNT:
        owners = _distinct([r.owner for r in records])
        return DistinctValuesResult(kind=parsed.value, count=len(owners), values=owners)

    if parsed is AggregationKind.AREA_COUNT:
        areas = _distinct([r.area for r in records])
        return DistinctValuesResult(kind=parsed.value, count=len(areas), values=areas)

    if parsed is AggregationKind.OWNER_WITH_MOST_PROPERTIES:
        return _top_owner(records)

    return CountResult(count=len(records))


def aggregate(
    session: Session,
    kind: Union[str, AggregationKind, None],
) -> Optional[AggregationResult]:
    """
    Compute a dataset-wide statistic.

    Fetches the whole table once. Unknown kinds and store errors both
    return None ("statistic unavailable").
    """
    if parse_kind(kind) is None:
        logger.debug(f"Unsupported aggregation kind: {kind!r}")
        return None

    scan = scan_store(session, limit=None)
    if not scan.ok:
        logger.warning(f"Aggregation {kind!r} unavailable: {scan.error}")
        return None

    return compute_aggregation(scan.items, kind)
