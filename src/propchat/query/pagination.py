"""Page window helpers shared by the exact and fuzzy paths."""

from typing import List, Sequence, TypeVar

from pydantic import BaseModel, Field

DEFAULT_PAGE_SIZE = 5

T = TypeVar("T")


class PageRequest(BaseModel):
    """The (offset, limit) window of a matching set."""
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, gt=0)


def has_more(offset: int, limit: int, total: int) -> bool:
    """True when another page exists after [offset, offset + limit)."""
    return offset + limit < total


def window(items: Sequence[T], page: PageRequest) -> List[T]:
    return list(items[page.offset:page.offset + page.limit])
