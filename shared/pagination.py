"""
Pagination envelope shared by list endpoints.
"""

import math
from typing import List, Sequence, Tuple, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Pagination(BaseModel):
    """Page metadata returned next to a list of records."""
    page: int
    limit: int
    total: int
    pages: int


def paginate(records: Sequence[T], page: int, limit: int) -> Tuple[List[T], Pagination]:
    """Slice ``records`` to one page and describe it."""
    total = len(records)
    start = (page - 1) * limit
    return list(records[start:start + limit]), Pagination(
        page=page,
        limit=limit,
        total=total,
        pages=math.ceil(total / limit) if limit else 0,
    )
