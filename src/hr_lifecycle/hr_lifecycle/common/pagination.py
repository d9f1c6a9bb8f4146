from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, List, Tuple, TypeVar

from ..core.constants import MAX_PAGE_SIZE
from ..core.exceptions import ValidationError

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    page: int = 1
    page_size: int = 10
    total: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0

    def to_dict(self, serialize) -> dict:
        return {
            "items": [serialize(item) for item in self.items],
            "pagination": {
                "page": self.page,
                "page_size": self.page_size,
                "total": self.total,
                "total_pages": self.total_pages,
            },
        }


def page_window(page: int, page_size: int) -> Tuple[int, int]:
    """Translate 1-based page/page_size into (offset, limit)."""
    page = int(page)
    page_size = int(page_size)
    if page < 1:
        raise ValidationError("page must be >= 1")
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise ValidationError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")
    return (page - 1) * page_size, page_size
