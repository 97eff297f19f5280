from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_args(cls, args: Mapping[str, Any], *, size_key: str = "limit") -> "PageRequest":
        """Lenient parsing: bad values fall back to defaults, limits are clamped."""
        try:
            page = int(args.get("page") or 1)
        except (TypeError, ValueError):
            page = 1
        try:
            limit = int(args.get(size_key) or DEFAULT_PAGE_SIZE)
        except (TypeError, ValueError):
            limit = DEFAULT_PAGE_SIZE
        return cls(page=max(page, 1), limit=min(max(limit, 1), MAX_PAGE_SIZE))


def pagination_info(request: PageRequest, total_count: int) -> dict[str, Any]:
    total_pages = (total_count + request.limit - 1) // request.limit if total_count else 0
    return {
        "page": request.page,
        "limit": request.limit,
        "totalCount": total_count,
        "totalPages": total_pages,
        "hasNext": request.page < total_pages,
        "hasPrev": request.page > 1,
    }
