# aspas/core/pagination.py
"""
Page arithmetic shared by the list endpoints.

Pages are 1-based; ``limit`` is capped by the query schemas (1..100).
"""
import math

from tortoise.queryset import QuerySet

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def pagination_meta(page: int, limit: int, total: int) -> dict:
    """
    Build the pagination block returned next to list results.

    totalPages = ceil(total / limit); a page past the last one simply has
    hasNextPage False.
    """
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": total_pages,
        "hasNextPage": page < total_pages,
        "hasPreviousPage": page > 1,
    }


async def paginate(qs: QuerySet, page: int, limit: int, total_qs: QuerySet | None = None) -> tuple[list, dict]:
    """
    Run ``qs`` for one page and return (rows, pagination meta).

    Pass ``total_qs`` when ``qs`` carries aggregate annotations; the total is
    counted on the plain filtered queryset.
    """
    total = await (total_qs if total_qs is not None else qs).count()
    rows = await qs.offset(page_offset(page, limit)).limit(limit)
    return rows, pagination_meta(page, limit, total)
