"""
Offset pagination for select() statements.

Listing endpoints take `PaginationParams` as a dependency and hand the
statement to `paginate`, which returns the page of rows plus the metadata
block every list response carries.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Sequence

from fastapi import Query
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from soupbox_shared.schemas.common import Pagination

DEFAULT_PER_PAGE = 25
MAX_PER_PAGE = 100


@dataclass(frozen=True)
class PaginationParams:
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def pagination_params(
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE),
) -> PaginationParams:
    return PaginationParams(page=page, per_page=per_page)


async def paginate(
    session: AsyncSession, stmt: Any, params: PaginationParams
) -> tuple[Sequence[Any], Pagination]:
    """Run `stmt` for one page. Returns (rows, pagination)."""
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await session.execute(count_stmt)).scalar_one()

    result = await session.execute(stmt.offset(params.offset).limit(params.per_page))
    rows = result.all()

    return rows, Pagination(
        page=params.page,
        per_page=params.per_page,
        total=total,
        total_pages=math.ceil(total / params.per_page) if total else 0,
    )
