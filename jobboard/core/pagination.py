"""
Listing helpers: limit/cursor parsing, sort parsing, keyset and offset fetch.

Cursor pages are ordered by (sort column, id) in one direction. The cursor is
the id of the first row of the next page; a page request fetches limit + 1
rows starting at that row so the extra row's id becomes the next cursor.
"""

import math
import sys
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Largest page whose offset still fits a 64-bit INTEGER bind
MAX_PAGE = sys.maxsize // MAX_LIMIT


@dataclass
class PaginationParams:
    limit: int
    cursor: Optional[str] = None


@dataclass
class OffsetParams:
    limit: int
    page: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def parse_limit(raw: Optional[str]) -> int:
    """Default to 10 on missing, non-numeric or non-finite input; clamp to [1, 100]."""
    if raw is None:
        return DEFAULT_LIMIT
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return DEFAULT_LIMIT
    if not math.isfinite(value):
        return DEFAULT_LIMIT
    return int(min(max(value, 1), MAX_LIMIT))


def read_pagination_params(limit_raw: Optional[str], cursor: Optional[str]) -> PaginationParams:
    return PaginationParams(limit=parse_limit(limit_raw), cursor=cursor or None)


def read_offset_params(limit_raw: Optional[str], page_raw: Optional[str]) -> OffsetParams:
    try:
        page = int(float(page_raw)) if page_raw is not None else 1
    except (TypeError, ValueError, OverflowError):
        page = 1
    return OffsetParams(limit=parse_limit(limit_raw), page=min(max(page, 1), MAX_PAGE))


def read_sort(
    sort_by: Optional[str],
    sort_dir: Optional[str],
    sortable: Iterable[str],
    default: str,
) -> Tuple[str, str]:
    """
    Resolve (sortBy, sortDir).

    Unknown sortBy falls back to the default key. Without an explicit
    direction the default key sorts descending and any other key ascending.
    """
    key = sort_by if sort_by in set(sortable) else default
    if sort_dir in ("asc", "desc"):
        return key, sort_dir
    if sort_dir is None and key != default:
        return key, "asc"
    return key, "desc"


def cursor_meta(limit: int, sort_by: str, sort_dir: str, next_cursor: Optional[str]) -> Dict[str, Any]:
    return {
        "limit": limit,
        "sortBy": sort_by,
        "sortDir": sort_dir,
        "nextCursor": next_cursor,
        "paging": {"mode": "cursor", "nextCursor": next_cursor},
    }


def offset_meta(
    limit: int, sort_by: str, sort_dir: str, page: int, total: int
) -> Dict[str, Any]:
    total_pages = max(1, math.ceil(total / limit))
    return {
        "limit": limit,
        "sortBy": sort_by,
        "sortDir": sort_dir,
        "paging": {
            "mode": "offset",
            "page": page,
            "total": total,
            "totalPages": total_pages,
            "hasMore": page < total_pages,
        },
    }


def fetch_cursor_page(
    db: Session,
    stmt: Select,
    model,
    sort_column,
    sort_dir: str,
    params: PaginationParams,
) -> Tuple[List[Any], Optional[str]]:
    """
    Run ``stmt`` as a keyset page. Returns (rows, next_cursor).

    ``stmt`` must select ``model`` entities and carry its own filters.
    An unknown cursor id yields an empty page.
    """
    descending = sort_dir == "desc"

    if params.cursor is not None:
        anchor = db.execute(
            select(sort_column, model.id).where(model.id == params.cursor)
        ).first()
        if anchor is None:
            return [], None
        anchor_value, anchor_id = anchor
        if descending:
            stmt = stmt.where(
                or_(
                    sort_column < anchor_value,
                    and_(sort_column == anchor_value, model.id <= anchor_id),
                )
            )
        else:
            stmt = stmt.where(
                or_(
                    sort_column > anchor_value,
                    and_(sort_column == anchor_value, model.id >= anchor_id),
                )
            )

    if descending:
        stmt = stmt.order_by(sort_column.desc(), model.id.desc())
    else:
        stmt = stmt.order_by(sort_column.asc(), model.id.asc())

    rows = list(db.scalars(stmt.limit(params.limit + 1)).unique().all())
    next_cursor = None
    if len(rows) > params.limit:
        next_cursor = rows[params.limit].id
        rows = rows[: params.limit]
    return rows, next_cursor


def fetch_offset_page(
    db: Session,
    stmt: Select,
    model,
    sort_column,
    sort_dir: str,
    params: OffsetParams,
) -> Tuple[List[Any], int]:
    """
    Run ``stmt`` as an offset page. Returns (rows, total).

    ``sort_column`` may be a tuple of columns; ties break on id ascending.
    """
    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery()))
    columns = sort_column if isinstance(sort_column, (list, tuple)) else (sort_column,)
    ordering = [c.desc() if sort_dir == "desc" else c.asc() for c in columns]
    rows = db.scalars(
        stmt.order_by(*ordering, model.id.asc()).offset(params.offset).limit(params.limit)
    ).unique().all()
    return list(rows), total or 0
