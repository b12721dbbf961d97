from datetime import datetime, timedelta

from sqlalchemy import select

from jobboard.core.pagination import (
    MAX_PAGE,
    OffsetParams,
    PaginationParams,
    cursor_meta,
    fetch_cursor_page,
    fetch_offset_page,
    offset_meta,
    parse_limit,
    read_offset_params,
    read_pagination_params,
    read_sort,
)
from jobboard.db.database import get_db_session
from jobboard.db.models import Job


def test_limit_defaults_and_clamps():
    assert parse_limit(None) == 10
    assert parse_limit("abc") == 10
    assert parse_limit("") == 10
    assert parse_limit("NaN") == 10
    assert parse_limit("Infinity") == 10
    assert parse_limit("-inf") == 10
    assert parse_limit("0") == 1
    assert parse_limit("-5") == 1
    assert parse_limit("500") == 100
    assert parse_limit("25") == 25
    assert parse_limit("7.9") == 7


def test_cursor_passes_through_unmodified():
    params = read_pagination_params("3", "abc-123")
    assert params == PaginationParams(limit=3, cursor="abc-123")
    assert read_pagination_params(None, "").cursor is None


def test_offset_params():
    assert read_offset_params(None, None) == OffsetParams(limit=10, page=1)
    assert read_offset_params("20", "3").offset == 40
    assert read_offset_params("20", "0").page == 1
    assert read_offset_params("20", "junk").page == 1
    assert read_offset_params("20", "1e30").page == MAX_PAGE
    assert read_offset_params("100", "100000000000000000000000").offset <= 2 ** 63 - 1


def test_read_sort_defaults():
    sortable = ["title", "salary", "createdAt"]
    assert read_sort(None, None, sortable, "createdAt") == ("createdAt", "desc")
    assert read_sort("bogus", None, sortable, "createdAt") == ("createdAt", "desc")
    assert read_sort("title", None, sortable, "createdAt") == ("title", "asc")
    assert read_sort("title", "desc", sortable, "createdAt") == ("title", "desc")
    assert read_sort("title", "sideways", sortable, "createdAt") == ("title", "desc")
    assert read_sort("createdAt", "asc", sortable, "createdAt") == ("createdAt", "asc")


def test_cursor_meta_exposes_next_cursor_at_top_level():
    meta = cursor_meta(5, "createdAt", "desc", "job-9")
    assert meta["nextCursor"] == "job-9"
    assert meta["paging"] == {"mode": "cursor", "nextCursor": "job-9"}


def test_offset_meta_pages():
    paging = offset_meta(10, "title", "asc", 1, 0)["paging"]
    assert paging == {"mode": "offset", "page": 1, "total": 0, "totalPages": 1, "hasMore": False}

    paging = offset_meta(10, "title", "asc", 2, 25)["paging"]
    assert paging["totalPages"] == 3
    assert paging["hasMore"] is True


def _seed_jobs(make_category, make_job, count):
    category = make_category()
    base = datetime(2025, 1, 1)
    return [
        make_job(category["id"], title=f"Job {i}", salary=1000 * i, created_at=base + timedelta(hours=i))
        for i in range(count)
    ]


def test_cursor_pages_cover_every_row_once(make_category, make_job):
    ids = _seed_jobs(make_category, make_job, 7)
    expected = list(reversed(ids))  # newest first

    seen = []
    cursor = None
    pages = 0
    with get_db_session() as db:
        while True:
            rows, cursor = fetch_cursor_page(
                db, select(Job), Job, Job.created_at, "desc", PaginationParams(limit=3, cursor=cursor)
            )
            pages += 1
            assert len(rows) <= 3
            seen.extend(r.id for r in rows)
            if cursor is None:
                break

    assert seen == expected, "every row must appear exactly once, in order"
    assert pages == 3


def test_cursor_pages_break_ties_by_id(make_category, make_job):
    category = make_category()
    same_instant = datetime(2025, 2, 1, 9, 0)
    ids = [make_job(category["id"], title=f"Tied {i}", created_at=same_instant) for i in range(5)]

    seen = []
    cursor = None
    with get_db_session() as db:
        while True:
            rows, cursor = fetch_cursor_page(
                db, select(Job), Job, Job.created_at, "desc", PaginationParams(limit=2, cursor=cursor)
            )
            seen.extend(r.id for r in rows)
            if cursor is None:
                break

    assert len(seen) == len(set(seen)) == 5
    assert seen == sorted(ids, reverse=True)


def test_next_cursor_only_when_more_rows(make_category, make_job):
    _seed_jobs(make_category, make_job, 3)
    with get_db_session() as db:
        rows, cursor = fetch_cursor_page(
            db, select(Job), Job, Job.created_at, "asc", PaginationParams(limit=3)
        )
        assert len(rows) == 3
        assert cursor is None

        rows, cursor = fetch_cursor_page(
            db, select(Job), Job, Job.created_at, "asc", PaginationParams(limit=2)
        )
        assert len(rows) == 2
        assert cursor is not None


def test_unknown_cursor_yields_empty_page(make_category, make_job):
    _seed_jobs(make_category, make_job, 2)
    with get_db_session() as db:
        rows, cursor = fetch_cursor_page(
            db, select(Job), Job, Job.created_at, "desc", PaginationParams(limit=5, cursor="missing")
        )
    assert rows == []
    assert cursor is None


def test_offset_page_orders_and_counts(make_category, make_job):
    _seed_jobs(make_category, make_job, 5)
    with get_db_session() as db:
        rows, total = fetch_offset_page(
            db, select(Job), Job, Job.salary, "desc", OffsetParams(limit=2, page=2)
        )
        salaries = [r.salary for r in rows]
    assert total == 5
    assert salaries == [2000, 1000]
