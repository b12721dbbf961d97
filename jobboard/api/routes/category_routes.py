"""
Category Routes

GET /categories - List categories (?withSkills=1 includes skill tags)
POST /categories - Create category (staff only)
GET /categories/{category_id} - Get category with counts
PATCH /categories/{category_id} - Rename category (staff only)
DELETE /categories/{category_id} - Delete an unused category (staff only)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from jobboard.core.auth import CurrentUser, require_staff
from jobboard.core.errors import BadRequestError, ConflictError, NotFoundError
from jobboard.core.http import ok
from jobboard.db.database import get_db_session
from jobboard.db.models import Category, Job
from jobboard.schemas.schemas import (
    CategoryBrief,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    CategoryWithSkills,
)

router = APIRouter(prefix="/categories", tags=["Categories"])

DUPLICATE_NAME = "Category name must be unique"


@router.get("")
async def list_categories(with_skills: Optional[str] = Query(None, alias="withSkills")):
    stmt = select(Category).order_by(Category.name.asc())
    with get_db_session() as db:
        if with_skills == "1":
            rows = db.scalars(stmt.options(selectinload(Category.skills))).all()
            return ok([CategoryWithSkills.model_validate(c) for c in rows])
        rows = db.scalars(stmt).all()
        return ok([CategoryResponse.model_validate(c) for c in rows])


@router.post("", status_code=201)
async def create_category(data: CategoryCreate, staff: CurrentUser = Depends(require_staff)):
    try:
        with get_db_session() as db:
            category = Category(name=data.name)
            db.add(category)
            db.flush()
            created = CategoryBrief.model_validate(category)
    except IntegrityError:
        raise ConflictError(DUPLICATE_NAME)
    return ok(created)


@router.get("/{category_id}")
async def get_category(category_id: str):
    with get_db_session() as db:
        category = db.get(Category, category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return ok(CategoryResponse.model_validate(category))


@router.patch("/{category_id}")
async def update_category(
    category_id: str, data: CategoryUpdate, staff: CurrentUser = Depends(require_staff)
):
    try:
        with get_db_session() as db:
            category = db.get(Category, category_id)
            if category is None:
                raise NotFoundError("Category not found")
            category.name = data.name
            db.flush()
            updated = CategoryBrief.model_validate(category)
    except IntegrityError:
        raise ConflictError(DUPLICATE_NAME)
    return ok(updated)


@router.delete("/{category_id}")
async def delete_category(category_id: str, staff: CurrentUser = Depends(require_staff)):
    with get_db_session() as db:
        in_use = db.scalar(select(func.count(Job.id)).where(Job.category_id == category_id))
        if in_use:
            raise BadRequestError("Cannot delete a category that is in use by jobs.")
        category = db.get(Category, category_id)
        if category is None:
            raise NotFoundError("Category not found")
        db.delete(category)
    return ok({"id": category_id})
