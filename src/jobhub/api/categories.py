"""Category API routes. Reads are public, writes are admin-only."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from jobhub.auth.dependencies import require_admin
from jobhub.db.engine import get_db
from jobhub.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from jobhub.services.category_service import (
    CategoryExistsError,
    CategoryNotFoundError,
    CategoryService,
)

router = APIRouter(prefix="/categories")


def _svc(db: AsyncSession = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


@router.get("", response_model=list[CategoryRead])
async def list_categories(svc: CategoryService = Depends(_svc)):
    return await svc.list_categories()


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category(category_id: uuid.UUID, svc: CategoryService = Depends(_svc)):
    try:
        return await svc.get_category(category_id)
    except CategoryNotFoundError:
        raise HTTPException(status_code=404, detail="Category not found")


@router.post(
    "",
    response_model=CategoryRead,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def create_category(body: CategoryCreate, svc: CategoryService = Depends(_svc)):
    try:
        return await svc.create_category(
            name=body.name, description=body.description, icon=body.icon
        )
    except CategoryExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put(
    "/{category_id}",
    response_model=CategoryRead,
    dependencies=[Depends(require_admin)],
)
async def update_category(
    category_id: uuid.UUID,
    body: CategoryUpdate,
    svc: CategoryService = Depends(_svc),
):
    try:
        return await svc.update_category(
            category_id, **body.model_dump(exclude_none=True)
        )
    except CategoryNotFoundError:
        raise HTTPException(status_code=404, detail="Category not found")
    except CategoryExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/{category_id}", dependencies=[Depends(require_admin)])
async def delete_category(category_id: uuid.UUID, svc: CategoryService = Depends(_svc)):
    try:
        await svc.delete_category(category_id)
    except CategoryNotFoundError:
        raise HTTPException(status_code=404, detail="Category not found")
    return {"deleted": True}
