"""Category service — job categories CRUD.

Learn: Category names are unique; a duplicate create/rename is caught as
an IntegrityError from the database and reported as a conflict.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobhub.db.models import Category


class CategoryNotFoundError(Exception):
    """Raised when a category is not found."""


class CategoryExistsError(Exception):
    """Raised when a category name is already taken."""


class CategoryService:
    """Business logic for job categories."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_categories(self) -> list[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def get_category(self, category_id: uuid.UUID) -> Category:
        category = await self.db.get(Category, category_id)
        if not category:
            raise CategoryNotFoundError(f"Category {category_id} not found")
        return category

    async def create_category(
        self, name: str, description: str | None = None, icon: str | None = None
    ) -> Category:
        category = Category(name=name, description=description, icon=icon)
        self.db.add(category)
        await self._commit_unique(name)
        return category

    async def update_category(self, category_id: uuid.UUID, **fields) -> Category:
        category = await self.get_category(category_id)
        for key, value in fields.items():
            setattr(category, key, value)
        await self._commit_unique(category.name)
        return category

    async def delete_category(self, category_id: uuid.UUID) -> None:
        category = await self.get_category(category_id)
        await self.db.delete(category)
        await self.db.commit()

    async def _commit_unique(self, name: str) -> None:
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise CategoryExistsError(f"Category '{name}' already exists")
