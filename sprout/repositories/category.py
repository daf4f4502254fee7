"""Category repository."""

from typing import Optional

from sprout.models.finance import (
    Category,
    CategoryInput,
    CategoryPatch,
    TransactionType,
)
from sprout.repositories.base import BaseRepository, new_id


class CategoryRepository(BaseRepository):
    """
    CRUD for income and expense categories.
    
    Deleting a category does not touch the transactions or budgets that
    still reference it; their category_id is left dangling.
    """
    
    table = "category"
    entity_type = "category"
    
    async def get_all(self) -> list[Category]:
        rows = self._db.fetch_all(
            "SELECT * FROM category ORDER BY is_default DESC, name ASC"
        )
        return [Category.model_validate(dict(row)) for row in rows]
    
    async def get_by_type(self, type: TransactionType) -> list[Category]:
        rows = self._db.fetch_all(
            "SELECT * FROM category WHERE type = ? ORDER BY is_default DESC, name ASC",
            (TransactionType(type).value,),
        )
        return [Category.model_validate(dict(row)) for row in rows]
    
    async def get_by_id(self, category_id: str) -> Optional[Category]:
        row = self._fetch_by_id(category_id)
        return Category.model_validate(dict(row)) if row else None
    
    async def get_by_name(self, name: str) -> Optional[Category]:
        """First category with exactly this name."""
        row = self._db.fetch_one(
            "SELECT * FROM category WHERE name = ? ORDER BY rowid LIMIT 1",
            (name,),
        )
        return Category.model_validate(dict(row)) if row else None
    
    async def create(self, data: CategoryInput) -> Category:
        category = Category(id=new_id(), **data.model_dump())
        self._insert(category.model_dump(mode="json"))
        await self._audit_created(category.id, {"name": category.name, "type": category.type.value})
        return category
    
    async def update(self, category_id: str, patch: CategoryPatch) -> None:
        if patch.is_empty:
            return
        fields = self._update_columns(category_id, patch.to_columns())
        await self._audit_updated(category_id, fields)
    
    async def delete(self, category_id: str) -> None:
        if self._delete_row(category_id):
            await self._audit_deleted(category_id)
