"""Payment method repository."""

from typing import Optional

from sprout.models.finance import (
    PaymentMethod,
    PaymentMethodInput,
    PaymentMethodPatch,
)
from sprout.repositories.base import BaseRepository, new_id


class PaymentMethodRepository(BaseRepository):
    """
    CRUD for payment methods.
    
    At most one payment method is the default. Flagging a method as
    default demotes the previous one inside the same transaction; a
    partial unique index backs this up at the storage layer.
    """
    
    table = "payment_method"
    entity_type = "payment_method"
    
    async def get_all(self) -> list[PaymentMethod]:
        rows = self._db.fetch_all(
            "SELECT * FROM payment_method ORDER BY is_default DESC, name ASC"
        )
        return [PaymentMethod.model_validate(dict(row)) for row in rows]
    
    async def get_by_id(self, payment_method_id: str) -> Optional[PaymentMethod]:
        row = self._fetch_by_id(payment_method_id)
        return PaymentMethod.model_validate(dict(row)) if row else None
    
    async def get_by_name(self, name: str) -> Optional[PaymentMethod]:
        row = self._db.fetch_one(
            "SELECT * FROM payment_method WHERE name = ? ORDER BY rowid LIMIT 1",
            (name,),
        )
        return PaymentMethod.model_validate(dict(row)) if row else None
    
    async def get_default(self) -> Optional[PaymentMethod]:
        row = self._db.fetch_one(
            "SELECT * FROM payment_method WHERE is_default = 1 LIMIT 1"
        )
        return PaymentMethod.model_validate(dict(row)) if row else None
    
    def _clear_default(self, keep_id: Optional[str] = None) -> None:
        self._db.execute(
            "UPDATE payment_method SET is_default = 0 WHERE is_default = 1 AND id IS NOT ?",
            (keep_id,),
        )
    
    async def create(self, data: PaymentMethodInput) -> PaymentMethod:
        method = PaymentMethod(id=new_id(), **data.model_dump())
        with self._db.transaction():
            if method.is_default:
                self._clear_default()
            self._insert(method.model_dump(mode="json"))
        await self._audit_created(method.id, {"name": method.name})
        return method
    
    async def update(self, payment_method_id: str, patch: PaymentMethodPatch) -> None:
        if patch.is_empty:
            return
        with self._db.transaction():
            if patch.is_default:
                self._clear_default(keep_id=payment_method_id)
            fields = self._update_columns(payment_method_id, patch.to_columns())
        await self._audit_updated(payment_method_id, fields)
    
    async def delete(self, payment_method_id: str) -> None:
        if self._delete_row(payment_method_id):
            await self._audit_deleted(payment_method_id)
