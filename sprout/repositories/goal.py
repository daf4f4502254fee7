"""Savings goal repository."""

from typing import Optional

from sprout.models.finance import Goal, GoalInput, GoalPatch
from sprout.repositories.base import BaseRepository, new_id, utc_timestamp


class GoalRepository(BaseRepository):
    """CRUD for savings goals, plus atomic funding."""
    
    table = "goal"
    entity_type = "goal"
    tracks_updated_at = True
    
    async def create(self, data: GoalInput) -> Goal:
        now = utc_timestamp()
        goal = Goal(id=new_id(), created_at=now, updated_at=now, **data.model_dump())
        self._insert(goal.model_dump(mode="json"))
        await self._audit_created(goal.id, {"title": goal.title, "target_amount": goal.target_amount})
        return goal
    
    async def update(self, goal_id: str, patch: GoalPatch) -> None:
        fields = self._update_columns(goal_id, patch.to_columns())
        await self._audit_updated(goal_id, fields)
    
    async def delete(self, goal_id: str) -> None:
        if self._delete_row(goal_id):
            await self._audit_deleted(goal_id)
    
    async def get_by_id(self, goal_id: str) -> Optional[Goal]:
        row = self._fetch_by_id(goal_id)
        return Goal.model_validate(dict(row)) if row else None
    
    async def get_all(self) -> list[Goal]:
        """Goals ordered by deadline, soonest first."""
        rows = self._db.fetch_all("SELECT * FROM goal ORDER BY deadline ASC")
        return [Goal.model_validate(dict(row)) for row in rows]
    
    async def add_funds(self, goal_id: str, amount: float) -> None:
        """
        Increase current_amount by `amount`.
        
        The increment happens inside a single UPDATE so two calls can
        never overwrite each other. The amount itself is not validated
        here; the CHECK constraint still rejects a negative balance.
        """
        cursor = self._db.execute(
            "UPDATE goal SET current_amount = current_amount + ?, updated_at = ? WHERE id = ?",
            (amount, utc_timestamp(), goal_id),
        )
        if cursor.rowcount and self._audit:
            await self._audit.log_funds_added(goal_id, amount)
