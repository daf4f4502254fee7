"""User profile repository."""

from typing import Optional

from sprout.audit.logger import AuditLogger
from sprout.models.finance import (
    CurrencyCode,
    UserProfile,
    UserProfileInput,
    UserProfilePatch,
)
from sprout.repositories.base import BaseRepository, utc_timestamp
from sprout.services.storage.database import Database
from sprout.services.storage.migrations import PROFILE_ID


class UserProfileRepository(BaseRepository):
    """
    The profile is a single row stored under PROFILE_ID.
    
    It is created once at first launch and only updated afterwards;
    a second `create` fails with a constraint violation.
    """
    
    table = "user_profile"
    entity_type = "user_profile"
    
    def __init__(
        self,
        db: Database,
        audit_logger: Optional[AuditLogger] = None,
        default_currency: CurrencyCode = CurrencyCode.USD,
    ):
        super().__init__(db, audit_logger)
        self.default_currency = CurrencyCode(default_currency)
    
    async def get(self) -> Optional[UserProfile]:
        row = self._fetch_by_id(PROFILE_ID)
        return UserProfile.model_validate(dict(row)) if row else None
    
    async def exists(self) -> bool:
        count = self._db.fetch_value(
            "SELECT COUNT(*) FROM user_profile WHERE id = ?",
            (PROFILE_ID,),
            default=0,
        )
        return count > 0
    
    async def create(self, data: UserProfileInput) -> UserProfile:
        """Create the profile. An input without a currency gets the configured default."""
        values = data.model_dump()
        if "currency" not in data.model_fields_set:
            values["currency"] = self.default_currency
        profile = UserProfile(id=PROFILE_ID, created_at=utc_timestamp(), **values)
        self._insert(profile.model_dump(mode="json"))
        await self._audit_created(profile.id, {"currency": profile.currency.value})
        return profile
    
    async def update(self, patch: UserProfilePatch) -> None:
        if patch.is_empty:
            return
        fields = self._update_columns(PROFILE_ID, patch.to_columns())
        await self._audit_updated(PROFILE_ID, fields)
