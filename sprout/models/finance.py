"""
Core Data Models for Sprout

These models define the schemas for all data crossing the repository
boundary. Callers only ever see these models, never raw storage rows.

Three families of models live here:
1. Entities - what a repository returns (materialized rows)
2. Inputs   - what a caller passes to `create`
3. Patches  - what a caller passes to `update`

DESIGN DECISION: Partial updates are explicit Patch models rather than
untyped dictionaries. Every patch field is optional; only the fields the
caller actually supplied are translated into columns, so absent fields
are never reset to null or to their defaults.
"""

from datetime import date
from enum import Enum
from typing import Any, ClassVar, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money flow. Also used as the category type."""
    INCOME = "income"
    EXPENSE = "expense"


class CurrencyCode(str, Enum):
    """Currencies a profile can be denominated in."""
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    INR = "INR"
    JPY = "JPY"
    CAD = "CAD"
    AUD = "AUD"


def _coerce_iso_date(value: Any) -> Any:
    """Accept `date` objects where a YYYY-MM-DD string is stored."""
    if isinstance(value, date):
        return value.isoformat()
    return value


def _check_email(value: Optional[str]) -> Optional[str]:
    if value and ("@" not in value or value.startswith("@") or value.endswith("@")):
        raise ValueError(f"Malformed email address: {value}")
    return value


ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


# =============================================================================
# ENTITIES - Materialized rows
# =============================================================================

class Category(BaseModel):
    """A spending or earning category."""
    
    id: str
    name: str
    icon: str
    color: str
    type: TransactionType
    is_default: bool = False


class PaymentMethod(BaseModel):
    """How a transaction was paid (cash, card, ...)."""
    
    id: str
    name: str
    icon: str
    is_default: bool = False


class UserProfile(BaseModel):
    """
    The single user of this store.
    
    There is exactly one row, under a fixed identifier.
    """
    
    id: str
    name: str
    email: str = ""
    currency: CurrencyCode = CurrencyCode.USD
    created_at: str


class Transaction(BaseModel):
    """A single income or expense record."""
    
    id: str
    type: TransactionType
    amount: float
    category_id: str
    date: str = Field(..., description="Calendar date as YYYY-MM-DD")
    note: str = ""
    payment_method_id: str
    created_at: str
    updated_at: str


class TransactionWithCategory(Transaction):
    """
    Transaction joined with its category's display fields.
    
    The category fields are None when the category was deleted
    after the transaction was recorded.
    """
    
    category_name: Optional[str] = None
    category_icon: Optional[str] = None
    category_color: Optional[str] = None


class Budget(BaseModel):
    """Spending limit for one category in one calendar month."""
    
    id: str
    month: int
    year: int
    category_id: str
    limit_amount: float
    created_at: str
    updated_at: str


class BudgetWithCategory(Budget):
    """Budget joined with its category and its consumption so far."""
    
    category_name: Optional[str] = None
    category_icon: Optional[str] = None
    category_color: Optional[str] = None
    spent: float = 0.0
    
    @property
    def remaining(self) -> float:
        """Limit left to spend (negative when over budget)."""
        return self.limit_amount - self.spent
    
    @property
    def is_over_budget(self) -> bool:
        return self.spent > self.limit_amount


class Goal(BaseModel):
    """A savings goal funded over time."""
    
    id: str
    title: str
    target_amount: float
    current_amount: float = 0.0
    deadline: str = ""
    icon: Optional[str] = None
    created_at: str
    updated_at: str
    
    @property
    def progress(self) -> float:
        """Fraction of the target reached, capped at 1.0."""
        if self.target_amount <= 0:
            return 0.0
        return min(self.current_amount / self.target_amount, 1.0)
    
    @property
    def is_completed(self) -> bool:
        return self.current_amount >= self.target_amount


# =============================================================================
# INPUTS - Validated payloads for `create`
# =============================================================================

class CategoryInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    
    name: str = Field(..., min_length=1, max_length=100)
    icon: str = Field(default="📁", max_length=16)
    color: str = Field(default="#66BB6A", max_length=16)
    type: TransactionType
    is_default: bool = False


class PaymentMethodInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    
    name: str = Field(..., min_length=1, max_length=100)
    icon: str = Field(default="💳", max_length=16)
    is_default: bool = False


class UserProfileInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(default="", max_length=254)
    currency: CurrencyCode = CurrencyCode.USD
    
    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)


class TransactionInput(BaseModel):
    """
    Payload for recording a transaction.
    
    Amounts must be strictly positive; direction is carried by `type`.
    """
    model_config = ConfigDict(str_strip_whitespace=True)
    
    type: TransactionType
    amount: float = Field(..., gt=0, description="Positive amount")
    category_id: str = Field(..., min_length=1)
    date: str = Field(..., pattern=ISO_DATE_PATTERN)
    note: str = Field(default="", max_length=500)
    payment_method_id: str = Field(..., min_length=1)
    
    @field_validator('date', mode='before')
    @classmethod
    def coerce_date(cls, v: Any) -> Any:
        return _coerce_iso_date(v)


class BudgetInput(BaseModel):
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1900, le=9999)
    category_id: str = Field(..., min_length=1)
    limit_amount: float = Field(..., gt=0)


class GoalInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    
    title: str = Field(..., min_length=1, max_length=200)
    target_amount: float = Field(..., gt=0)
    current_amount: float = Field(default=0.0, ge=0)
    deadline: str = Field(default="", description="YYYY-MM-DD or empty")
    icon: Optional[str] = Field(default=None, max_length=16)
    
    @field_validator('deadline', mode='before')
    @classmethod
    def coerce_deadline(cls, v: Any) -> Any:
        return _coerce_iso_date(v)


# =============================================================================
# PATCHES - Partial updates
# =============================================================================

class Patch(BaseModel):
    """
    Base class for partial updates.
    
    Subclasses declare every field as Optional with a None default. Field
    names are column names.

    An explicit None means "not supplied", except for the fields listed in
    `clearable`: those map to nullable columns, and an explicit None
    writes NULL.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    clearable: ClassVar[frozenset[str]] = frozenset()

    def to_columns(self) -> list[tuple[str, Any]]:
        """Ordered (column, value) pairs for the fields that were supplied."""
        values = self.model_dump(exclude_unset=True, mode="json")
        return [
            (name, value)
            for name, value in values.items()
            if value is not None or name in self.clearable
        ]
    
    @property
    def is_empty(self) -> bool:
        return not self.to_columns()


class CategoryPatch(Patch):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    icon: Optional[str] = Field(default=None, max_length=16)
    color: Optional[str] = Field(default=None, max_length=16)
    type: Optional[TransactionType] = None
    is_default: Optional[bool] = None


class PaymentMethodPatch(Patch):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    icon: Optional[str] = Field(default=None, max_length=16)
    is_default: Optional[bool] = None


class UserProfilePatch(Patch):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, max_length=254)
    currency: Optional[CurrencyCode] = None

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        return _check_email(v)


class TransactionPatch(Patch):
    type: Optional[TransactionType] = None
    amount: Optional[float] = Field(default=None, gt=0)
    category_id: Optional[str] = Field(default=None, min_length=1)
    date: Optional[str] = Field(default=None, pattern=ISO_DATE_PATTERN)
    note: Optional[str] = Field(default=None, max_length=500)
    payment_method_id: Optional[str] = Field(default=None, min_length=1)
    
    @field_validator('date', mode='before')
    @classmethod
    def coerce_date(cls, v: Any) -> Any:
        return _coerce_iso_date(v)


class BudgetPatch(Patch):
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = Field(default=None, ge=1900, le=9999)
    category_id: Optional[str] = Field(default=None, min_length=1)
    limit_amount: Optional[float] = Field(default=None, gt=0)


class GoalPatch(Patch):
    clearable: ClassVar[frozenset[str]] = frozenset({"icon"})

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    target_amount: Optional[float] = Field(default=None, gt=0)
    current_amount: Optional[float] = Field(default=None, ge=0)
    deadline: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=16)
    
    @field_validator('deadline', mode='before')
    @classmethod
    def coerce_deadline(cls, v: Any) -> Any:
        return _coerce_iso_date(v)
