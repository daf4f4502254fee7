"""
Tests for entity repositories

Test strategy:
1. Round trips: what create returns is what get returns
2. Partial updates only touch supplied columns
3. Storage constraints surface as ConstraintViolation/DuplicateError
4. Deletes leave referencing rows alone
"""

import asyncio

import pytest
from pydantic import ValidationError

from sprout.models import (
    CurrencyCode,
    BudgetInput,
    BudgetPatch,
    CategoryInput,
    CategoryPatch,
    GoalInput,
    GoalPatch,
    PaymentMethodInput,
    PaymentMethodPatch,
    TransactionInput,
    TransactionPatch,
    TransactionType,
    UserProfileInput,
    UserProfilePatch,
)
from sprout.orchestrator import DataLayer
from sprout.services.storage.interface import ConstraintViolation, DuplicateError


def expense(amount, date, category_id="cat-1", payment_method_id="pm-1", note=""):
    return TransactionInput(
        type=TransactionType.EXPENSE,
        amount=amount,
        category_id=category_id,
        date=date,
        note=note,
        payment_method_id=payment_method_id,
    )


class TestTransactionRepository:
    """Tests for transaction CRUD and listings."""
    
    @pytest.mark.asyncio
    async def test_create_and_get(self, data):
        created = await data.transactions.create(expense(42.50, "2024-01-15"))
        
        assert created.id
        assert created.created_at == created.updated_at
        
        fetched = await data.transactions.get_by_id(created.id)
        assert fetched.amount == 42.50
        assert fetched.date == "2024-01-15"
        assert fetched.category_id == "cat-1"
        assert fetched.created_at == created.created_at
    
    @pytest.mark.asyncio
    async def test_created_expense_counts_in_month_summary(self, data):
        await data.transactions.create(expense(42.50, "2024-01-15"))
        
        summary = await data.transactions.get_month_summary(1, 2024)
        
        assert summary.total_expense >= 42.50
        assert summary.transaction_count >= 1
    
    @pytest.mark.asyncio
    async def test_unknown_references_are_accepted(self, data):
        """Category and payment method ids are not checked on insert."""
        created = await data.transactions.create(expense(10, "2024-01-01"))
        
        fetched = await data.transactions.get_by_id(created.id)
        assert fetched.category_name is None
        assert fetched.payment_method_id == "pm-1"
    
    @pytest.mark.asyncio
    async def test_get_by_id_includes_category(self, data, expense_category, cash):
        created = await data.transactions.create(
            expense(5, "2024-01-02", expense_category.id, cash.id)
        )
        
        fetched = await data.transactions.get_by_id(created.id)
        assert fetched.category_name == "Groceries"
        assert fetched.category_icon == expense_category.icon
    
    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, data):
        assert await data.transactions.get_by_id("nope") is None
    
    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, data):
        created = await data.transactions.create(expense(10, "2024-01-01", note="before"))
        
        await data.transactions.update(created.id, TransactionPatch(amount=99))
        
        fetched = await data.transactions.get_by_id(created.id)
        assert fetched.amount == 99
        assert fetched.note == "before"
        assert fetched.date == "2024-01-01"
        assert fetched.updated_at >= created.updated_at
        assert fetched.created_at == created.created_at
    
    @pytest.mark.asyncio
    async def test_update_missing_id_is_silent(self, data):
        await data.transactions.update("missing", TransactionPatch(note="x"))
        assert await data.transactions.get_count() == 0
    
    @pytest.mark.asyncio
    async def test_delete(self, data):
        created = await data.transactions.create(expense(10, "2024-01-01"))
        
        await data.transactions.delete(created.id)
        await data.transactions.delete(created.id)
        
        assert await data.transactions.get_by_id(created.id) is None
    
    @pytest.mark.asyncio
    async def test_get_all_newest_first_with_paging(self, data):
        for day in (3, 1, 2, 5, 4):
            await data.transactions.create(expense(day, f"2024-01-{day:02d}"))
        
        first_page = await data.transactions.get_all(limit=2, offset=0)
        second_page = await data.transactions.get_all(limit=2, offset=2)
        
        assert [t.date for t in first_page] == ["2024-01-05", "2024-01-04"]
        assert [t.date for t in second_page] == ["2024-01-03", "2024-01-02"]
    
    @pytest.mark.asyncio
    async def test_recent_transactions(self, data):
        for day in range(1, 9):
            await data.transactions.create(expense(day, f"2024-01-{day:02d}"))
        
        recent = await data.transactions.get_recent_transactions()
        
        assert len(recent) == 5
        assert recent[0].date == "2024-01-08"
    
    @pytest.mark.asyncio
    async def test_configured_page_size_and_recent_limit(self, db):
        layer = DataLayer(db, page_size=3, recent_limit=2)
        await layer.bootstrap()
        for day in range(1, 6):
            await layer.transactions.create(expense(day, f"2024-01-{day:02d}"))
        
        assert len(await layer.transactions.get_all()) == 3
        assert len(await layer.transactions.get_all(limit=10)) == 5
        assert len(await layer.transactions.get_recent_transactions()) == 2
    
    @pytest.mark.asyncio
    async def test_get_by_month(self, data):
        await data.transactions.create(expense(1, "2024-01-31"))
        await data.transactions.create(expense(2, "2024-02-01"))
        await data.transactions.create(expense(3, "2024-02-29"))
        await data.transactions.create(expense(4, "2024-03-01"))
        
        february = await data.transactions.get_by_month(2, 2024)
        
        assert [t.date for t in february] == ["2024-02-29", "2024-02-01"]
    
    @pytest.mark.asyncio
    async def test_date_range_is_inclusive(self, data):
        await data.transactions.create(expense(1, "2024-01-10"))
        await data.transactions.create(expense(2, "2024-01-20"))
        
        rows = await data.transactions.get_by_date_range("2024-01-10", "2024-01-20")
        
        assert len(rows) == 2
    
    @pytest.mark.asyncio
    async def test_unvalidated_amount_rejected_by_storage(self, data):
        """The CHECK constraint still applies when input validation is bypassed."""
        bad = TransactionInput.model_construct(
            type=TransactionType.EXPENSE,
            amount=-5.0,
            category_id="cat-1",
            date="2024-01-01",
            note="",
            payment_method_id="pm-1",
        )
        
        with pytest.raises(ConstraintViolation):
            await data.transactions.create(bad)
        
        assert await data.transactions.get_count() == 0


class TestCategoryRepository:
    """Tests for categories."""
    
    @pytest.mark.asyncio
    async def test_get_by_type(self, data):
        income = await data.categories.get_by_type(TransactionType.INCOME)
        expenses = await data.categories.get_by_type("expense")
        
        assert len(income) == 6
        assert len(expenses) == 12
        assert all(c.type == TransactionType.INCOME for c in income)
    
    @pytest.mark.asyncio
    async def test_create_and_update(self, data):
        created = await data.categories.create(
            CategoryInput(name="Pets", icon="🐶", color="#000000", type="expense")
        )
        
        await data.categories.update(created.id, CategoryPatch(color="#FFFFFF"))
        
        fetched = await data.categories.get_by_id(created.id)
        assert fetched.name == "Pets"
        assert fetched.color == "#FFFFFF"
        assert fetched.is_default is False
    
    @pytest.mark.asyncio
    async def test_delete_leaves_transactions_dangling(self, data, expense_category, cash):
        tx = await data.transactions.create(expense(10, "2024-01-01", expense_category.id, cash.id))
        
        await data.categories.delete(expense_category.id)
        
        assert await data.categories.get_by_id(expense_category.id) is None
        fetched = await data.transactions.get_by_id(tx.id)
        assert fetched.category_id == expense_category.id
        assert fetched.category_name is None
    
    @pytest.mark.asyncio
    async def test_invalid_type_rejected_by_storage(self, data):
        with pytest.raises(ConstraintViolation):
            data.db.execute(
                "INSERT INTO category (id, name, type) VALUES (?, ?, ?)",
                ("x", "Bad", "transfer"),
            )


class TestPaymentMethodRepository:
    """Tests for payment methods and the default flag."""
    
    @pytest.mark.asyncio
    async def test_seeded_default(self, data):
        default = await data.payment_methods.get_default()
        assert default.name == "Cash"
    
    @pytest.mark.asyncio
    async def test_new_default_demotes_previous(self, data, cash):
        created = await data.payment_methods.create(
            PaymentMethodInput(name="Crypto", icon="🪙", is_default=True)
        )
        
        methods = await data.payment_methods.get_all()
        defaults = [m for m in methods if m.is_default]
        assert [m.id for m in defaults] == [created.id]
        assert (await data.payment_methods.get_by_id(cash.id)).is_default is False
    
    @pytest.mark.asyncio
    async def test_update_to_default(self, data):
        card = await data.payment_methods.get_by_name("Credit Card")
        
        await data.payment_methods.update(card.id, PaymentMethodPatch(is_default=True))
        
        default = await data.payment_methods.get_default()
        assert default.id == card.id
    
    @pytest.mark.asyncio
    async def test_second_default_rejected_by_storage(self, data):
        with pytest.raises(DuplicateError):
            data.db.execute(
                "INSERT INTO payment_method (id, name, is_default) VALUES (?, ?, 1)",
                ("pm-x", "Other"),
            )


class TestUserProfileRepository:
    """Tests for the singleton profile."""
    
    @pytest.mark.asyncio
    async def test_no_profile_initially(self, data):
        assert await data.user_profile.get() is None
        assert await data.user_profile.exists() is False
    
    @pytest.mark.asyncio
    async def test_create_and_update(self, data):
        await data.user_profile.create(UserProfileInput(name="Sam", email="sam@example.com"))
        
        await data.user_profile.update(UserProfilePatch(currency="EUR"))
        
        profile = await data.user_profile.get()
        assert profile.name == "Sam"
        assert profile.email == "sam@example.com"
        assert profile.currency.value == "EUR"
    
    @pytest.mark.asyncio
    async def test_configured_default_currency(self, db):
        layer = DataLayer(db, default_currency=CurrencyCode.EUR)
        await layer.bootstrap()
        
        created = await layer.user_profile.create(UserProfileInput(name="Sam"))
        
        assert created.currency == CurrencyCode.EUR
        assert (await layer.user_profile.get()).currency == CurrencyCode.EUR
    
    @pytest.mark.asyncio
    async def test_explicit_currency_wins(self, db):
        layer = DataLayer(db, default_currency=CurrencyCode.EUR)
        await layer.bootstrap()
        
        created = await layer.user_profile.create(UserProfileInput(name="Sam", currency="GBP"))
        
        assert created.currency == CurrencyCode.GBP
    
    @pytest.mark.asyncio
    async def test_update_rejects_malformed_email(self, data):
        await data.user_profile.create(UserProfileInput(name="Sam", email="sam@example.com"))
        
        with pytest.raises(ValidationError):
            await data.user_profile.update(UserProfilePatch(email="not-an-email"))
        
        assert (await data.user_profile.get()).email == "sam@example.com"
    
    @pytest.mark.asyncio
    async def test_second_create_fails(self, data):
        await data.user_profile.create(UserProfileInput(name="Sam"))
        
        with pytest.raises(ConstraintViolation):
            await data.user_profile.create(UserProfileInput(name="Other"))
        
        assert (await data.user_profile.get()).name == "Sam"


class TestBudgetRepository:
    """Tests for monthly budgets."""
    
    @pytest.mark.asyncio
    async def test_duplicate_period_and_category_rejected(self, data, expense_category):
        await data.budgets.create(
            BudgetInput(month=1, year=2024, category_id=expense_category.id, limit_amount=300)
        )
        
        with pytest.raises(DuplicateError):
            await data.budgets.create(
                BudgetInput(month=1, year=2024, category_id=expense_category.id, limit_amount=500)
            )
        
        other_month = await data.budgets.create(
            BudgetInput(month=2, year=2024, category_id=expense_category.id, limit_amount=500)
        )
        assert other_month.month == 2
    
    @pytest.mark.asyncio
    async def test_get_by_month_year_includes_spent(self, data, expense_category, cash):
        await data.budgets.create(
            BudgetInput(month=1, year=2024, category_id=expense_category.id, limit_amount=100)
        )
        await data.budgets.create(
            BudgetInput(month=1, year=2024, category_id="orphan", limit_amount=500)
        )
        await data.transactions.create(expense(30, "2024-01-05", expense_category.id, cash.id))
        await data.transactions.create(expense(95, "2024-01-20", expense_category.id, cash.id))
        await data.transactions.create(expense(50, "2024-02-01", expense_category.id, cash.id))
        
        budgets = await data.budgets.get_by_month_year(1, 2024)
        
        assert [b.limit_amount for b in budgets] == [500, 100]
        groceries = budgets[1]
        assert groceries.category_name == "Groceries"
        assert groceries.spent == 125
        assert groceries.is_over_budget is True
        assert budgets[0].category_name is None
        assert budgets[0].spent == 0
    
    @pytest.mark.asyncio
    async def test_update_limit(self, data, expense_category):
        budget = await data.budgets.create(
            BudgetInput(month=1, year=2024, category_id=expense_category.id, limit_amount=100)
        )
        
        await data.budgets.update(budget.id, BudgetPatch(limit_amount=250))
        
        fetched = await data.budgets.get_by_id(budget.id)
        assert fetched.limit_amount == 250
        assert fetched.category_id == expense_category.id
    
    @pytest.mark.asyncio
    async def test_total_budget(self, data):
        await data.budgets.create(BudgetInput(month=3, year=2024, category_id="a", limit_amount=100))
        await data.budgets.create(BudgetInput(month=3, year=2024, category_id="b", limit_amount=50.5))
        
        assert await data.budgets.get_total_budget(3, 2024) == 150.5
        assert await data.budgets.get_total_budget(4, 2024) == 0


class TestGoalRepository:
    """Tests for savings goals."""
    
    @pytest.mark.asyncio
    async def test_ordered_by_deadline(self, data):
        await data.goals.create(GoalInput(title="Later", target_amount=10, deadline="2025-12-31"))
        await data.goals.create(GoalInput(title="Sooner", target_amount=10, deadline="2025-01-31"))
        
        goals = await data.goals.get_all()
        
        assert [g.title for g in goals] == ["Sooner", "Later"]
    
    @pytest.mark.asyncio
    async def test_add_funds_concurrently(self, data):
        goal = await data.goals.create(GoalInput(title="Bike", target_amount=500))
        
        await asyncio.gather(
            data.goals.add_funds(goal.id, 100),
            data.goals.add_funds(goal.id, 100),
        )
        
        fetched = await data.goals.get_by_id(goal.id)
        assert fetched.current_amount == 200
    
    @pytest.mark.asyncio
    async def test_negative_balance_rejected(self, data):
        goal = await data.goals.create(GoalInput(title="Bike", target_amount=500, current_amount=10))
        
        with pytest.raises(ConstraintViolation):
            await data.goals.add_funds(goal.id, -20)
        
        assert (await data.goals.get_by_id(goal.id)).current_amount == 10
    
    @pytest.mark.asyncio
    async def test_icon_can_be_cleared(self, data):
        goal = await data.goals.create(GoalInput(title="Bike", target_amount=500, icon="🚲"))
        
        await data.goals.update(goal.id, GoalPatch(icon=None))
        
        fetched = await data.goals.get_by_id(goal.id)
        assert fetched.icon is None
        assert fetched.title == "Bike"
    
    @pytest.mark.asyncio
    async def test_update_and_delete(self, data):
        goal = await data.goals.create(GoalInput(title="Bike", target_amount=500))
        
        await data.goals.update(goal.id, GoalPatch(title="Road bike"))
        assert (await data.goals.get_by_id(goal.id)).title == "Road bike"
        
        await data.goals.delete(goal.id)
        assert await data.goals.get_by_id(goal.id) is None


class TestRepositoryAuditTrail:
    """Mutations are recorded in the audit log."""
    
    @pytest.mark.asyncio
    async def test_lifecycle_events_recorded(self, data):
        goal = await data.goals.create(GoalInput(title="Bike", target_amount=500))
        await data.goals.add_funds(goal.id, 25)
        await data.goals.update(goal.id, GoalPatch(title="Road bike"))
        await data.goals.delete(goal.id)
        
        events = await data.audit.storage.get_events_by_entity("goal", goal.id)
        
        assert [e.event_type.value for e in events] == [
            "entity_created",
            "goal_funds_added",
            "entity_updated",
            "entity_deleted",
        ]
        assert events[2].details["fields"] == ["title", "updated_at"]
    
    @pytest.mark.asyncio
    async def test_missing_rows_are_not_audited(self, data):
        """Writes that match no row leave no trace in the audit log."""
        await data.goals.add_funds("no-such-goal", 50)
        await data.goals.update("no-such-goal", GoalPatch(title="x"))
        await data.transactions.update("no-such-tx", TransactionPatch(note="x"))
        await data.categories.update("no-such-category", CategoryPatch(name="x"))
        
        storage = data.audit.storage
        assert await storage.get_events_by_entity("goal", "no-such-goal") == []
        assert await storage.get_events_by_entity("transaction", "no-such-tx") == []
        assert await storage.get_events_by_entity("category", "no-such-category") == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
