from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from errors import NotFoundError, PersistenceError
from models import Category, CategoryColor, Day, Expense
from money import to_cents
from schemas import CategoryIn, ExpenseIn
from storage import LedgerStore

logger = logging.getLogger(__name__)


def sweep_orphan_days(session: Session) -> int:
    """Delete every Day that no longer owns an Expense, for all owners."""
    count = LedgerStore(session).delete_empty_days()
    session.commit()
    return count


class DayService:
    def __init__(
        self, session: Session, owner_id: str, store: Optional[LedgerStore] = None
    ) -> None:
        self.session = session
        self.owner_id = owner_id
        self.store = store or LedgerStore(session)

    def resolve_day(self, month_idx: int, day: int, year: int) -> str:
        existing = self.store.find_day(self.owner_id, month_idx, day, year)
        if existing:
            return existing.id

        try:
            created = self.store.create_day(self.owner_id, month_idx, day, year)
        except IntegrityError:
            # Lost a race against another request creating the same day.
            self.session.rollback()
            existing = self.store.find_day(self.owner_id, month_idx, day, year)
            if existing:
                return existing.id
            raise PersistenceError("Error creating new day")
        if created is None:
            raise PersistenceError("Error creating new day")
        self.session.commit()
        logger.info(
            f"day_created: day_id={created.id} owner={self.owner_id} "
            f"date={month_idx + 1}-{day}-{year}"
        )
        return created.id

    def delete_expense_and_maybe_day(self, expense_id: str) -> Expense:
        expense = self.store.delete_expense(expense_id, self.owner_id)
        if expense is None:
            raise NotFoundError(f"Expense with id {expense_id} not found")
        day_id = expense.day_id
        self.session.commit()

        self.prune_if_empty(day_id)
        return expense

    def prune_if_empty(self, day_id: str) -> bool:
        """Delete the day when it has no expenses left.

        Failure here leaves an inert empty day behind; it is logged and left
        for ``sweep_orphan_days`` instead of being retried or raised.
        """
        try:
            if self.store.find_expenses_by_day(day_id):
                return False
            deleted = self.store.delete_day(day_id, self.owner_id)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning(
                f"orphan_day_cleanup_failed: day_id={day_id} "
                f"owner={self.owner_id} error={exc}"
            )
            return False
        if not deleted:
            logger.warning(
                f"orphan_day_cleanup_failed: day_id={day_id} "
                f"owner={self.owner_id} error=no rows deleted"
            )
            return False
        logger.info(f"day_deleted: day_id={day_id} owner={self.owner_id}")
        return True


class CategoryService:
    def __init__(
        self, session: Session, owner_id: str, store: Optional[LedgerStore] = None
    ) -> None:
        self.session = session
        self.owner_id = owner_id
        self.store = store or LedgerStore(session)

    def list_all(self) -> list[Category]:
        return self.store.find_categories(self.owner_id)

    def create(self, data: CategoryIn) -> Category:
        name = data.name.strip()
        if not name:
            raise ValueError("Category name cannot be empty")
        if self.store.find_category_by_name(self.owner_id, name):
            raise ValueError("Category with this name already exists")
        category = self.store.create_category(self.owner_id, name, data.color)
        self.session.commit()
        return category

    def get_or_create(
        self, name: str, color: CategoryColor = CategoryColor.pink
    ) -> Category:
        existing = self.store.find_category_by_name(self.owner_id, name.strip())
        if existing:
            return existing
        return self.create(CategoryIn(name=name, color=color))

    def update(self, category_id: str, data: CategoryIn) -> Category:
        name = data.name.strip()
        if not name:
            raise ValueError("Category name cannot be empty")
        clash = self.store.find_category_by_name(self.owner_id, name)
        if clash and clash.id != category_id:
            raise ValueError("Category with this name already exists")
        category = self.store.update_category(
            category_id, self.owner_id, name, data.color
        )
        if category is None:
            raise NotFoundError(f"Category with id {category_id} not found")
        self.session.commit()
        return category

    def delete(self, category_id: str) -> Category:
        day_ids = self.session.scalars(
            select(Expense.day_id)
            .where(
                Expense.user_id == self.owner_id,
                Expense.category_id == category_id,
            )
            .distinct()
        ).all()
        category = self.store.delete_category(category_id, self.owner_id)
        if category is None:
            raise NotFoundError(f"Category with id {category_id} not found")
        self.session.commit()

        days = DayService(self.session, self.owner_id, store=self.store)
        for day_id in day_ids:
            days.prune_if_empty(day_id)
        return category


class ExpenseService:
    def __init__(
        self, session: Session, owner_id: str, store: Optional[LedgerStore] = None
    ) -> None:
        self.session = session
        self.owner_id = owner_id
        self.store = store or LedgerStore(session)
        self.days = DayService(session, owner_id, store=self.store)

    def create(self, data: ExpenseIn) -> Expense:
        amount_cents = to_cents(data.amount)
        if data.category_id is not None:
            category = self.store.get_category(data.category_id, self.owner_id)
            if not category:
                raise NotFoundError(f"Category with id {data.category_id} not found")
        else:
            category = CategoryService(
                self.session, self.owner_id, store=self.store
            ).get_or_create(data.category_name or "", data.category_color)
        category_id = category.id

        when = data.date.to_dmy()
        day_id = self.days.resolve_day(when.month_idx, when.day, when.year)
        expense = self.store.create_expense(
            self.owner_id, category_id, day_id, amount_cents
        )
        if expense is None:
            raise PersistenceError("Error creating expense")
        self.session.commit()
        return expense

    def delete(self, expense_id: str) -> Expense:
        return self.days.delete_expense_and_maybe_day(expense_id)

    def over_year_range(
        self, from_year: int, to_year: int
    ) -> tuple[list[Day], list[Category]]:
        days = self.store.find_days_in_year_range(self.owner_id, from_year, to_year)
        categories = self.store.find_categories(self.owner_id)
        return days, categories

    def days_page(self, offset: int, limit: int) -> list[Day]:
        return self.store.find_days_page(self.owner_id, offset, limit)
