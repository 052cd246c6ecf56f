from __future__ import annotations

from typing import Optional

from sqlalchemy import delete, exists, select
from sqlalchemy.orm import Session, selectinload

from models import Category, CategoryColor, Day, Expense


class LedgerStore:
    """SQLAlchemy-backed storage for days, expenses and categories.

    Every owner-scoped lookup filters on ``user_id`` so rows belonging to
    another owner behave exactly like missing rows. The store flushes but
    never commits; transaction boundaries belong to the services.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # days

    def find_day(
        self, owner: str, month_idx: int, day: int, year: int
    ) -> Optional[Day]:
        return self.session.scalar(
            select(Day).where(
                Day.user_id == owner,
                Day.month == month_idx,
                Day.day == day,
                Day.year == year,
            )
        )

    def create_day(
        self, owner: str, month_idx: int, day: int, year: int
    ) -> Optional[Day]:
        record = Day(user_id=owner, month=month_idx, day=day, year=year)
        self.session.add(record)
        self.session.flush()
        return record

    def delete_day(self, day_id: str, owner: str) -> int:
        result = self.session.execute(
            delete(Day).where(Day.id == day_id, Day.user_id == owner)
        )
        return int(result.rowcount or 0)

    def find_days_in_year_range(
        self, owner: str, from_year: int, to_year: int
    ) -> list[Day]:
        stmt = (
            select(Day)
            .options(selectinload(Day.expenses))
            .where(
                Day.user_id == owner,
                Day.year >= from_year,
                Day.year <= to_year,
            )
            .order_by(Day.year.desc(), Day.month.desc(), Day.day.desc())
        )
        return list(self.session.scalars(stmt).all())

    def find_days_page(self, owner: str, offset: int, limit: int) -> list[Day]:
        stmt = (
            select(Day)
            .options(selectinload(Day.expenses))
            .where(Day.user_id == owner)
            .order_by(Day.created_at.desc(), Day.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.session.scalars(stmt).all())

    def delete_empty_days(self) -> int:
        result = self.session.execute(
            delete(Day)
            .where(~exists().where(Expense.day_id == Day.id))
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    # expenses

    def create_expense(
        self, owner: str, category_id: str, day_id: str, amount_cents: int
    ) -> Optional[Expense]:
        expense = Expense(
            user_id=owner,
            category_id=category_id,
            day_id=day_id,
            amount_cents=amount_cents,
        )
        self.session.add(expense)
        self.session.flush()
        return expense

    def delete_expense(self, expense_id: str, owner: str) -> Optional[Expense]:
        expense = self.session.scalar(
            select(Expense).where(Expense.id == expense_id, Expense.user_id == owner)
        )
        if not expense:
            return None
        self.session.delete(expense)
        self.session.flush()
        return expense

    def find_expenses_by_day(self, day_id: str) -> list[Expense]:
        return list(
            self.session.scalars(select(Expense).where(Expense.day_id == day_id)).all()
        )

    # categories

    def find_categories(self, owner: str) -> list[Category]:
        stmt = (
            select(Category)
            .where(Category.user_id == owner)
            .order_by(Category.created_at, Category.name)
        )
        return list(self.session.scalars(stmt).all())

    def get_category(self, category_id: str, owner: str) -> Optional[Category]:
        return self.session.scalar(
            select(Category).where(
                Category.id == category_id, Category.user_id == owner
            )
        )

    def find_category_by_name(self, owner: str, name: str) -> Optional[Category]:
        return self.session.scalar(
            select(Category).where(Category.user_id == owner, Category.name == name)
        )

    def create_category(
        self, owner: str, name: str, color: CategoryColor
    ) -> Category:
        category = Category(user_id=owner, name=name, color=color)
        self.session.add(category)
        self.session.flush()
        return category

    def update_category(
        self, category_id: str, owner: str, name: str, color: CategoryColor
    ) -> Optional[Category]:
        category = self.get_category(category_id, owner)
        if not category:
            return None
        category.name = name
        category.color = color
        self.session.flush()
        return category

    def delete_category(self, category_id: str, owner: str) -> Optional[Category]:
        category = self.get_category(category_id, owner)
        if not category:
            return None
        self.session.delete(category)
        self.session.flush()
        return category
