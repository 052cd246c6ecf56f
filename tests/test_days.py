import logging

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from database import Base
from errors import NotFoundError, PersistenceError
from models import Day, Expense
from schemas import CategoryIn, DMYIn, ExpenseIn
from services import CategoryService, DayService, ExpenseService, sweep_orphan_days
from storage import LedgerStore


def make_engine():
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    return engine


def expense_in(category_id: str, amount: str, year: int, month_idx: int, day: int):
    return ExpenseIn(
        category_id=category_id,
        amount=amount,
        date=DMYIn(year=year, month_idx=month_idx, day=day),
    )


def count(session: Session, model) -> int:
    return session.execute(select(func.count(model.id))).scalar_one()


class NoDayStore(LedgerStore):
    def create_day(self, owner, month_idx, day, year):
        return None


class LockedDayStore(LedgerStore):
    def delete_day(self, day_id, owner):
        raise OperationalError("DELETE FROM days", {}, Exception("database is locked"))


def test_resolve_day_reuses_existing_bucket() -> None:
    engine = make_engine()

    with Session(engine) as session:
        days = DayService(session, "alice")
        first = days.resolve_day(5, 15, 2024)
        second = days.resolve_day(5, 15, 2024)

        assert first == second
        assert count(session, Day) == 1


def test_resolve_day_is_scoped_per_owner() -> None:
    engine = make_engine()

    with Session(engine) as session:
        alice_day = DayService(session, "alice").resolve_day(0, 1, 2024)
        bob_day = DayService(session, "bob").resolve_day(0, 1, 2024)

        assert alice_day != bob_day
        assert count(session, Day) == 2


def test_expenses_on_same_date_share_a_day() -> None:
    engine = make_engine()

    with Session(engine) as session:
        food = CategoryService(session, "alice").create(CategoryIn(name="Food"))
        expenses = ExpenseService(session, "alice")
        lunch = expenses.create(expense_in(food.id, "12.50", 2024, 0, 1))
        dinner = expenses.create(expense_in(food.id, "30", 2024, 0, 1))

        assert lunch.day_id == dinner.day_id
        assert lunch.amount_cents == 1250
        assert dinner.amount_cents == 3000


def test_deleting_only_expense_removes_its_day() -> None:
    engine = make_engine()

    with Session(engine) as session:
        food = CategoryService(session, "alice").create(CategoryIn(name="Food"))
        expenses = ExpenseService(session, "alice")
        lunch = expenses.create(expense_in(food.id, "12.50", 2024, 0, 1))

        deleted = DayService(session, "alice").delete_expense_and_maybe_day(lunch.id)

        assert deleted.id == lunch.id
        assert deleted.amount_cents == 1250
        assert count(session, Expense) == 0
        assert count(session, Day) == 0


def test_deleting_one_of_two_expenses_keeps_the_day() -> None:
    engine = make_engine()

    with Session(engine) as session:
        food = CategoryService(session, "alice").create(CategoryIn(name="Food"))
        expenses = ExpenseService(session, "alice")
        lunch = expenses.create(expense_in(food.id, "12.50", 2024, 0, 1))
        dinner = expenses.create(expense_in(food.id, "30.00", 2024, 0, 1))

        expenses.delete(lunch.id)

        assert count(session, Expense) == 1
        assert count(session, Day) == 1
        remaining = session.scalar(select(Expense))
        assert remaining.id == dinner.id


def test_deleting_another_owners_expense_is_not_found() -> None:
    engine = make_engine()

    with Session(engine) as session:
        food = CategoryService(session, "alice").create(CategoryIn(name="Food"))
        lunch = ExpenseService(session, "alice").create(
            expense_in(food.id, "12.50", 2024, 0, 1)
        )

        with pytest.raises(NotFoundError):
            ExpenseService(session, "bob").delete(lunch.id)
        with pytest.raises(NotFoundError):
            ExpenseService(session, "alice").delete("missing")

        assert count(session, Expense) == 1


def test_day_creation_failure_skips_expense_insert() -> None:
    engine = make_engine()

    with Session(engine) as session:
        food = CategoryService(session, "alice").create(CategoryIn(name="Food"))
        expenses = ExpenseService(session, "alice", store=NoDayStore(session))

        with pytest.raises(PersistenceError):
            expenses.create(expense_in(food.id, "5.00", 2024, 0, 1))

        assert count(session, Expense) == 0
        assert count(session, Day) == 0


def test_failed_day_cleanup_is_logged_not_raised(caplog) -> None:
    engine = make_engine()

    with Session(engine) as session:
        food = CategoryService(session, "alice").create(CategoryIn(name="Food"))
        lunch = ExpenseService(session, "alice").create(
            expense_in(food.id, "12.50", 2024, 0, 1)
        )

        days = DayService(session, "alice", store=LockedDayStore(session))
        with caplog.at_level(logging.WARNING, logger="services"):
            deleted = days.delete_expense_and_maybe_day(lunch.id)

        assert deleted.id == lunch.id
        assert count(session, Expense) == 0
        assert count(session, Day) == 1
        assert "orphan_day_cleanup_failed" in caplog.text

        assert sweep_orphan_days(session) == 1
        assert count(session, Day) == 0


def test_sweep_leaves_days_with_expenses_alone() -> None:
    engine = make_engine()

    with Session(engine) as session:
        food = CategoryService(session, "alice").create(CategoryIn(name="Food"))
        ExpenseService(session, "alice").create(
            expense_in(food.id, "1.00", 2024, 0, 1)
        )
        DayService(session, "bob").resolve_day(0, 2, 2024)

        assert sweep_orphan_days(session) == 1
        assert count(session, Day) == 1


def test_expense_with_unknown_category_is_rejected_before_day_creation() -> None:
    engine = make_engine()

    with Session(engine) as session:
        bob_food = CategoryService(session, "bob").create(CategoryIn(name="Food"))

        with pytest.raises(NotFoundError):
            ExpenseService(session, "alice").create(
                expense_in(bob_food.id, "1.00", 2024, 0, 1)
            )

        assert count(session, Day) == 0
