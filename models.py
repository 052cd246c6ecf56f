from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base


def _new_id() -> str:
    return str(uuid4())


class CategoryColor(str, Enum):
    rose = "rose"
    pink = "pink"
    fuchsia = "fuchsia"
    purple = "purple"
    violet = "violet"
    indigo = "indigo"
    blue = "blue"
    sky = "sky"
    cyan = "cyan"
    teal = "teal"
    emerald = "emerald"
    green = "green"
    lime = "lime"
    yellow = "yellow"
    amber = "amber"
    orange = "orange"
    red = "red"
    slate = "slate"


CATEGORY_COLOR_ENUM = SAEnum(
    CategoryColor,
    name="categorycolor",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


class Category(Base, TimestampMixin):
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[CategoryColor] = mapped_column(
        CATEGORY_COLOR_ENUM, nullable=False, default=CategoryColor.pink
    )

    expenses: Mapped[list["Expense"]] = relationship(
        "Expense",
        back_populates="category",
        cascade="all, delete-orphan",
    )

    # Names compare case-sensitively: "Food" and "food" are distinct.
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_category_user_name"),
    )


class Day(Base):
    __tablename__ = "days"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    # Zero-based, January is 0.
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    day: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    expenses: Mapped[list["Expense"]] = relationship(
        "Expense", back_populates="day", passive_deletes=True
    )

    __table_args__ = (
        UniqueConstraint(
            "user_id", "month", "day", "year", name="uq_day_user_month_day_year"
        ),
        Index("ix_days_user_year", "user_id", "year"),
        CheckConstraint("month >= 0 AND month <= 11", name="ck_days_month_index"),
        CheckConstraint("day >= 1 AND day <= 31", name="ck_days_day_of_month"),
    )


class Expense(Base, TimestampMixin):
    __tablename__ = "expenses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    category_id: Mapped[str] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    day_id: Mapped[str] = mapped_column(
        ForeignKey("days.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )

    category: Mapped["Category"] = relationship("Category", back_populates="expenses")
    day: Mapped["Day"] = relationship("Day", back_populates="expenses")

    __table_args__ = (
        Index("ix_expenses_day", "day_id"),
        Index("ix_expenses_user_category", "user_id", "category_id"),
        CheckConstraint("amount_cents >= 0", name="ck_expenses_amount_positive"),
    )
