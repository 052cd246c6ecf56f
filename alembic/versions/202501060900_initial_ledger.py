"""initial ledger schema

Revision ID: 202501060900
Revises:
Create Date: 2025-01-06 09:00:00.000000

"""

from alembic import op
import sqlalchemy as sa


revision = "202501060900"
down_revision = None
branch_labels = None
depends_on = None

CATEGORY_COLORS = (
    "rose",
    "pink",
    "fuchsia",
    "purple",
    "violet",
    "indigo",
    "blue",
    "sky",
    "cyan",
    "teal",
    "emerald",
    "green",
    "lime",
    "yellow",
    "amber",
    "orange",
    "red",
    "slate",
)


def upgrade():
    op.create_table(
        "categories",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column(
            "color",
            sa.Enum(*CATEGORY_COLORS, name="categorycolor"),
            nullable=False,
            server_default="pink",
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "name", name="uq_category_user_name"),
    )

    op.create_table(
        "days",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("day", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.UniqueConstraint(
            "user_id", "month", "day", "year", name="uq_day_user_month_day_year"
        ),
        sa.CheckConstraint("month >= 0 AND month <= 11", name="ck_days_month_index"),
        sa.CheckConstraint("day >= 1 AND day <= 31", name="ck_days_day_of_month"),
    )
    op.create_index("ix_days_user_year", "days", ["user_id", "year"])

    op.create_table(
        "expenses",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column(
            "category_id",
            sa.String(length=36),
            sa.ForeignKey("categories.id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "day_id",
            sa.String(length=36),
            sa.ForeignKey("days.id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("amount_cents >= 0", name="ck_expenses_amount_positive"),
    )
    op.create_index("ix_expenses_day", "expenses", ["day_id"])
    op.create_index(
        "ix_expenses_user_category", "expenses", ["user_id", "category_id"]
    )


def downgrade():
    op.drop_index("ix_expenses_user_category", table_name="expenses")
    op.drop_index("ix_expenses_day", table_name="expenses")
    op.drop_table("expenses")
    op.drop_index("ix_days_user_year", table_name="days")
    op.drop_table("days")
    op.drop_table("categories")
