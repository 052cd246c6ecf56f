from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol

from errors import RangeError
from money import to_display
from periods import HasDMY, sort_days_desc


class HasCategory(Protocol):
    id: str
    name: str
    color: object


def _color_value(color: object) -> Optional[str]:
    if color is None:
        return None
    return getattr(color, "value", color)


def percent_text(total_cents: int, global_total: int) -> str:
    """
    Share of ``global_total`` as display text, truncated to two decimals.

    Truncation (not rounding) keeps the displayed percentages of the selected
    categories from adding up to more than 100.
    """
    if global_total <= 0:
        raise RangeError("Cannot compute a share of a zero total")
    basis_points = (total_cents * 10_000) // global_total
    whole, frac = divmod(basis_points, 100)
    if frac == 0:
        return str(whole)
    return f"{whole}.{frac:02d}".rstrip("0")


@dataclass
class AggregateRow:
    category_id: str
    name: Optional[str]
    color: Optional[str]
    total_cents: int = 0
    share: Optional[float] = None
    global_total: int = 0

    @property
    def percent_text(self) -> Optional[str]:
        if self.share is None:
            return None
        return percent_text(self.total_cents, self.global_total)


@dataclass
class CategoryAggregate:
    global_total: int
    per_category: list[AggregateRow]


def aggregate(
    days: Iterable,
    categories: Iterable[HasCategory],
    selected_category_ids: Iterable[str],
) -> CategoryAggregate:
    by_id = {c.id: c for c in categories}
    selected = set(selected_category_ids)
    rows: dict[str, AggregateRow] = {}
    global_total = 0

    for day in days:
        for expense in day.expenses:
            row = rows.get(expense.category_id)
            if row is None:
                category = by_id.get(expense.category_id)
                row = AggregateRow(
                    category_id=expense.category_id,
                    name=category.name if category else None,
                    color=_color_value(category.color) if category else None,
                )
                rows[expense.category_id] = row
            row.total_cents += expense.amount_cents
            if expense.category_id in selected:
                global_total += expense.amount_cents

    for row in rows.values():
        row.global_total = global_total
        if global_total and row.category_id in selected:
            row.share = row.total_cents / global_total

    return CategoryAggregate(
        global_total=global_total, per_category=list(rows.values())
    )


def chart_data(result: CategoryAggregate) -> list[dict[str, object]]:
    data: list[dict[str, object]] = []
    for row in result.per_category:
        label = f"{row.name} - {to_display(row.total_cents)}"
        if row.share is not None:
            label += f" ({row.percent_text}%)"
        data.append(
            {
                "category_id": row.category_id,
                "value": row.share,
                "name": label,
                "color": row.color,
            }
        )
    return data


@dataclass
class DayListing:
    id: str
    total_for_day: int
    date_display: str
    category_id_to_expenses: dict[str, list] = field(default_factory=dict)


def group_days(days: Iterable[HasDMY]) -> list[DayListing]:
    listings: list[DayListing] = []
    for day in sort_days_desc(days):
        grouped: dict[str, list] = {}
        total = 0
        for expense in day.expenses:
            grouped.setdefault(expense.category_id, []).append(expense)
            total += expense.amount_cents
        listings.append(
            DayListing(
                id=day.id,
                total_for_day=total,
                date_display=f"{day.month + 1}-{day.day}-{day.year}",
                category_id_to_expenses=grouped,
            )
        )
    return listings
