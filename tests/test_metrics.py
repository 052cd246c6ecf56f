import pytest

from errors import RangeError
from metrics import aggregate, chart_data, group_days, percent_text
from models import CategoryColor
from schemas import CategoryOut, DayOut, ExpenseOut


def make_day(day_id: str, year: int, month: int, day: int, *expenses) -> DayOut:
    return DayOut(
        id=day_id,
        year=year,
        month=month,
        day=day,
        expenses=[
            ExpenseOut(
                id=f"{day_id}-{idx}",
                category_id=category_id,
                day_id=day_id,
                amount_cents=cents,
            )
            for idx, (category_id, cents) in enumerate(expenses)
        ],
    )


CATEGORIES = [
    CategoryOut(id="a", name="Food", color=CategoryColor.green),
    CategoryOut(id="b", name="Rent", color=CategoryColor.slate),
    CategoryOut(id="c", name="Fun", color=CategoryColor.pink),
]


def test_unselected_category_is_listed_but_excluded_from_total() -> None:
    days = [
        make_day("d1", 2024, 0, 1, ("a", 100), ("b", 300)),
        make_day("d2", 2024, 0, 2, ("a", 200)),
    ]

    result = aggregate(days, CATEGORIES, {"a"})

    assert result.global_total == 300
    rows = {row.category_id: row for row in result.per_category}
    assert rows["a"].total_cents == 300
    assert rows["a"].share == 1.0
    assert rows["a"].percent_text == "100"
    assert rows["b"].total_cents == 300
    assert rows["b"].share is None
    assert rows["b"].percent_text is None


def test_rows_follow_first_seen_order() -> None:
    days = [
        make_day("d1", 2024, 0, 3, ("c", 50), ("a", 10)),
        make_day("d2", 2024, 0, 2, ("b", 70), ("c", 5)),
    ]

    result = aggregate(days, CATEGORIES, {"a", "b", "c"})

    assert [row.category_id for row in result.per_category] == ["c", "a", "b"]
    assert [row.name for row in result.per_category] == ["Fun", "Food", "Rent"]
    assert result.per_category[0].color == "pink"


def test_zero_selected_total_omits_every_share() -> None:
    days = [make_day("d1", 2024, 0, 1, ("a", 100), ("b", 0))]

    result = aggregate(days, CATEGORIES, set())

    assert result.global_total == 0
    assert all(row.share is None for row in result.per_category)
    assert [row.total_cents for row in result.per_category] == [100, 0]


def test_unknown_category_still_gets_a_row() -> None:
    days = [make_day("d1", 2024, 0, 1, ("ghost", 42))]

    result = aggregate(days, CATEGORIES, {"ghost"})

    row = result.per_category[0]
    assert row.name is None
    assert row.color is None
    assert row.share == 1.0


def test_percent_text_truncates_instead_of_rounding() -> None:
    assert percent_text(1, 3) == "33.33"
    assert percent_text(2, 3) == "66.66"
    assert percent_text(1, 2) == "50"
    assert percent_text(101, 200) == "50.5"
    assert percent_text(29, 100) == "29"
    assert percent_text(1, 1) == "100"


def test_percent_text_of_zero_total_raises_range_error() -> None:
    with pytest.raises(RangeError):
        percent_text(10, 0)


def test_truncated_percentages_never_exceed_one_hundred() -> None:
    days = [make_day("d1", 2024, 0, 1, ("a", 1), ("b", 1), ("c", 1))]

    result = aggregate(days, CATEGORIES, {"a", "b", "c"})

    total = sum(float(row.percent_text) for row in result.per_category)
    assert total <= 100


def test_chart_data_labels_include_amount_and_share() -> None:
    days = [make_day("d1", 2024, 0, 1, ("a", 250), ("b", 750))]

    data = chart_data(aggregate(days, CATEGORIES, {"a", "b"}))

    assert data[0] == {
        "category_id": "a",
        "value": 0.25,
        "name": "Food - $2.50 (25%)",
        "color": "green",
    }
    assert data[1]["name"] == "Rent - $7.50 (75%)"

    unselected = chart_data(aggregate(days, CATEGORIES, {"a"}))
    assert unselected[1]["name"] == "Rent - $7.50"
    assert unselected[1]["value"] is None


def test_group_days_sorts_latest_first_and_groups_by_category() -> None:
    days = [
        make_day("old", 2023, 11, 31, ("b", 1000)),
        make_day("new", 2024, 1, 9, ("a", 100), ("b", 5), ("a", 20)),
    ]

    listings = group_days(days)

    assert [listing.id for listing in listings] == ["new", "old"]
    newest = listings[0]
    assert newest.total_for_day == 125
    assert newest.date_display == "2-9-2024"
    assert list(newest.category_id_to_expenses) == ["a", "b"]
    assert [e.amount_cents for e in newest.category_id_to_expenses["a"]] == [100, 20]
    assert listings[1].date_display == "12-31-2023"
