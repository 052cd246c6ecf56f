from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models import CategoryColor
from money import AMOUNT_PATTERN, is_nonzero_amount
from periods import DMY


class DMYIn(BaseModel):
    year: int = Field(..., ge=1900, le=3000)
    month_idx: int = Field(..., ge=0, le=11)
    day: int = Field(..., ge=1, le=31)

    def to_dmy(self) -> DMY:
        return DMY(year=self.year, month_idx=self.month_idx, day=self.day)


class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: CategoryColor = CategoryColor.pink


class ExpenseIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category_id: Optional[str] = None
    category_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    category_color: CategoryColor = CategoryColor.pink
    amount: str
    date: DMYIn

    @field_validator("amount")
    @classmethod
    def _check_amount(cls, value: str) -> str:
        if not AMOUNT_PATTERN.fullmatch(value):
            raise ValueError("Amount must look like 12 or 12.34")
        if not is_nonzero_amount(value):
            raise ValueError("Amount must be greater than zero")
        return value

    @model_validator(mode="after")
    def _check_category(self) -> "ExpenseIn":
        if (self.category_id is None) == (self.category_name is None):
            raise ValueError("Provide exactly one of category_id or category_name")
        return self


class YearRangeIn(BaseModel):
    from_year: int
    to_year: int

    @model_validator(mode="after")
    def _check_order(self) -> "YearRangeIn":
        if self.from_year > self.to_year:
            raise ValueError("from_year must not be after to_year")
        return self


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: CategoryColor


class ExpenseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    category_id: str
    day_id: str
    amount_cents: int


class DayOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    year: int
    month: int
    day: int
    expenses: list[ExpenseOut] = Field(default_factory=list)


class DateRangeOut(BaseModel):
    days: list[DayOut] = Field(default_factory=list)
    categories: list[CategoryOut] = Field(default_factory=list)


class DaysPageOut(BaseModel):
    items: list[DayOut]
    page: int
    page_size: int
    has_more: bool
