from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

TITLE_MIN_LENGTH = 4
TITLE_MAX_LENGTH = 32
VALUE_MIN = 100
VALUE_MAX = 9_999_999_999


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class IncomeCategory(str, Enum):
    SALARY = "SALARY"
    INVESTMENTS = "INVESTMENTS"
    SALES = "SALES"
    PRIZES = "PRIZES"


class ExpenseCategory(str, Enum):
    HEALTH = "HEALTH"
    FOOD = "FOOD"
    EDUCATION = "EDUCATION"
    ENTERTAINMENT = "ENTERTAINMENT"
    SERVICES = "SERVICES"
    GIFTS_AND_DONATIONS = "GIFTS AND DONATIONS"
    TRANSPORTATION = "TRANSPORTATION"
    SHOPPING = "SHOPPING"


Category = Union[IncomeCategory, ExpenseCategory]

_CATEGORIES_BY_TYPE: dict[TransactionType, tuple[Category, ...]] = {
    TransactionType.INCOME: tuple(IncomeCategory),
    TransactionType.EXPENSE: tuple(ExpenseCategory),
}


def categories_for(tx_type: TransactionType) -> tuple[Category, ...]:
    """Categories a transaction of ``tx_type`` may use, in menu order."""
    return _CATEGORIES_BY_TYPE[TransactionType(tx_type)]


def parse_category(tx_type: TransactionType, raw: str) -> Category:
    for category in categories_for(tx_type):
        if category.value == raw:
            return category
    raise ValueError(f"Unknown {TransactionType(tx_type).value.lower()} category '{raw}'.")


class Transaction(BaseModel):
    """A single ledger entry, exactly as stored in the snapshot file."""

    id: int = Field(gt=0)
    created_at: str = Field(min_length=1)
    title: str = Field(min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    type: TransactionType
    category: Category
    value: int = Field(ge=VALUE_MIN, le=VALUE_MAX)

    @field_validator("title")
    @classmethod
    def _uppercase_title(cls, value: str) -> str:
        return value.upper()

    @model_validator(mode="after")
    def _check_category_matches_type(self) -> "Transaction":
        if self.category not in categories_for(self.type):
            raise ValueError(
                f"Category {self.category.value} is not allowed for {self.type.value} transactions"
            )
        return self


class TransactionUpdate(BaseModel):
    """Fields an edit may overwrite; ``id`` and ``created_at`` are never touched."""

    title: Optional[str] = Field(
        default=None, min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH
    )
    type: Optional[TransactionType] = None
    category: Optional[Category] = None
    value: Optional[int] = Field(default=None, ge=VALUE_MIN, le=VALUE_MAX)
