from .transaction import (
    Category,
    ExpenseCategory,
    IncomeCategory,
    Transaction,
    TransactionType,
    TransactionUpdate,
    categories_for,
    parse_category,
)

__all__ = [
    "Category",
    "ExpenseCategory",
    "IncomeCategory",
    "Transaction",
    "TransactionType",
    "TransactionUpdate",
    "categories_for",
    "parse_category",
]
