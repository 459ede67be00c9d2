from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

KINDS = ("Income", "Expenses", "Savings", "Investments")

CATEGORIES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "Income": ("Salary", "Scholarship", "Family Support", "Side hustle"),
    "Expenses": (
        "Rent",
        "Transport",
        "Groceries",
        "Phone & Internet",
        "Subscriptions",
        "School & Books",
        "Health",
        "Leisure",
    ),
    "Savings": ("Emergency Fund", "Travel", "Other Savings"),
    "Investments": ("Crypto", "Stocks", "Other Investment"),
})

KEY_SEPARATOR = "|"


def month_key(date: str) -> str:
    return str(date)[:7]


@dataclass(frozen=True)
class Entry:
    id: str
    date: str        # "YYYY-MM-DD"
    kind: str        # one of KINDS
    category: str
    amount: float    # imported values are kept as-is, aggregation coerces
    note: Optional[str] = None

    @property
    def month(self) -> str:
        return month_key(self.date)


@dataclass(frozen=True, order=True)
class BudgetKey:
    month: str       # "YYYY-MM"
    kind: str
    category: str

    def to_storage(self) -> str:
        return KEY_SEPARATOR.join((self.month, self.kind, self.category))

    @classmethod
    def from_storage(cls, raw: str) -> Optional["BudgetKey"]:
        # category is last so it may itself contain the separator
        parts = str(raw).split(KEY_SEPARATOR, 2)
        if len(parts) != 3:
            return None
        return cls(*parts)


@dataclass(frozen=True)
class Snapshot:
    version: int
    entries: tuple[Entry, ...] = ()
    budgets: Mapping[BudgetKey, float] = field(
        default_factory=lambda: MappingProxyType({})
    )
