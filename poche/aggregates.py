import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, NamedTuple

from poche.domain import CATEGORIES, KINDS, BudgetKey, Entry
from poche.filters import by_kind, by_month_kind_category


@dataclass(frozen=True)
class KindTotals:
    income: float = 0.0
    expenses: float = 0.0
    savings: float = 0.0
    investments: float = 0.0

    @property
    def net(self) -> float:
        return self.income - self.expenses - self.savings - self.investments

    def for_kind(self, kind: str) -> float:
        return getattr(self, kind.lower())

    def as_series(self) -> tuple[float, ...]:
        """Values in KINDS order, ready to be used as one chart series."""
        return tuple(self.for_kind(k) for k in KINDS)

    @classmethod
    def from_kinds(cls, values: Mapping[str, float]) -> "KindTotals":
        return cls(**{k.lower(): values.get(k, 0.0) for k in KINDS})


class MonthStats(NamedTuple):
    month: str
    income: float = 0.0
    expenses: float = 0.0
    savings: float = 0.0
    investments: float = 0.0
    net: float = 0.0

    @classmethod
    def from_totals(cls, month: str, totals: KindTotals) -> "MonthStats":
        return cls(
            month,
            totals.income,
            totals.expenses,
            totals.savings,
            totals.investments,
            totals.net,
        )


def safe_amount(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def _sum_amounts(entries: Iterable[Entry]) -> float:
    # fsum is exactly rounded, so entry order never changes a total
    return math.fsum(safe_amount(e.amount) for e in entries)


def sum_by_kind(entries: Iterable[Entry], kind: str) -> float:
    return _sum_amounts(filter(by_kind(kind), entries))


def sum_for_month_kind_category(
    entries: Iterable[Entry], month: str, kind: str, category: str
) -> float:
    return _sum_amounts(filter(by_month_kind_category(month, kind, category), entries))


def budget_for(
    budgets: Mapping[BudgetKey, float], month: str, kind: str, category: str
) -> float:
    # no allocation and an allocation of zero are the same thing
    return safe_amount(budgets.get(BudgetKey(month, kind, category), 0.0))


def month_budget_total(budgets: Mapping[BudgetKey, float], month: str, kind: str) -> float:
    return math.fsum(budget_for(budgets, month, kind, c) for c in CATEGORIES.get(kind, ()))


def month_tracked_total(entries: Iterable[Entry], month: str, kind: str) -> float:
    entries = tuple(entries)
    return math.fsum(
        sum_for_month_kind_category(entries, month, kind, c)
        for c in CATEGORIES.get(kind, ())
    )


def distinct_months(entries: Iterable[Entry]) -> list[str]:
    # "YYYY-MM" sorts lexicographically in calendar order
    return sorted({e.month for e in entries})


def kind_totals(entries: Iterable[Entry]) -> KindTotals:
    entries = tuple(entries)
    return KindTotals.from_kinds({k: sum_by_kind(entries, k) for k in KINDS})
