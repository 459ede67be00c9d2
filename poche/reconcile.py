"""Planned-vs-actual views for one month.

Variance is always ``budget - tracked``: positive means the month came in
under budget, negative means over.
"""
from dataclasses import dataclass
from typing import Iterable, Mapping

from poche.aggregates import (
    KindTotals,
    MonthStats,
    budget_for,
    month_budget_total,
    month_tracked_total,
    sum_for_month_kind_category,
)
from poche.domain import CATEGORIES, KINDS, BudgetKey, Entry
from poche.lazy import monthly_series, top_categories

__all__ = [
    "BudgetVsTracked",
    "CategoryVariance",
    "budget_vs_tracked",
    "category_variances",
    "monthly_series",
    "selected_month_stats",
    "top_categories",
]


@dataclass(frozen=True)
class BudgetVsTracked:
    month: str
    budget: KindTotals
    tracked: KindTotals

    def variance(self) -> KindTotals:
        return KindTotals.from_kinds(
            {k: self.budget.for_kind(k) - self.tracked.for_kind(k) for k in KINDS}
        )


@dataclass(frozen=True)
class CategoryVariance:
    category: str
    budget: float
    tracked: float

    @property
    def variance(self) -> float:
        return self.budget - self.tracked


def selected_month_stats(entries: Iterable[Entry], month: str) -> MonthStats:
    for row in monthly_series(entries):
        if row.month == month:
            return row
    return MonthStats(month)


def budget_vs_tracked(
    entries: Iterable[Entry], budgets: Mapping[BudgetKey, float], month: str
) -> BudgetVsTracked:
    entries = tuple(entries)
    return BudgetVsTracked(
        month=month,
        budget=KindTotals.from_kinds(
            {k: month_budget_total(budgets, month, k) for k in KINDS}
        ),
        tracked=KindTotals.from_kinds(
            {k: month_tracked_total(entries, month, k) for k in KINDS}
        ),
    )


def category_variances(
    entries: Iterable[Entry],
    budgets: Mapping[BudgetKey, float],
    month: str,
    kind: str,
) -> list[CategoryVariance]:
    entries = tuple(entries)
    return [
        CategoryVariance(
            category=c,
            budget=budget_for(budgets, month, kind, c),
            tracked=sum_for_month_kind_category(entries, month, kind, c),
        )
        for c in CATEGORIES.get(kind, ())
    ]
