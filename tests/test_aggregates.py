import math

from poche.aggregates import (
    KindTotals,
    budget_for,
    distinct_months,
    kind_totals,
    month_budget_total,
    month_tracked_total,
    safe_amount,
    sum_by_kind,
    sum_for_month_kind_category,
)
from poche.domain import BudgetKey, Entry


def make_sample():
    entries = (
        Entry("t1", "2026-01-05", "Income", "Salary", 1000),
        Entry("t2", "2026-01-10", "Expenses", "Rent", 400),
        Entry("t3", "2026-01-12", "Expenses", "Groceries", 120.5),
        Entry("t4", "2026-02-01", "Expenses", "Rent", 400),
        Entry("t5", "2025-12-20", "Savings", "Travel", 50),
        Entry("t6", "2026-01-15", "Expenses", "Pets", 70),
        Entry("t7", "2026-01-16", "Expenses", "Groceries", "oops"),
        Entry("t8", "2026-01-17", "Investments", "Stocks", float("nan")),
    )
    budgets = {
        BudgetKey("2026-01", "Expenses", "Rent"): 500,
        BudgetKey("2026-01", "Expenses", "Groceries"): 150,
        BudgetKey("2026-01", "Expenses", "Pets"): 999,
    }
    return entries, budgets


def test_safe_amount():
    assert safe_amount(12) == 12.0
    assert safe_amount("3.5") == 3.5
    assert safe_amount("abc") == 0.0
    assert safe_amount(None) == 0.0
    assert safe_amount(float("inf")) == 0.0
    assert safe_amount(float("nan")) == 0.0
    assert safe_amount(True) == 0.0


def test_sum_by_kind():
    entries, _ = make_sample()
    assert sum_by_kind(entries, "Income") == 1000
    assert sum_by_kind(entries, "Expenses") == 400 + 120.5 + 400 + 70
    assert sum_by_kind(entries, "Investments") == 0
    assert sum_by_kind((), "Income") == 0


def test_sum_by_kind_never_returns_nan():
    entries, _ = make_sample()
    assert not math.isnan(sum_by_kind(entries, "Investments"))


def test_sum_by_kind_order_independent():
    entries, _ = make_sample()
    assert sum_by_kind(entries, "Expenses") == sum_by_kind(tuple(reversed(entries)), "Expenses")


def test_sum_for_month_kind_category():
    entries, _ = make_sample()
    assert sum_for_month_kind_category(entries, "2026-01", "Expenses", "Rent") == 400
    assert sum_for_month_kind_category(entries, "2026-01", "Expenses", "Groceries") == 120.5
    assert sum_for_month_kind_category(entries, "2026-03", "Expenses", "Rent") == 0
    assert sum_for_month_kind_category(entries, "2026-01", "Income", "Rent") == 0


def test_budget_for_defaults_to_zero():
    _, budgets = make_sample()
    assert budget_for(budgets, "2026-01", "Expenses", "Rent") == 500
    assert budget_for(budgets, "2026-01", "Expenses", "Health") == 0
    assert budget_for({}, "2099-01", "Income", "Salary") == 0


def test_month_budget_total_iterates_declared_categories():
    _, budgets = make_sample()
    # "Pets" is not a declared Expenses category
    assert month_budget_total(budgets, "2026-01", "Expenses") == 650
    assert month_budget_total(budgets, "2026-02", "Expenses") == 0


def test_month_tracked_total_excludes_unknown_categories():
    entries, _ = make_sample()
    assert month_tracked_total(entries, "2026-01", "Expenses") == 520.5
    assert month_tracked_total(entries, "2026-02", "Expenses") == 400
    assert month_tracked_total(entries, "2026-01", "Income") == 1000


def test_month_tracked_total_accepts_generator():
    entries, _ = make_sample()
    assert month_tracked_total((e for e in entries), "2026-01", "Expenses") == 520.5


def test_distinct_months_sorted_without_duplicates():
    entries, _ = make_sample()
    months = distinct_months(entries)
    assert months == ["2025-12", "2026-01", "2026-02"]
    assert distinct_months(()) == []


def test_kind_totals_and_net():
    entries, _ = make_sample()
    totals = kind_totals(entries)
    assert totals.income == 1000
    assert totals.savings == 50
    assert totals.net == 1000 - (400 + 120.5 + 400 + 70) - 50 - 0
    assert totals.as_series() == (totals.income, totals.expenses, totals.savings, totals.investments)


def test_kind_totals_from_kinds_defaults_missing_to_zero():
    totals = KindTotals.from_kinds({"Income": 10})
    assert totals == KindTotals(income=10)
    assert totals.for_kind("Expenses") == 0


def test_fractional_totals_do_not_depend_on_entry_order():
    entries = (
        Entry("a", "2026-01-01", "Expenses", "Rent", 0.1),
        Entry("b", "2026-01-02", "Expenses", "Rent", 0.2),
        Entry("c", "2026-01-03", "Expenses", "Rent", 0.3),
    )
    backwards = tuple(reversed(entries))

    assert sum_by_kind(entries, "Expenses") == sum_by_kind(backwards, "Expenses") == 0.6
    assert (
        sum_for_month_kind_category(entries, "2026-01", "Expenses", "Rent")
        == sum_for_month_kind_category(backwards, "2026-01", "Expenses", "Rent")
    )
    assert month_tracked_total(entries, "2026-01", "Expenses") == 0.6


def test_month_budget_total_with_fractional_allocations():
    budgets = {
        BudgetKey("2026-01", "Savings", "Emergency Fund"): 0.1,
        BudgetKey("2026-01", "Savings", "Travel"): 0.2,
        BudgetKey("2026-01", "Savings", "Other Savings"): 0.3,
    }
    assert month_budget_total(budgets, "2026-01", "Savings") == 0.6
