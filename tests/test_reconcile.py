from poche.aggregates import MonthStats, month_budget_total, month_tracked_total
from poche.domain import KINDS, BudgetKey, Entry
from poche.lazy import MonthlySeries, monthly_series, top_categories
from poche.reconcile import budget_vs_tracked, category_variances, selected_month_stats


def make_scenario():
    entries = (
        Entry("t1", "2026-01-05", "Income", "Salary", 1000),
        Entry("t2", "2026-01-10", "Expenses", "Rent", 400),
    )
    budgets = {BudgetKey("2026-01", "Expenses", "Rent"): 500}
    return entries, budgets


def make_month():
    return (
        Entry("t1", "2026-03-01", "Expenses", "Groceries", 80),
        Entry("t2", "2026-03-02", "Expenses", "Rent", 600),
        Entry("t3", "2026-03-03", "Expenses", "Leisure", 80),
        Entry("t4", "2026-03-04", "Expenses", "Transport", 30),
        Entry("t5", "2026-03-05", "Expenses", "Health", 45),
        Entry("t6", "2026-03-06", "Expenses", "Subscriptions", 12),
        Entry("t7", "2026-03-07", "Expenses", "Phone & Internet", 25),
        Entry("t8", "2026-03-08", "Expenses", "School & Books", 10),
        Entry("t9", "2026-03-09", "Expenses", "Groceries", -80),
        Entry("t10", "2026-03-10", "Expenses", "Groceries", 80),
        Entry("t11", "2026-04-01", "Expenses", "Rent", 999),
        Entry("t12", "2026-03-11", "Income", "Salary", 2000),
    )


def test_scenario_month_reconciliation():
    entries, budgets = make_scenario()
    assert month_tracked_total(entries, "2026-01", "Expenses") == 400
    assert month_budget_total(budgets, "2026-01", "Expenses") == 500

    comparison = budget_vs_tracked(entries, budgets, "2026-01")
    assert comparison.variance().expenses == 100
    assert selected_month_stats(entries, "2026-01").net == 600


def test_variance_sign_matches_budget_minus_tracked():
    entries, budgets = make_scenario()
    budgets = dict(budgets)
    budgets[BudgetKey("2026-01", "Income", "Salary")] = 800
    comparison = budget_vs_tracked(entries, budgets, "2026-01")

    for kind in KINDS:
        expected = (
            month_budget_total(budgets, "2026-01", kind)
            - month_tracked_total(entries, "2026-01", kind)
        )
        assert comparison.variance().for_kind(kind) == expected
    assert comparison.variance().income == -200


def test_budget_vs_tracked_series_are_parallel():
    entries, budgets = make_scenario()
    comparison = budget_vs_tracked(entries, budgets, "2026-01")
    assert comparison.month == "2026-01"
    assert comparison.budget.as_series() == (0, 500, 0, 0)
    assert comparison.tracked.as_series() == (1000, 400, 0, 0)


def test_selected_month_stats_unknown_month_is_all_zero():
    entries, _ = make_scenario()
    stats = selected_month_stats(entries, "2099-01")
    assert stats == MonthStats("2099-01", 0, 0, 0, 0, 0)


def test_monthly_series_rows_in_month_order():
    entries = (
        Entry("a", "2026-02-01", "Savings", "Travel", 100),
        Entry("b", "2026-01-05", "Income", "Salary", 1000),
        Entry("c", "2026-01-10", "Investments", "Crypto", 200),
        Entry("d", "2026-02-03", "Income", "Side hustle", 300),
    )
    rows = list(monthly_series(entries))

    assert [r.month for r in rows] == ["2026-01", "2026-02"]
    assert rows[0] == MonthStats("2026-01", 1000, 0, 0, 200, 800)
    assert rows[1] == MonthStats("2026-02", 300, 0, 100, 0, 200)


def test_monthly_series_is_restartable():
    entries, _ = make_scenario()
    series = MonthlySeries(entries)
    assert list(series) == list(series)
    assert len(list(series)) == 1


def test_monthly_series_empty():
    assert list(monthly_series(())) == []


def test_top_categories_limit_sort_and_ties():
    result = list(top_categories(make_month(), "2026-03", "Expenses", 5))

    assert len(result) == 5
    assert result[0] == ("Rent", 600)
    # Groceries and Leisure both total 80; Groceries is declared first
    assert result[1] == ("Groceries", 80)
    assert result[2] == ("Leisure", 80)
    assert [name for name, _ in result[3:]] == ["Health", "Transport"]


def test_top_categories_excludes_zero_totals():
    entries = (
        Entry("t1", "2026-03-01", "Expenses", "Groceries", 50),
        Entry("t2", "2026-03-02", "Expenses", "Groceries", -50),
        Entry("t3", "2026-03-03", "Expenses", "Rent", 10),
    )
    assert list(top_categories(entries, "2026-03", "Expenses", 5)) == [("Rent", 10)]


def test_top_categories_limit_edges():
    assert list(top_categories(make_month(), "2026-03", "Expenses", 0)) == []
    assert list(top_categories(make_month(), "2026-03", "Expenses", -1)) == []
    assert len(list(top_categories(make_month(), "2026-03", "Expenses", 50))) == 8
    assert list(top_categories(make_month(), "2026-03", "Income", 5)) == [("Salary", 2000)]


def test_category_variances_cover_declared_categories():
    entries, budgets = make_scenario()
    rows = category_variances(entries, budgets, "2026-01", "Expenses")

    assert [r.category for r in rows][:3] == ["Rent", "Transport", "Groceries"]
    assert len(rows) == 8
    rent = rows[0]
    assert (rent.budget, rent.tracked, rent.variance) == (500, 400, 100)
    assert rows[1].variance == 0


def test_top_categories_tie_on_fractional_totals_uses_declared_order():
    entries = (
        Entry("t1", "2026-05-01", "Expenses", "Transport", 0.1),
        Entry("t2", "2026-05-02", "Expenses", "Transport", 0.2),
        Entry("t3", "2026-05-03", "Expenses", "Transport", 0.3),
        Entry("t4", "2026-05-04", "Expenses", "Rent", 0.3),
        Entry("t5", "2026-05-05", "Expenses", "Rent", 0.2),
        Entry("t6", "2026-05-06", "Expenses", "Rent", 0.1),
    )
    result = list(top_categories(entries, "2026-05", "Expenses", 5))
    assert result == [("Rent", 0.6), ("Transport", 0.6)]
