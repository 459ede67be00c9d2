from typing import Iterable, Iterator, Tuple

from poche.aggregates import (
    KindTotals,
    MonthStats,
    distinct_months,
    month_tracked_total,
    sum_for_month_kind_category,
)
from poche.domain import CATEGORIES, KINDS, Entry


class MonthlySeries:
    """Month-over-month tracked totals, one MonthStats per month with data.

    Nothing is computed until iteration, and every new iteration starts from
    the entries again, so the same object can be walked any number of times.
    """

    def __init__(self, entries: Iterable[Entry]):
        self._entries = tuple(entries)

    def __iter__(self) -> Iterator[MonthStats]:
        for month in distinct_months(self._entries):
            totals = KindTotals.from_kinds(
                {k: month_tracked_total(self._entries, month, k) for k in KINDS}
            )
            yield MonthStats.from_totals(month, totals)


def monthly_series(entries: Iterable[Entry]) -> MonthlySeries:
    return MonthlySeries(entries)


def top_categories(
    entries: Iterable[Entry], month: str, kind: str, limit: int = 5
) -> Iterator[Tuple[str, float]]:
    entries = tuple(entries)
    declared = CATEGORIES.get(kind, ())

    totals = [
        (category, sum_for_month_kind_category(entries, month, kind, category))
        for category in declared
    ]

    # sorted() is stable, so equal totals keep their declared order
    ordered = sorted(
        ((name, total) for name, total in totals if total != 0),
        key=lambda item: item[1],
        reverse=True,
    )

    for name, total in ordered[: max(0, limit)]:
        yield name, total
