import logging
import math
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple

from poche.domain import BudgetKey, Entry
from poche.functional import validate_entry

logger = logging.getLogger(__name__)

Budgets = Mapping[BudgetKey, float]


def add_entry(
    entries: Tuple[Entry, ...],
    date: Optional[str],
    kind: Optional[str],
    category: Optional[str],
    amount: Any,
    note: Optional[str] = None,
) -> Tuple[Entry, ...]:
    """Validate a submission and prepend it; a refused submission is a no-op."""
    result = validate_entry(date, kind, category, amount, note)
    if result.is_left():
        error = result.get_error()
        logger.info("Entry refused (%s): %s", error["error"], error["message"])
        return entries
    return (result.get_or_else(None),) + entries


def delete_entry(entries: Tuple[Entry, ...], entry_id: str) -> Tuple[Entry, ...]:
    return tuple(e for e in entries if e.id != entry_id)


def clear_entries(entries: Tuple[Entry, ...]) -> Tuple[Entry, ...]:
    return ()


def replace_entries(
    entries: Tuple[Entry, ...], incoming: Iterable[Entry]
) -> Tuple[Entry, ...]:
    # import is a total replacement, never a merge
    return tuple(incoming)


def set_budget(
    budgets: Budgets, month: str, kind: str, category: str, value: Any
) -> Budgets:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        amount = 0.0
    if not math.isfinite(amount):
        amount = 0.0
    updated = dict(budgets)
    updated[BudgetKey(month, kind, category)] = amount
    return MappingProxyType(updated)
