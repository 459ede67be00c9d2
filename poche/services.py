import logging
import threading
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from poche.domain import BudgetKey, Entry, Snapshot
from poche.events import (
    BUDGET_SET,
    ENTRIES_CLEARED,
    ENTRIES_REPLACED,
    ENTRY_ADDED,
    ENTRY_DELETED,
    EventBus,
)
from poche.storage import BlobStore, export_entries, import_entries, load_budgets, load_entries
from poche.transforms import add_entry, clear_entries, delete_entry, replace_entries, set_budget

logger = logging.getLogger(__name__)


class LedgerService:
    """Owner of the entry collection and the budget map.

    Writers are serialized and every accepted write produces a new immutable
    Snapshot with a higher version, published on the bus as ``snapshot``.
    Readers take ``snapshot()`` and hand its fields to the pure aggregation
    functions, so they see either the old or the new state, never a torn one.
    """

    def __init__(
        self,
        entries: Iterable[Entry] = (),
        budgets: Optional[Mapping[BudgetKey, float]] = None,
        bus: Optional[EventBus] = None,
    ):
        self.bus = bus or EventBus()
        self._lock = threading.RLock()
        self._snapshot = Snapshot(
            version=0,
            entries=tuple(entries),
            budgets=MappingProxyType(dict(budgets or {})),
        )

    @classmethod
    def from_store(
        cls,
        store: BlobStore,
        entries_key: str,
        budgets_key: str,
        bus: Optional[EventBus] = None,
    ) -> "LedgerService":
        entries = load_entries(store, entries_key)
        budgets = load_budgets(store, budgets_key)
        logger.info("Loaded %d entries and %d budget allocations", len(entries), len(budgets))
        return cls(entries, budgets, bus)

    def snapshot(self) -> Snapshot:
        with self._lock:
            return self._snapshot

    def _commit(
        self,
        event: str,
        entries: Optional[tuple[Entry, ...]] = None,
        budgets: Optional[Mapping[BudgetKey, float]] = None,
        **payload: Any,
    ) -> Snapshot:
        current = self._snapshot
        self._snapshot = Snapshot(
            version=current.version + 1,
            entries=current.entries if entries is None else entries,
            budgets=current.budgets if budgets is None else budgets,
        )
        # published under the lock so autosave sees snapshots in version order
        self.bus.publish(event, {"snapshot": self._snapshot, **payload})
        return self._snapshot

    def add(
        self,
        date: Optional[str],
        kind: Optional[str],
        category: Optional[str],
        amount: Any,
        note: Optional[str] = None,
    ) -> Optional[Entry]:
        with self._lock:
            before = self._snapshot.entries
            after = add_entry(before, date, kind, category, amount, note)
            if after is before:
                return None
            entry = after[0]
            self._commit(ENTRY_ADDED, entries=after, entry=entry)
            return entry

    def delete(self, entry_id: str) -> bool:
        with self._lock:
            before = self._snapshot.entries
            after = delete_entry(before, entry_id)
            if len(after) == len(before):
                logger.debug("No entry with id %s to delete", entry_id)
                return False
            self._commit(ENTRY_DELETED, entries=after, entry_id=entry_id)
            return True

    def clear(self) -> None:
        with self._lock:
            self._commit(ENTRIES_CLEARED, entries=clear_entries(self._snapshot.entries))

    def replace(self, entries: Iterable[Entry]) -> Snapshot:
        with self._lock:
            after = replace_entries(self._snapshot.entries, entries)
            logger.info("Replacing ledger with %d imported entries", len(after))
            return self._commit(ENTRIES_REPLACED, entries=after)

    def import_json(self, text: Optional[bytes | str]) -> Snapshot:
        return self.replace(import_entries(text))

    def export_json(self) -> str:
        return export_entries(self.snapshot().entries)

    def set_budget(self, month: str, kind: str, category: str, value: Any) -> Snapshot:
        with self._lock:
            after = set_budget(self._snapshot.budgets, month, kind, category, value)
            return self._commit(
                BUDGET_SET,
                budgets=after,
                key=BudgetKey(month, kind, category),
            )
