import logging
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

from poche.storage import BlobStore, save_budgets, save_entries

__all__ = [
    'Event', 'EventBus',
    'ENTRY_ADDED', 'ENTRY_DELETED', 'ENTRIES_CLEARED', 'ENTRIES_REPLACED', 'BUDGET_SET',
    'ENTRY_EVENTS', 'make_autosave_handlers', 'subscribe_autosave',
]

logger = logging.getLogger(__name__)


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = list(self._subscribers.get(name, ()))
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in handlers]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, ()):
            self._subscribers[name].remove(handler)


ENTRY_ADDED = "ENTRY_ADDED"
ENTRY_DELETED = "ENTRY_DELETED"
ENTRIES_CLEARED = "ENTRIES_CLEARED"
ENTRIES_REPLACED = "ENTRIES_REPLACED"
BUDGET_SET = "BUDGET_SET"

ENTRY_EVENTS = (ENTRY_ADDED, ENTRY_DELETED, ENTRIES_CLEARED, ENTRIES_REPLACED)


def make_autosave_handlers(
    store: BlobStore, entries_key: str, budgets_key: str
) -> tuple[Handler, Handler]:
    """Handlers writing the snapshot in the payload back to ``store``."""

    def save_entries_handler(event: Event, payload: dict) -> dict:
        snapshot = payload["snapshot"]
        save_entries(store, entries_key, snapshot.entries)
        logger.debug("Saved %d entries after %s", len(snapshot.entries), event.name)
        return {"saved": entries_key, "version": snapshot.version}

    def save_budgets_handler(event: Event, payload: dict) -> dict:
        snapshot = payload["snapshot"]
        save_budgets(store, budgets_key, snapshot.budgets)
        logger.debug("Saved %d budget allocations", len(snapshot.budgets))
        return {"saved": budgets_key, "version": snapshot.version}

    return save_entries_handler, save_budgets_handler


def subscribe_autosave(
    bus: EventBus, store: BlobStore, entries_key: str, budgets_key: str
) -> None:
    save_entries_handler, save_budgets_handler = make_autosave_handlers(
        store, entries_key, budgets_key
    )
    for name in ENTRY_EVENTS:
        bus.subscribe(name, save_entries_handler)
    bus.subscribe(BUDGET_SET, save_budgets_handler)
