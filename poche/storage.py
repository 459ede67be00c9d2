"""Persistence of the two root collections.

Entries and budgets are stored as two independent JSON blobs behind a tiny
key-value interface. Loading never fails: missing, undecodable or
wrongly-shaped blobs come back as an empty collection.
"""
import json
import logging
import math
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Protocol
from uuid import uuid4

from poche.aggregates import safe_amount
from poche.domain import BudgetKey, Entry

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    def load(self, key: str) -> Optional[bytes]:
        ...

    def save(self, key: str, data: bytes) -> None:
        ...


class MemoryStore:
    def __init__(self, initial: Optional[Mapping[str, bytes]] = None):
        self._blobs: dict[str, bytes] = dict(initial or {})

    def load(self, key: str) -> Optional[bytes]:
        return self._blobs.get(key)

    def save(self, key: str, data: bytes) -> None:
        self._blobs[key] = bytes(data)


class FileStore:
    """One ``<key>.json`` file per key under ``directory``."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            logger.warning("Could not read %s: %s", path, e)
            return None

    def save(self, key: str, data: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(key).write_bytes(data)


def _json_amount(amount: Any) -> Any:
    # NaN and Infinity are not valid JSON; other raw imported values pass through
    if isinstance(amount, float) and not math.isfinite(amount):
        return 0.0
    return amount


def entry_to_record(e: Entry) -> dict[str, Any]:
    record = {
        "id": e.id,
        "date": e.date,
        "type": e.kind,
        "category": e.category,
        "amount": _json_amount(e.amount),
    }
    if e.note is not None:
        record["details"] = e.note
    return record


def entry_from_record(record: Mapping[str, Any]) -> Entry:
    return Entry(
        id=str(record.get("id") or uuid4()),
        date=str(record.get("date") or ""),
        kind=str(record.get("type") or ""),
        category=str(record.get("category") or ""),
        amount=record.get("amount", 0),
        note=record.get("details"),
    )


def _decode(raw: Optional[bytes | str], what: str) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Ignoring unreadable %s: %s", what, e)
        return None


def export_entries(entries: Iterable[Entry]) -> str:
    return json.dumps(
        [entry_to_record(e) for e in entries], indent=2, ensure_ascii=False, allow_nan=False
    )


def import_entries(text: Optional[bytes | str]) -> tuple[Entry, ...]:
    data = _decode(text, "entries")
    if data is None:
        return ()
    if not isinstance(data, list):
        logger.warning("Expected a JSON array of entries, got %s", type(data).__name__)
        return ()
    entries = []
    for item in data:
        if not isinstance(item, dict):
            logger.warning("Skipping non-object entry record: %r", item)
            continue
        entries.append(entry_from_record(item))
    return tuple(entries)


def dump_budgets(budgets: Mapping[BudgetKey, float]) -> str:
    return json.dumps(
        {key.to_storage(): safe_amount(value) for key, value in sorted(budgets.items())},
        indent=2,
        ensure_ascii=False,
        allow_nan=False,
    )


def parse_budgets(text: Optional[bytes | str]) -> Mapping[BudgetKey, float]:
    data = _decode(text, "budgets")
    if not isinstance(data, dict):
        if data is not None:
            logger.warning("Expected a JSON object of budgets, got %s", type(data).__name__)
        return MappingProxyType({})
    budgets = {}
    for raw_key, value in data.items():
        key = BudgetKey.from_storage(raw_key)
        if key is None:
            logger.warning("Skipping malformed budget key %r", raw_key)
            continue
        budgets[key] = safe_amount(value)
    return MappingProxyType(budgets)


def load_entries(store: BlobStore, key: str) -> tuple[Entry, ...]:
    return import_entries(store.load(key))


def save_entries(store: BlobStore, key: str, entries: Iterable[Entry]) -> None:
    store.save(key, export_entries(entries).encode("utf-8"))


def load_budgets(store: BlobStore, key: str) -> Mapping[BudgetKey, float]:
    return parse_budgets(store.load(key))


def save_budgets(store: BlobStore, key: str, budgets: Mapping[BudgetKey, float]) -> None:
    store.save(key, dump_budgets(budgets).encode("utf-8"))
