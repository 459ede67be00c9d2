import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar
from uuid import uuid4

from poche.domain import KINDS, Entry

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    def is_some(self) -> bool:
        return isinstance(self, Some)

    def is_none(self) -> bool:
        return not self.is_some()


@dataclass(frozen=True)
class Some(Maybe[T]):
    value: T

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self.value))

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return f(self.value)

    def get_or_else(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass

    def is_right(self) -> bool:
        return isinstance(self, Right)

    def is_left(self) -> bool:
        return not self.is_right()


@dataclass(frozen=True)
class Right(Either[E, T]):
    value: T

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self.value))

    def get_or_else(self, default: T) -> T:
        return self.value

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")


@dataclass(frozen=True)
class Left(Either[E, T]):
    error: E

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def get_error(self) -> E:
        return self.error


def parse_amount(raw: Any) -> Maybe[float]:
    """Parse user input into a finite float.

    Blank strings, ``None``, booleans and anything ``float()`` rejects are
    Nothing, as are infinities and NaN.
    """
    if raw is None or isinstance(raw, bool):
        return Nothing()
    if isinstance(raw, str) and not raw.strip():
        return Nothing()
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return Nothing()
    if not math.isfinite(value):
        return Nothing()
    return Some(value)


def _missing(field_name: str) -> dict:
    return {
        "error": f"missing_{field_name}",
        "message": f"Entry {field_name} is required",
    }


def validate_entry(
    date: Optional[str],
    kind: Optional[str],
    category: Optional[str],
    amount: Any,
    note: Optional[str] = None,
    entry_id: Optional[str] = None,
) -> Either[dict, Entry]:
    date = (date or "").strip()
    kind = (kind or "").strip()
    category = (category or "").strip()

    if not date:
        return Left(_missing("date"))
    if not kind:
        return Left(_missing("kind"))
    if kind not in KINDS:
        return Left({
            "error": "unknown_kind",
            "message": f"Kind {kind} is not one of {', '.join(KINDS)}",
            "kind": kind,
        })
    if not category:
        return Left(_missing("category"))

    parsed = parse_amount(amount)
    if parsed.is_none():
        return Left({
            "error": "invalid_amount",
            "message": f"Amount {amount!r} is not a finite number",
            "amount": amount,
        })

    note = (note or "").strip() or None
    return Right(Entry(
        id=entry_id or str(uuid4()),
        date=date,
        kind=kind,
        category=category,
        amount=parsed.get_or_else(0.0),
        note=note,
    ))
