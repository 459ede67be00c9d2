import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from poche.aggregates import safe_amount


@dataclass(frozen=True)
class BarChart:
    labels: tuple[str, ...]
    max_value: float
    ticks: tuple[int, ...]
    heights: tuple[tuple[float, ...], ...]   # one row per series, fractions of max_value


def scale_max(*series: Iterable[float]) -> float:
    """Largest absolute value across every series, never below 1."""
    return max([1.0] + [abs(safe_amount(v)) for s in series for v in s])


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def ticks(max_value: float, step_count: int = 4) -> list[int]:
    # the top tick can differ from max_value when it is not a whole number
    max_value = safe_amount(max_value)
    if step_count < 1:
        return [_round_half_up(max_value)]
    return [
        _round_half_up(max_value * ((step_count - i) / step_count))
        for i in range(step_count + 1)
    ]


def bar_height_fraction(value: float, max_value: float) -> float:
    max_value = safe_amount(max_value)
    if max_value <= 0:
        return 0.0
    return safe_amount(value) / max_value


def bar_chart(
    labels: Sequence[str], series: Sequence[Sequence[float]], step_count: int = 4
) -> BarChart:
    top = scale_max(*series)
    return BarChart(
        labels=tuple(labels),
        max_value=top,
        ticks=tuple(ticks(top, step_count)),
        heights=tuple(
            tuple(bar_height_fraction(s[i] if i < len(s) else 0.0, top) for i in range(len(labels)))
            for s in series
        ),
    )
