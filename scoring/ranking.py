"""Ranking and top-N selection of scored properties or markets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Mapping, Sequence, TypeVar

from pipelines.model import MarketBaseline, PredictionStats, PropertyRecord
from scoring.errors import InvalidInputError
from scoring.normalize import round_half_up

DEFAULT_LIMIT = 100
MAX_LIMIT = 500
HIGH_CONFIDENCE_THRESHOLD = 80
DEFAULT_SORT_KEY = "appreciation"

T = TypeVar("T", PropertyRecord, MarketBaseline)


def _appreciation(item: PropertyRecord | MarketBaseline) -> float:
    if isinstance(item, MarketBaseline):
        return item.trailing_appreciation
    return item.appreciation or 0.0


def _confidence(item: PropertyRecord | MarketBaseline) -> float:
    return getattr(item, "confidence", None) or 0.0


def _relevance(item: PropertyRecord | MarketBaseline) -> float:
    return _appreciation(item) * _confidence(item) / 100


def _future_score(item: PropertyRecord | MarketBaseline) -> float:
    return getattr(item, "future_value_score", None) or 0.0


def _rental_yield(item: PropertyRecord | MarketBaseline) -> float:
    return getattr(item, "rental_yield", None) or 0.0


SORT_KEYS: Mapping[str, Callable[[Any], float]] = {
    "appreciation": _appreciation,
    "confidence": _confidence,
    "relevance": _relevance,
    "future_score": _future_score,
    "rental_yield": _rental_yield,
}


@dataclass(frozen=True)
class Selection(Generic[T]):
    items: list[T]
    stats: PredictionStats


def clamp_limit(raw: Any) -> int:
    """Unusable (missing, non-numeric, infinite) or non-positive limits become the default."""

    try:
        limit = int(raw)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_LIMIT
    if limit <= 0:
        return DEFAULT_LIMIT
    return min(limit, MAX_LIMIT)


def sort_key_or_default(raw: str | None, default: str = DEFAULT_SORT_KEY) -> str:
    key = (raw or "").strip().lower()
    return key if key in SORT_KEYS else default


def compute_stats(candidates: Sequence[PropertyRecord | MarketBaseline]) -> PredictionStats:
    total = len(candidates)
    average = sum(_appreciation(c) for c in candidates) / total if total else 0.0
    return PredictionStats(
        total_count=total,
        average_appreciation=round_half_up(average, 2),
        high_confidence_count=sum(
            1 for c in candidates if _confidence(c) > HIGH_CONFIDENCE_THRESHOLD
        ),
    )


def select(
    candidates: Sequence[T],
    limit: Any = DEFAULT_LIMIT,
    sort_key: str = DEFAULT_SORT_KEY,
) -> Selection[T]:
    """Sort descending by ``sort_key`` and keep the first ``limit`` items.

    Ties keep their input order. Statistics describe every candidate, not
    just the returned slice.
    """

    try:
        key_func = SORT_KEYS[sort_key]
    except KeyError as exc:
        raise InvalidInputError(
            f"Unknown sort key '{sort_key}'; expected one of {sorted(SORT_KEYS)}."
        ) from exc
    ranked = sorted(candidates, key=key_func, reverse=True)
    return Selection(items=ranked[: clamp_limit(limit)], stats=compute_stats(candidates))


__all__ = [
    "DEFAULT_LIMIT",
    "HIGH_CONFIDENCE_THRESHOLD",
    "MAX_LIMIT",
    "SORT_KEYS",
    "Selection",
    "clamp_limit",
    "compute_stats",
    "select",
    "sort_key_or_default",
]
