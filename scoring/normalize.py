"""Metric normalization onto the common 0-100 scoring scale.

Every sub-metric is mapped through a transform, clamped to ``[0, 100]`` and
only then multiplied by its weight. Weighted contributions are summed, so a
weight vector summing to 1.0 keeps the combined score inside ``[0, 100]``.
Absent or unreadable metrics contribute 0 instead of failing the computation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping

from scoring.errors import InvalidInputError

SCORE_MIN = 0.0
SCORE_MAX = 100.0

Transform = Callable[[float], float]


def clamp(value: float, lower: float = SCORE_MIN, upper: float = SCORE_MAX) -> float:
    return max(lower, min(upper, value))


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a spreadsheet does (0.5 goes up), not banker's rounding."""

    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def round_score(value: float) -> int:
    return int(round_half_up(clamp(value)))


def identity(value: float) -> float:
    return value


def linear(factor: float) -> Transform:
    """Scale a raw metric by ``factor`` (e.g. 4.0 maps 25% appreciation to 100)."""

    def _scale(value: float) -> float:
        return value * factor

    return _scale


def offset_linear(offset: float, factor: float) -> Transform:
    def _scale(value: float) -> float:
        return (value - offset) * factor

    return _scale


def inverse(value: float) -> float:
    return SCORE_MAX - value


# 85-100% employment spread across the full scale.
employment_rate_excess = offset_linear(85.0, 6.67)

TRANSFORMS: Mapping[str, Transform] = {
    "identity": identity,
    "inverse": inverse,
    "employment_rate_excess": employment_rate_excess,
}


def _resolve_transform(transform: Transform | str) -> Transform:
    if callable(transform):
        return transform
    try:
        return TRANSFORMS[transform]
    except KeyError as exc:
        raise InvalidInputError(f"Unknown transform '{transform}'.") from exc


def normalize(
    value: float | None,
    weight: float = 1.0,
    transform: Transform | str = identity,
) -> float:
    """Return the weighted contribution of a raw metric.

    The transformed value is clamped to ``[0, 100]`` before weighting. A missing,
    non-numeric or non-finite value contributes 0.
    """

    if value is None:
        return 0.0
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(numeric) or math.isinf(numeric):
        return 0.0
    scaled = _resolve_transform(transform)(numeric)
    return clamp(scaled) * weight


@dataclass(frozen=True)
class WeightedFactor:
    """A single raw metric together with how it enters a composite."""

    name: str
    value: float | None
    weight: float
    transform: Transform | str = identity

    @property
    def contribution(self) -> float:
        return normalize(self.value, self.weight, self.transform)


def weighted_sum(factors: Iterable[WeightedFactor], *, require_unit_weights: bool = True) -> float:
    """Sum the weighted contributions of ``factors``."""

    factors = tuple(factors)
    if require_unit_weights:
        total_weight = sum(factor.weight for factor in factors)
        if not math.isclose(total_weight, 1.0, abs_tol=1e-9):
            raise InvalidInputError(
                f"Factor weights must sum to 1.0 (got {total_weight:.4f})."
            )
    return sum(factor.contribution for factor in factors)


def mean_of_clamped(values: Iterable[float | None]) -> float:
    """Unweighted mean where each term is clamped first and ``None`` counts as 0."""

    terms = [normalize(value) for value in values]
    if not terms:
        return 0.0
    return sum(terms) / len(terms)


__all__ = [
    "SCORE_MAX",
    "SCORE_MIN",
    "TRANSFORMS",
    "Transform",
    "WeightedFactor",
    "clamp",
    "employment_rate_excess",
    "identity",
    "inverse",
    "linear",
    "mean_of_clamped",
    "normalize",
    "offset_linear",
    "round_half_up",
    "round_score",
    "weighted_sum",
]
