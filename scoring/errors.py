"""Exceptions raised by the scoring engine."""

from __future__ import annotations


class ScoringError(Exception):
    """Base class for scoring engine failures."""


class InvalidInputError(ScoringError, ValueError):
    """The caller supplied input the engine cannot use (unknown sort key, bad weights)."""


class NoDataAvailableError(ScoringError):
    """No records could be produced, not even by the synthetic fallback."""


__all__ = ["ScoringError", "InvalidInputError", "NoDataAvailableError"]
