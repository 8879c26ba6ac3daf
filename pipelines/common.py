"""Shared helpers for talking to live listing feeds and cleaning their payloads."""

from __future__ import annotations

import math
from typing import Any, Mapping

import httpx
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

DEFAULT_TIMEOUT_SECONDS = 15.0
_DEFAULT_WAIT = wait_exponential(min=1, max=16)
_DEFAULT_STOP = stop_after_attempt(3)

_SENTINEL_VALUES = {".", "NA", "N/A", "", "null", "None"}

Headers = Mapping[str, str] | None
Params = Mapping[str, Any] | None


def _is_transient(exc: BaseException) -> bool:
    """Retry transport failures, throttling and server errors; 4xx are final."""

    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return isinstance(exc, httpx.TransportError)


@retry(
    wait=_DEFAULT_WAIT,
    stop=_DEFAULT_STOP,
    retry=retry_if_exception(_is_transient),
    reraise=True,
)
async def fetch_json(
    url: str,
    *,
    headers: Headers = None,
    params: Params = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> Any:
    """GET ``url`` and return the decoded JSON payload.

    Transient failures are retried with exponential backoff; the last error is
    re-raised so each source decides how to degrade.
    """

    async with httpx.AsyncClient(timeout=timeout) as client:
        response = await client.get(url, headers=headers, params=params)

    response.raise_for_status()
    return response.json()


def coerce_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        numeric = float(value)
    elif isinstance(value, str):
        stripped = value.strip().replace(",", "").lstrip("$")
        if stripped in _SENTINEL_VALUES:
            return None
        try:
            numeric = float(stripped)
        except ValueError:
            return None
    else:
        return None

    if math.isnan(numeric) or math.isinf(numeric):
        return None
    return numeric


def coerce_int(value: Any) -> int | None:
    numeric = coerce_float(value)
    return int(numeric) if numeric is not None else None


def first_present(payload: Mapping[str, Any], *paths: str) -> Any:
    """Return the first non-empty value among dotted ``paths`` (``"location.lat"``)."""

    for path in paths:
        current: Any = payload
        for part in path.split("."):
            if not isinstance(current, Mapping):
                current = None
                break
            current = current.get(part)
        if current not in (None, ""):
            return current
    return None


__all__ = ["DEFAULT_TIMEOUT_SECONDS", "coerce_float", "coerce_int", "fetch_json", "first_present"]
