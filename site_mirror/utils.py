# File: site_mirror/utils.py
"""site_mirror.utils: helpers for the run summary (byte units, HTTP reasons)."""

from __future__ import annotations

from http import HTTPStatus
from typing import Sequence, Tuple, Union

__all__: Sequence[str] = ("UNITS", "convert", "status_reason")

UNITS: Tuple[str, ...] = ("bytes", "kB", "MB", "GB")


def convert(number: Union[int, float]) -> Tuple[Union[int, float], str]:
    """Scale a byte count to the largest 1024-based unit that keeps it ≥ 1."""
    nearest = 0
    while number >= 1024 and nearest < len(UNITS) - 1:
        number /= 1024
        nearest += 1
    return number, UNITS[nearest]


def status_reason(code: int) -> str:
    """Reason phrase for an HTTP status; ``0`` stands for a transport failure."""
    if code == 0:
        return "Network Error"
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return "Unknown"
