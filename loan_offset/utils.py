"""Utility functions for the loan offset calculator.

Helpers for turning user input (strings from a form, the command line or a
JSON body) into floats, and the small numeric predicates shared by the engine
and its front ends.
"""

from __future__ import annotations

import math
from typing import Any


def parse_amount(value: str) -> float:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("500000"), grouped numbers ("1,00,000") and
    shorthand with ``k``/``m`` suffixes (e.g., "500k" meaning 500_000).

    Raises
    ------
    ValueError
        If the string is not a valid amount.
    """
    text = value.strip().lower().replace(",", "").replace("_", "")
    factor = 1.0
    if text.endswith("k"):
        factor = 1_000.0
        text = text[:-1]
    elif text.endswith("m"):
        factor = 1_000_000.0
        text = text[:-1]
    try:
        return float(text) * factor
    except ValueError as exc:
        raise ValueError(f"Invalid amount: {value}") from exc


def to_number(value: Any) -> float:
    """Convert an input value into a float.

    ``None`` and blank strings mean "not provided" and become ``nan``. Strings
    go through :func:`parse_amount`, so they may carry commas or suffixes.
    Booleans are rejected because they are almost always a caller mistake.
    """
    if value is None:
        return math.nan
    if isinstance(value, bool):
        raise ValueError("Expected a number, got a boolean")
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError as exc:
            raise ValueError(f"Number too large: {value}") from exc
    if isinstance(value, str):
        if not value.strip():
            return math.nan
        return parse_amount(value)
    raise ValueError(f"Expected a number, got {type(value).__name__}")


def _is_real(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_positive_finite(value: Any) -> bool:
    return _is_real(value) and math.isfinite(value) and value > 0


def is_non_negative_finite(value: Any) -> bool:
    return _is_real(value) and math.isfinite(value) and value >= 0


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up.

    ``round()`` uses banker's rounding (``round(2.5) == 2``); month counts
    derived from fractional tenures must round 30.5 to 31.
    """
    return math.floor(value + 0.5)
