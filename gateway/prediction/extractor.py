"""Pull the most plausible raw number out of an untyped upstream document."""

import math
import re
from typing import Any

# Field names that usually carry the model's answer
PRICE_KEY_RE = re.compile(
    r"pred(?:i(?:ct|cted)?)?_?price|price|predi(?:ct|ction)|value|amount",
    re.IGNORECASE,
)

# Plain decimal after separators are stripped; ASCII digits only
DECIMAL_RE = re.compile(r"^(-?[0-9]+(?:\.[0-9]+)?)$")
_SEPARATORS_RE = re.compile(r"[,\s]")

def is_price_key(key: Any) -> bool:
    """True when a field name looks like it holds a price or prediction."""
    return bool(PRICE_KEY_RE.search(str(key)))

def parse_numeric(value: Any) -> float | None:
    """
    Finite int/float as-is, or a string like "1,250,000" / " 42.5 ".
    Booleans, NaN/inf and anything else give None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        match = DECIMAL_RE.match(_SEPARATORS_RE.sub("", value))
        if match:
            number = float(match.group(1))
            return number if math.isfinite(number) else None
    return None

def _entries(node):
    if isinstance(node, dict):
        return node.items()
    return ((str(i), v) for i, v in enumerate(node))

def extract_number(doc: Any) -> float | None:
    """
    Walk every mapping and sequence in ``doc`` with an explicit stack.

    A number under a price-like key ends the search at once. Otherwise the
    first number seen anywhere is kept and returned at the end. Containers
    are tracked by identity, so shared or cyclic references are visited once.
    """
    visited: set[int] = set()
    stack = [doc]
    fallback = None

    while stack:
        node = stack.pop()
        if not isinstance(node, (dict, list, tuple)):
            continue
        if id(node) in visited:
            continue
        visited.add(id(node))

        for key, value in _entries(node):
            if value is None:
                continue
            if isinstance(value, (dict, list, tuple)):
                stack.append(value)
                continue
            number = parse_numeric(value)
            if number is None:
                continue
            if is_price_key(key):
                return number
            if fallback is None:
                fallback = number

    return fallback
