from __future__ import annotations

import math
from typing import Any, Dict, TypeVar

N = TypeVar("N", int, float)

_MISSING = object()


def clamp(v: N, lo: N, hi: N) -> N:
    """Bound v to [lo, hi]. NaN comes back as NaN so callers can still spot it."""
    if v < lo:
        return lo
    if v > hi:
        return hi
    return v


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def is_finite_number(value: Any) -> bool:
    """True for int/float values that are neither NaN nor infinite (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def as_float(value: Any, default: float) -> float:
    """Parse a value into a float, returning default if parsing fails."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def as_int(value: Any, default: int) -> int:
    """Parse a value into an int, returning default if parsing fails."""
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def deep_get(d: Dict[str, Any], path: str, default: Any) -> Any:
    """Value at a dotted key path such as "endless.max_iterations", else default.

    A non-dict anywhere along the path counts as missing.
    """
    node: Any = d
    for key in path.split("."):
        if not isinstance(node, dict):
            return default
        node = node.get(key, _MISSING)
        if node is _MISSING:
            return default
    return node
