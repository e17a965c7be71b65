"""
Numeric bound checking for rx-schema.

A Range is built from a mapping with up to four keys:
- min: value must be >= min
- min-ex: value must be > min-ex
- max: value must be <= max
- max-ex: value must be < max-ex

It is shared by length constraints (Arr, Str) and numeric range
constraints (Num, Int).

Invariants:
    - Unknown keys are a schema definition error
    - Absent bounds impose no constraint
    - A Range never changes after construction
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from numbers import Real
from typing import Any, Dict, Optional

from .errors import SchemaError

RANGE_KEYS = ("min", "min-ex", "max-ex", "max")

NUMBER_TYPES = (Real, Decimal)


def is_number(value: Any) -> bool:
    """Whether value is a number: a Real or a Decimal, but not a bool.

    Decimal NaN is excluded because it cannot be ordered.
    """
    if isinstance(value, bool) or not isinstance(value, NUMBER_TYPES):
        return False
    return not (isinstance(value, Decimal) and value.is_nan())


class Range:
    """Inclusive/exclusive bound checker.

    Example:
        >>> r = Range({"min": 2, "max-ex": 5})
        >>> r.check(2), r.check(5)
        (True, False)
    """

    __slots__ = ("_bounds",)

    def __init__(self, bounds: Mapping) -> None:
        if not isinstance(bounds, Mapping):
            raise SchemaError(f"range must be a mapping, got {type(bounds).__name__}")

        parsed: Dict[str, Real] = {}
        for key, value in bounds.items():
            if key not in RANGE_KEYS:
                raise SchemaError(f"illegal argument {key!r} for range")
            if value is None:
                continue
            if not is_number(value):
                raise SchemaError(f"range bound {key!r} must be numeric, got {value!r}")
            parsed[key] = value

        self._bounds = parsed

    def get(self, key: str) -> Optional[Real]:
        """Return a configured bound, or None."""
        return self._bounds.get(key)

    def check(self, value: Any) -> bool:
        """Whether value lies within every configured bound."""
        bounds = self._bounds
        if "min" in bounds and value < bounds["min"]:
            return False
        if "min-ex" in bounds and value <= bounds["min-ex"]:
            return False
        if "max-ex" in bounds and value >= bounds["max-ex"]:
            return False
        if "max" in bounds and value > bounds["max"]:
            return False
        return True

    def to_dict(self) -> Dict[str, Real]:
        """Convert to the schema mapping form."""
        return {key: self._bounds[key] for key in RANGE_KEYS if key in self._bounds}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Range):
            return NotImplemented
        return self._bounds == other._bounds

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._bounds.items())))

    def __str__(self) -> str:
        parts = [f"{key}: {value}" for key, value in self.to_dict().items()]
        return "{" + ", ".join(parts) + "}"

    def __repr__(self) -> str:
        return f"Range({self.to_dict()!r})"
