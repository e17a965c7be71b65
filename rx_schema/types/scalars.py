"""
Scalar kinds: Bool, Date, Def, Fail, Nil, Num, Int, One, Str, Time.

Value domains:
    - numbers are ``numbers.Real`` or ``decimal.Decimal`` instances other
      than ``bool``
    - Date accepts ``datetime.date`` but not ``datetime.datetime``
    - Time accepts ``datetime.datetime``
"""

from __future__ import annotations

import datetime
from collections.abc import Mapping
from numbers import Real
from typing import TYPE_CHECKING, Any, Optional

from ..errors import SchemaError
from ..range import NUMBER_TYPES, Range, is_number
from .base import SUCCESS, CheckResult, CoreValidator, NoParams

if TYPE_CHECKING:
    from ..registry import Registry


class BoolType(NoParams, CoreValidator):
    """Accepts True and False only."""

    subname = "bool"

    def validate(self, value: Any) -> CheckResult:
        if not isinstance(value, bool):
            return self.fail(f"expected bool got {value!r}")
        return SUCCESS


class DateType(NoParams, CoreValidator):
    """Accepts calendar dates (not datetimes)."""

    subname = "date"

    def validate(self, value: Any) -> CheckResult:
        if not isinstance(value, datetime.date) or isinstance(value, datetime.datetime):
            return self.fail(f"expected Date got {value!r}")
        return SUCCESS


class DefType(NoParams, CoreValidator):
    """Accepts anything except None."""

    subname = "def"

    def validate(self, value: Any) -> CheckResult:
        if value is None:
            return self.fail("def failed")
        return SUCCESS


class FailType(NoParams, CoreValidator):
    """Rejects everything."""

    subname = "fail"

    def validate(self, value: Any) -> CheckResult:
        return self.fail("explicit fail")

    def check(self, value: Any) -> bool:
        return False


class NilType(NoParams, CoreValidator):
    """Accepts None only."""

    subname = "nil"

    def validate(self, value: Any) -> CheckResult:
        if value is not None:
            return self.fail(f"expected nil got {value!r}")
        return SUCCESS


class OneType(NoParams, CoreValidator):
    """Accepts a single scalar: number, string or bool."""

    subname = "one"

    def validate(self, value: Any) -> CheckResult:
        if not isinstance(value, (*NUMBER_TYPES, str, bool)):
            return self.fail(f"expected One got {value!r}")
        return SUCCESS


class TimeType(NoParams, CoreValidator):
    """Accepts points in time (``datetime.datetime``)."""

    subname = "time"

    def validate(self, value: Any) -> CheckResult:
        if not isinstance(value, datetime.datetime):
            return self.fail(f"expected Time got {value!r}")
        return SUCCESS


class NumericConstraint:
    """Numeric checks shared by Num and Int.

    Holds the optional 'range' and 'value' parameters and reports every
    failure under the path of the node that owns it.

    Attributes:
        range: Range the value must satisfy, if any
        value: Exact value required, if any
    """

    __slots__ = ("range", "value")

    def __init__(self, param: Mapping, uri: str) -> None:
        self.value: Optional[Real] = None
        if "value" in param:
            if not is_number(param["value"]):
                raise SchemaError(f"invalid value parameter for {uri}", uri=uri)
            self.value = param["value"]

        self.range: Optional[Range] = None
        if param.get("range") is not None:
            self.range = Range(param["range"])

    def validate(self, value: Any, path: str) -> CheckResult:
        if not is_number(value):
            return CheckResult.failure(f"expected Numeric got {value!r}", path)
        if self.range is not None and not self.range.check(value):
            return CheckResult.failure(
                f"expected Numeric in range {self.range} got {value!r}", path
            )
        if self.value is not None and value != self.value:
            return CheckResult.failure(
                f"expected Numeric to equal {self.value} got {value!r}", path
            )
        return SUCCESS


class NumType(CoreValidator):
    """Accepts numbers, optionally within a range or equal to a value."""

    subname = "num"
    ALLOWED_PARAMS = frozenset({"type", "range", "value"})

    def __init__(self, param: Mapping, rx: Registry) -> None:
        super().__init__(param, rx)
        self.constraint = NumericConstraint(param, self.uri)

    def validate(self, value: Any) -> CheckResult:
        return self.constraint.validate(value, self.path)


class IntType(CoreValidator):
    """Accepts integral numbers.

    Applies the same range/value checks as Num, reported under /int,
    then requires a zero fractional part. ``4.0`` is integral.
    """

    subname = "int"
    ALLOWED_PARAMS = frozenset({"type", "range", "value"})

    def __init__(self, param: Mapping, rx: Registry) -> None:
        super().__init__(param, rx)
        self.constraint = NumericConstraint(param, self.uri)
        if self.constraint.value is not None and self.constraint.value % 1 != 0:
            raise SchemaError(f"invalid value parameter for {self.uri}", uri=self.uri)

    def validate(self, value: Any) -> CheckResult:
        result = self.constraint.validate(value, self.path)
        if not result.ok:
            return result
        if value % 1 != 0:
            return self.fail(f"expected Integer got {value!r}")
        return SUCCESS


class StrType(CoreValidator):
    """Accepts strings, optionally of a given length or exact value.

    The 'regex' parameter is accepted for schema compatibility and is
    not enforced.
    """

    subname = "str"
    ALLOWED_PARAMS = frozenset({"type", "value", "length", "regex"})

    def __init__(self, param: Mapping, rx: Registry) -> None:
        super().__init__(param, rx)

        self.length: Optional[Range] = None
        if param.get("length") is not None:
            self.length = Range(param["length"])

        self.value: Optional[str] = None
        if "value" in param:
            if not isinstance(param["value"], str):
                raise SchemaError(f"invalid value parameter for {self.uri}", uri=self.uri)
            self.value = param["value"]

    def validate(self, value: Any) -> CheckResult:
        if not isinstance(value, str):
            return self.fail(f"expected String got {value!r}")
        if self.length is not None and not self.length.check(len(value)):
            return self.fail(
                f"expected string with {self.length} characters, got {len(value)}"
            )
        if self.value is not None and value != self.value:
            return self.fail(f"expected {self.value!r} got {value!r}")
        return SUCCESS
