"""
Built-in validator kinds for rx-schema.

The sixteen core kinds live in the namespace
``tag:codesimply.com,2008:rx/core/`` and are registered into every
Registry built with ``load_core=True``:

    all, any, arr, bool, date, def, fail, int,
    map, nil, num, one, rec, seq, str, time

Invariants:
    - Each kind's URI is fixed by its subname
    - Int is registered as its own kind, distinct from Num
"""

from typing import Tuple, Type

from .base import (
    CORE_NAMESPACE,
    META_NAMESPACE,
    SUCCESS,
    CheckResult,
    CoreValidator,
    NoParams,
    Validator,
)
from .containers import AllType, AnyType, ArrType, MapType, RecField, RecType, SeqType
from .scalars import (
    BoolType,
    DateType,
    DefType,
    FailType,
    IntType,
    NilType,
    NumericConstraint,
    NumType,
    OneType,
    StrType,
    TimeType,
)

core_types: Tuple[Type[CoreValidator], ...] = (
    AllType,
    AnyType,
    ArrType,
    BoolType,
    DateType,
    DefType,
    FailType,
    IntType,
    MapType,
    NilType,
    NumType,
    OneType,
    RecType,
    SeqType,
    StrType,
    TimeType,
)

__all__ = [
    # Contract
    "CORE_NAMESPACE",
    "META_NAMESPACE",
    "SUCCESS",
    "CheckResult",
    "CoreValidator",
    "NoParams",
    "Validator",
    # Kinds
    "AllType",
    "AnyType",
    "ArrType",
    "BoolType",
    "DateType",
    "DefType",
    "FailType",
    "IntType",
    "MapType",
    "NilType",
    "NumType",
    "OneType",
    "RecType",
    "SeqType",
    "StrType",
    "TimeType",
    "NumericConstraint",
    "RecField",
    "core_types",
]
