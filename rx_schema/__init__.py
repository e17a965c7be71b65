"""
rx-schema - structural schema validation for generic data.

This package checks already-deserialized data (bools, numbers, strings,
lists, mappings, None, dates and datetimes) against declarative Rx
schemas:
- Registry: type names, learned types, prefixes, schema compilation
- Sixteen core kinds (all, any, arr, bool, date, def, fail, int, map,
  nil, num, one, rec, seq, str, time)
- Precise failure paths on validation errors

One-off schemas can skip the registry:
    >>> from rx_schema import schema
    >>> schema({"type": "//arr", "contents": "//int"}).check([1, 2])
    True

Example:
    >>> from rx_schema import Registry
    >>>
    >>> rx = Registry()
    >>> person = rx.make_schema({
    ...     "type": "//rec",
    ...     "required": {"name": "//str", "age": {"type": "//int", "range": {"min": 0}}},
    ...     "optional": {"tags": {"type": "//arr", "contents": "//str"}},
    ... })
    >>> person.check({"name": "Ada", "age": 36})
    True
    >>> person.validate_or_raise({"name": "Ada", "age": -1})
    Traceback (most recent call last):
    ...
    rx_schema.errors.ValidationError: expected Numeric in range {min: 0} got -1 (/rec:'age')

Invariants:
    - Malformed schemas fail at compile time with SchemaError
    - Compiled validators are immutable and safe to share
    - Validation failures render as "<message> (<path>)"

Version: 1.0.0
"""

__version__ = "1.0.0"

from .config import RxSettings, get_settings
from .errors import (
    DuplicateRegistrationError,
    RegistryFrozenError,
    RxError,
    SchemaError,
    UnknownParameterError,
    UnknownPrefixError,
    UnknownTypeError,
    ValidationError,
)
from .logging_setup import setup_logging
from .range import Range
from .registry import (
    Alias,
    Builtin,
    Registry,
    TypeEntry,
    compile_schema,
    get_registry,
    reset_registry,
    schema,
)
from .types import CheckResult, CoreValidator, NoParams, Validator, core_types

__all__ = [
    # Version
    "__version__",
    # Registry
    "Registry",
    "TypeEntry",
    "Builtin",
    "Alias",
    "schema",
    "compile_schema",
    "get_registry",
    "reset_registry",
    # Validators
    "Validator",
    "CoreValidator",
    "NoParams",
    "CheckResult",
    "Range",
    "core_types",
    # Errors
    "RxError",
    "SchemaError",
    "UnknownTypeError",
    "UnknownPrefixError",
    "UnknownParameterError",
    "DuplicateRegistrationError",
    "RegistryFrozenError",
    "ValidationError",
    # Configuration
    "RxSettings",
    "get_settings",
    "setup_logging",
]
