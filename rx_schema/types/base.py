"""
Validator contract for rx-schema.

Every compiled schema node is a Validator. Nodes return a CheckResult
from validate(); check() and validate_or_raise() are projections of that
result, so failures never travel as exceptions inside the tree.

Invariants:
    - A node validates its parameter keys once, at construction
    - A node is immutable after construction
    - validate() never raises ValidationError
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, replace
from difflib import get_close_matches
from typing import TYPE_CHECKING, Any, ClassVar, FrozenSet

from ..errors import UnknownParameterError, ValidationError

if TYPE_CHECKING:
    from ..registry import Registry

CORE_NAMESPACE = "tag:codesimply.com,2008:rx/core/"
META_NAMESPACE = "tag:codesimply.com,2008:rx/meta/"


@dataclass(frozen=True)
class CheckResult:
    """Outcome of validating one value against one node.

    Attributes:
        ok: Whether the value was accepted
        message: Failure message (empty on success)
        path: Failure location (empty on success)
    """

    ok: bool
    message: str = ""
    path: str = ""

    @classmethod
    def failure(cls, message: str, path: str = "") -> CheckResult:
        return cls(ok=False, message=message, path=path)

    def __bool__(self) -> bool:
        return self.ok

    def prefixed(self, segment: str) -> CheckResult:
        """Prepend a path segment to a failure."""
        if self.ok:
            return self
        return replace(self, path=segment + self.path)

    def with_path(self, path: str) -> CheckResult:
        """Replace the path of a failure."""
        if self.ok:
            return self
        return replace(self, path=path)

    def to_error(self) -> ValidationError:
        return ValidationError(self.message, self.path)

    def raise_for_failure(self) -> None:
        """Raise ValidationError if this result is a failure."""
        if not self.ok:
            raise self.to_error()


SUCCESS = CheckResult(ok=True)


class Validator(ABC):
    """A compiled schema node.

    Subclasses set ``uri`` (or ``subname`` for core kinds), declare the
    parameter keys they accept in ``ALLOWED_PARAMS`` and implement
    ``validate``.

    Example:
        >>> node = registry.make_schema({"type": "//str", "length": {"min": 1}})
        >>> node.check("x")
        True
    """

    uri: ClassVar[str] = ""
    ALLOWED_PARAMS: ClassVar[FrozenSet[str]] = frozenset({"type"})

    def __init__(self, param: Mapping, rx: Registry) -> None:
        self.assert_valid_params(param)

    @classmethod
    def assert_valid_params(cls, param: Mapping) -> None:
        """Reject parameter keys outside ALLOWED_PARAMS.

        Raises:
            UnknownParameterError: If a key is not allowed
        """
        allowed = sorted(cls.ALLOWED_PARAMS)
        for key in param:
            if key not in cls.ALLOWED_PARAMS:
                suggestions = get_close_matches(str(key), allowed, n=3)
                raise UnknownParameterError(key, cls.uri, suggestions)

    @abstractmethod
    def validate(self, value: Any) -> CheckResult:
        """Validate value and return the result."""

    def check(self, value: Any) -> bool:
        """Whether value is accepted."""
        return self.validate(value).ok

    def validate_or_raise(self, value: Any) -> bool:
        """Validate value, raising on failure.

        Returns:
            True

        Raises:
            ValidationError: If value is rejected
        """
        self.validate(value).raise_for_failure()
        return True

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.uri}>"


class CoreValidator(Validator):
    """Base for the built-in kinds in the core namespace."""

    subname: ClassVar[str] = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.subname:
            cls.uri = CORE_NAMESPACE + cls.subname

    @property
    def path(self) -> str:
        """Path segment this node reports failures under."""
        return "/" + self.subname

    def fail(self, message: str) -> CheckResult:
        return CheckResult.failure(message, self.path)


class NoParams:
    """Policy for kinds that take no parameters.

    Construction succeeds only for an empty mapping or one holding
    exactly the 'type' key.
    """

    uri: ClassVar[str]

    def __init__(self, param: Mapping, rx: Registry) -> None:
        for key in param:
            if key != "type":
                raise UnknownParameterError(key, self.uri)
