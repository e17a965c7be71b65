"""
Container and combinator kinds: All, Any, Arr, Map, Rec, Seq.

Each kind compiles its nested schemas through the registry that built
it. Failure paths follow two rules:
    - All, Arr, Map and Seq prepend their segment to the inner path
    - Rec replaces the inner path with its own segment, so detail from
      inside a field's schema is not reported
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from ..errors import SchemaError
from ..range import Range
from .base import SUCCESS, CheckResult, CoreValidator, Validator

if TYPE_CHECKING:
    from ..registry import Registry

SEQUENCE_TYPES = (list, tuple)


def _schema_list(param: Mapping, key: str, uri: str) -> List[Any]:
    schemas = param[key]
    if not isinstance(schemas, SEQUENCE_TYPES):
        raise SchemaError(f"'{key}' must be a list of schemas for {uri}", uri=uri)
    return list(schemas)


def _schema_map(param: Mapping, key: str, uri: str) -> Mapping:
    schemas = param[key]
    if not isinstance(schemas, Mapping):
        raise SchemaError(f"'{key}' must be a mapping of schemas for {uri}", uri=uri)
    return schemas


class AllType(CoreValidator):
    """Accepts a value only if every schema in 'of' accepts it."""

    subname = "all"
    ALLOWED_PARAMS = frozenset({"type", "of"})

    def __init__(self, param: Mapping, rx: Registry) -> None:
        super().__init__(param, rx)

        if "of" not in param:
            raise SchemaError(f"no 'of' parameter provided for {self.uri}", uri=self.uri)

        alts = _schema_list(param, "of", self.uri)
        if not alts:
            raise SchemaError(f"no schemata provided for 'of' in {self.uri}", uri=self.uri)

        self.alts: Tuple[Validator, ...] = tuple(rx.make_schema(alt) for alt in alts)

    def validate(self, value: Any) -> CheckResult:
        for alt in self.alts:
            result = alt.validate(value)
            if not result.ok:
                return result.prefixed(self.path)
        return SUCCESS


class AnyType(CoreValidator):
    """Accepts a value if any schema in 'of' accepts it.

    Without 'of' every value is accepted.
    """

    subname = "any"
    ALLOWED_PARAMS = frozenset({"type", "of"})

    def __init__(self, param: Mapping, rx: Registry) -> None:
        super().__init__(param, rx)

        self.alts: Optional[Tuple[Validator, ...]] = None
        if param.get("of") is not None:
            alts = _schema_list(param, "of", self.uri)
            if not alts:
                raise SchemaError(
                    f"no alternatives provided for 'of' in {self.uri}", uri=self.uri
                )
            self.alts = tuple(rx.make_schema(alt) for alt in alts)

    def validate(self, value: Any) -> CheckResult:
        if self.alts is None:
            return SUCCESS

        for alt in self.alts:
            if alt.validate(value).ok:
                return SUCCESS

        return self.fail("expected one to match")


class ArrType(CoreValidator):
    """Accepts a list whose every element matches 'contents'."""

    subname = "arr"
    ALLOWED_PARAMS = frozenset({"type", "contents", "length"})

    def __init__(self, param: Mapping, rx: Registry) -> None:
        super().__init__(param, rx)

        if param.get("contents") is None:
            raise SchemaError(f"no contents schema given for {self.uri}", uri=self.uri)

        self.contents = rx.make_schema(param["contents"])

        self.length: Optional[Range] = None
        if param.get("length") is not None:
            self.length = Range(param["length"])

    def validate(self, value: Any) -> CheckResult:
        if not isinstance(value, SEQUENCE_TYPES):
            return self.fail(f"expected array got {type(value).__name__}")

        if self.length is not None and not self.length.check(len(value)):
            return self.fail(
                f"expected array with {self.length} elements, got {len(value)}"
            )

        for item in value:
            result = self.contents.validate(item)
            if not result.ok:
                return result.prefixed(self.path)

        return SUCCESS


class MapType(CoreValidator):
    """Accepts a mapping whose every value matches 'values'."""

    subname = "map"
    ALLOWED_PARAMS = frozenset({"type", "values"})

    def __init__(self, param: Mapping, rx: Registry) -> None:
        super().__init__(param, rx)

        if param.get("values") is None:
            raise SchemaError(f"no values schema given for {self.uri}", uri=self.uri)

        self.values = rx.make_schema(param["values"])

    def validate(self, value: Any) -> CheckResult:
        if not isinstance(value, Mapping):
            return self.fail(f"expected map got {value!r}")

        for item in value.values():
            result = self.values.validate(item)
            if not result.ok:
                return result.prefixed(self.path)

        return SUCCESS


@dataclass(frozen=True)
class RecField:
    """A declared record field.

    Attributes:
        name: Field name
        required: Whether the field must be present
        schema: Compiled schema for the field's value
    """

    name: str
    required: bool
    schema: Validator


class RecType(CoreValidator):
    """Accepts a mapping with declared required/optional fields.

    Fields not declared are checked together, as one mapping, against
    'rest'; without 'rest' they are rejected.
    """

    subname = "rec"
    ALLOWED_PARAMS = frozenset({"type", "rest", "required", "optional"})

    def __init__(self, param: Mapping, rx: Registry) -> None:
        super().__init__(param, rx)

        self.rest: Optional[Validator] = None
        if param.get("rest") is not None:
            self.rest = rx.make_schema(param["rest"])

        self.fields: Dict[str, RecField] = {}
        for kind in ("optional", "required"):
            if param.get(kind) is None:
                continue
            for name, schema in _schema_map(param, kind, self.uri).items():
                if name in self.fields:
                    raise SchemaError(
                        f"{name} in both required and optional", uri=self.uri
                    )
                self.fields[name] = RecField(
                    name=name,
                    required=(kind == "required"),
                    schema=rx.make_schema(schema),
                )

    def validate(self, value: Any) -> CheckResult:
        if not isinstance(value, Mapping):
            return self.fail(f"expected Hash got {type(value).__name__}")

        rest = []
        for name, field_value in value.items():
            field = self.fields.get(name)
            if field is None:
                rest.append(name)
                continue

            result = field.schema.validate(field_value)
            if not result.ok:
                return result.with_path(f"{self.path}:'{name}'")

        for field in self.fields.values():
            if field.required and field.name not in value:
                return self.fail(
                    f"expected Hash to have key: '{field.name}', "
                    f"only had {list(value.keys())!r}"
                )

        if rest:
            if self.rest is None:
                return self.fail(f"Hash had extra keys: {rest!r}")

            result = self.rest.validate({name: value[name] for name in rest})
            if not result.ok:
                return result.with_path(self.path)

        return SUCCESS


class SeqType(CoreValidator):
    """Accepts a list matching 'contents' position by position.

    Elements past the end of 'contents' are passed, as one list, to
    'tail'; without 'tail' they are rejected.
    """

    subname = "seq"
    ALLOWED_PARAMS = frozenset({"type", "tail", "contents"})

    def __init__(self, param: Mapping, rx: Registry) -> None:
        super().__init__(param, rx)

        if not isinstance(param.get("contents"), SEQUENCE_TYPES):
            raise SchemaError(f"missing or invalid contents for {self.uri}", uri=self.uri)

        self.contents: Tuple[Validator, ...] = tuple(
            rx.make_schema(schema) for schema in param["contents"]
        )

        self.tail: Optional[Validator] = None
        if param.get("tail") is not None:
            self.tail = rx.make_schema(param["tail"])

    def validate(self, value: Any) -> CheckResult:
        if not isinstance(value, SEQUENCE_TYPES):
            return self.fail(f"expected Array got {value!r}")

        count = len(self.contents)
        if len(value) < count:
            return self.fail(
                f"expected Array to have at least {count} elements, had {len(value)}"
            )

        for schema, item in zip(self.contents, value):
            result = schema.validate(item)
            if not result.ok:
                return result.prefixed(self.path)

        if len(value) > count:
            if self.tail is None:
                return self.fail("expected tail_schema")

            result = self.tail.validate(value[count:])
            if not result.ok:
                return result.prefixed(self.path)

        return SUCCESS
