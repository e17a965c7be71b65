"""
Type registry and schema compiler for rx-schema.

The Registry is the central authority for type names. It provides:
- Registration of built-in kinds (constructors with a fixed URI)
- Learning of aliases (a URI standing for another schema)
- Prefixes for the shorthand ``/prefix/name`` type syntax
- make_schema(), which compiles a schema into a validator tree
- A freeze mechanism to end the setup phase

Invariants:
    - A URI is registered at most once
    - A prefix is added at most once
    - Learned schemas are compiled when learned, so an alias can only
      refer to types that already exist (no alias cycles)
    - Once frozen, the registry cannot be modified

How to change safely:
    - Register, learn and add prefixes before calling freeze()
    - Share a frozen registry and the trees it compiles freely across
      threads; mutation is serialized by an internal lock

Example:
    >>> registry = Registry()
    >>> registry.learn_type("tag:example.com,2024:rx/port", {
    ...     "type": "//int", "range": {"min": 1, "max": 65535},
    ... })
    >>> registry.make_schema("tag:example.com,2024:rx/port").check(8080)
    True
"""

from __future__ import annotations

import copy
import logging
import re
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Callable, Dict, List, Optional, Union

from .config import get_settings
from .errors import (
    DuplicateRegistrationError,
    RegistryFrozenError,
    SchemaError,
    UnknownPrefixError,
    UnknownTypeError,
)
from .types import CORE_NAMESPACE, META_NAMESPACE, Validator, core_types

logger = logging.getLogger(__name__)

URI_RE = re.compile(r"\w+:")
SHORTHAND_RE = re.compile(r"/(.*?)/(.+)")

DEFAULT_PREFIXES = {
    "": CORE_NAMESPACE,
    ".meta": META_NAMESPACE,
}

# Global registry instance
_global_registry: Optional[Registry] = None
_registry_lock = threading.Lock()

Constructor = Callable[[Mapping, "Registry"], Validator]


@dataclass(frozen=True)
class Builtin:
    """Type table entry for a validator constructor."""

    constructor: Constructor


@dataclass(frozen=True)
class Alias:
    """Type table entry for a learned schema."""

    schema: Any


TypeEntry = Union[Builtin, Alias]


class Registry:
    """Maps type URIs to validator constructors or learned schemas.

    Thread-safety:
        - register_type, learn_type, add_prefix and freeze take an
          internal lock
        - make_schema and compiled validators only read

    Attributes:
        frozen: Whether the registry is frozen

    Example:
        >>> rx = Registry()
        >>> node = rx.make_schema({"type": "//arr", "contents": "//int"})
        >>> node.check([1, 2, 3])
        True
    """

    def __init__(self, load_core: bool = True) -> None:
        """Initialize a registry with the default prefixes.

        Args:
            load_core: Register the sixteen core kinds
        """
        self._types: Dict[str, TypeEntry] = {}
        self._prefixes: Dict[str, str] = dict(DEFAULT_PREFIXES)
        self._frozen = False
        self._lock = threading.Lock()

        if load_core:
            for constructor in core_types:
                self.register_type(constructor)

    @property
    def frozen(self) -> bool:
        """Whether the registry is frozen."""
        return self._frozen

    def _check_mutable(self, action: str) -> None:
        if self._frozen:
            raise RegistryFrozenError(f"Cannot {action}: registry is frozen")

    def _check_learnable(self, uri: str) -> None:
        self._check_mutable(f"learn type {uri}")
        if uri in self._types:
            raise DuplicateRegistrationError(
                f"attempted to learn type for already-registered uri {uri}", uri=uri
            )

    def register_type(self, constructor: Constructor) -> None:
        """Register a validator constructor under its own URI.

        Args:
            constructor: Validator class (or factory) with a ``uri`` attribute

        Raises:
            RegistryFrozenError: If registry is frozen
            DuplicateRegistrationError: If the URI is already registered
            SchemaError: If the constructor has no URI
        """
        uri = getattr(constructor, "uri", None)
        if not isinstance(uri, str) or not uri:
            raise SchemaError(f"cannot register {constructor!r}: it has no type URI")

        with self._lock:
            self._check_mutable(f"register type {uri}")

            if uri in self._types:
                raise DuplicateRegistrationError(
                    f"attempted to register already-known type {uri}", uri=uri
                )

            self._types[uri] = Builtin(constructor)
            logger.debug(f"Registered type: {uri}")

    def learn_type(self, uri: str, schema: Any) -> None:
        """Register a schema under a new URI.

        The schema is compiled first, so a malformed schema is rejected
        here rather than when the URI is first used.

        Args:
            uri: URI (or /prefix/name shorthand) for the new type
            schema: Schema the URI stands for

        Raises:
            RegistryFrozenError: If registry is frozen
            DuplicateRegistrationError: If the URI is already registered
            SchemaError: If the schema does not compile
        """
        uri = self.expand_uri(uri)
        self._check_learnable(uri)

        # Compiled outside the lock: constructors may call back into the registry
        self.make_schema(schema)

        with self._lock:
            self._check_learnable(uri)
            self._types[uri] = Alias(copy.deepcopy(schema))
            logger.debug(f"Learned type: {uri}")

    def add_prefix(self, name: str, base: str) -> None:
        """Add a prefix for ``/name/...`` shorthand type names.

        Raises:
            RegistryFrozenError: If registry is frozen
            DuplicateRegistrationError: If the prefix is already registered
        """
        with self._lock:
            self._check_mutable(f"add prefix '{name}'")

            if name in self._prefixes:
                raise DuplicateRegistrationError(
                    f"the prefix '{name}' is already registered"
                )

            self._prefixes[name] = base
            logger.debug(f"Added prefix: '{name}' -> {base}")

    def expand_uri(self, name: str) -> str:
        """Expand a type name to a full URI.

        Names that already look like URIs (``scheme:...``) are returned
        unchanged.

        Raises:
            SchemaError: If the name is neither a URI nor /prefix/name
            UnknownPrefixError: If the prefix is not registered
        """
        if URI_RE.match(name):
            return name

        match = SHORTHAND_RE.fullmatch(name)
        if not match:
            raise SchemaError(f"couldn't understand Rx type name: {name}")

        prefix, rest = match.groups()
        if prefix not in self._prefixes:
            raise UnknownPrefixError(prefix, name)

        return self._prefixes[prefix] + rest

    def make_schema(self, schema: Any) -> Validator:
        """Compile a schema into a validator.

        Args:
            schema: Type name, or mapping with a 'type' key and the
                kind's parameters

        Returns:
            Root validator of the compiled tree

        Raises:
            SchemaError: If the schema is malformed
            UnknownTypeError: If the schema names an unknown type
        """
        if isinstance(schema, str):
            schema = {"type": schema}

        if not isinstance(schema, Mapping) or not isinstance(schema.get("type"), str):
            raise SchemaError("invalid type")

        uri = self.expand_uri(schema["type"])

        entry = self._types.get(uri)
        if entry is None:
            raise UnknownTypeError(uri, get_close_matches(uri, list(self._types), n=3))

        if isinstance(entry, Alias):
            if set(schema.keys()) != {"type"}:
                raise SchemaError("composed type does not take check arguments", uri=uri)
            return self.make_schema(entry.schema)

        return entry.constructor(schema, self)

    def known_types(self) -> List[str]:
        """Registered URIs, sorted."""
        return sorted(self._types)

    def is_alias(self, uri: str) -> bool:
        """Whether uri names a learned type."""
        return isinstance(self._types.get(self.expand_uri(uri)), Alias)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        try:
            return self.expand_uri(name) in self._types
        except SchemaError:
            return False

    def freeze(self) -> None:
        """Freeze the registry.

        After freezing, no types can be registered or learned and no
        prefixes added.

        Raises:
            RegistryFrozenError: If already frozen
        """
        with self._lock:
            if self._frozen:
                raise RegistryFrozenError("Registry is already frozen")

            self._frozen = True
            aliases = sum(1 for entry in self._types.values() if isinstance(entry, Alias))
            logger.info(
                f"Type registry frozen with {len(self._types) - aliases} types, "
                f"{aliases} learned types, {len(self._prefixes)} prefixes"
            )


def compile_schema(schema: Any) -> Validator:
    """Compile a schema with a fresh registry holding the core types.

    Example:
        >>> compile_schema({"type": "//str", "length": {"min": 2}}).check("ab")
        True
    """
    return Registry(load_core=True).make_schema(schema)


schema = compile_schema


def get_registry() -> Registry:
    """Get the global registry.

    Created on first use from RxSettings; frozen on creation when
    ``freeze_global_registry`` is set.
    """
    global _global_registry
    with _registry_lock:
        if _global_registry is None:
            settings = get_settings()
            registry = Registry(load_core=settings.load_core)
            if settings.freeze_global_registry:
                registry.freeze()
            _global_registry = registry
        return _global_registry


def reset_registry() -> None:
    """Reset the global registry (for testing only)."""
    global _global_registry
    with _registry_lock:
        _global_registry = None
