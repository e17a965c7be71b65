"""
Error types for rx-schema.

This module defines all exception types raised by the engine:
- RxError: Base exception
- SchemaError: Malformed schema or registry misuse (definition errors)
- ValidationError: A value does not satisfy a compiled schema

Invariants:
    - All errors inherit from RxError
    - Definition errors are raised only while compiling schemas or
      mutating a registry, never while checking values
    - ValidationError renders as "<message> (<path>)"
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class RxError(Exception):
    """Base exception for all rx-schema errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "RX_ERROR"
        self.details = details or {}


class SchemaError(RxError):
    """Schema definition error.

    Raised when:
    - A schema is not a type name or a mapping with a string 'type'
    - A kind receives an unknown or invalid parameter
    - A required parameter is missing
    - The registry is mutated inconsistently
    """

    def __init__(
        self,
        message: str,
        uri: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        merged = {"uri": uri}
        merged.update(details or {})
        super().__init__(message, code=code or "SCHEMA_ERROR", details=merged)
        self.uri = uri


class UnknownTypeError(SchemaError):
    """Schema references a type URI the registry does not know.

    Attributes:
        uri: The unknown URI
        suggestions: Registered URIs that look similar
    """

    def __init__(self, uri: str, suggestions: Optional[List[str]] = None) -> None:
        suggestions = suggestions or []
        msg = f"unknown type {uri}"
        if suggestions:
            msg += f". Did you mean: {', '.join(suggestions)}?"

        super().__init__(
            msg,
            uri=uri,
            code="UNKNOWN_TYPE",
            details={"suggestions": suggestions},
        )
        self.suggestions = suggestions


class UnknownPrefixError(SchemaError):
    """Shorthand type name uses a prefix that was never added."""

    def __init__(self, prefix: str, name: str) -> None:
        super().__init__(
            f"unknown prefix '{prefix}' in name '{name}'",
            code="UNKNOWN_PREFIX",
            details={"prefix": prefix, "name": name},
        )
        self.prefix = prefix
        self.name = name


class UnknownParameterError(SchemaError):
    """Schema mapping carries a key the kind does not accept.

    Includes suggestions for similar parameter names.

    Attributes:
        param: The unknown parameter
        suggestions: Similar allowed parameter names
    """

    def __init__(
        self,
        param: Any,
        uri: str,
        suggestions: Optional[List[str]] = None,
    ) -> None:
        suggestions = suggestions or []
        msg = f"unknown parameter {param} for {uri}"
        if suggestions:
            msg += f". Did you mean: {', '.join(suggestions)}?"

        super().__init__(
            msg,
            uri=uri,
            code="UNKNOWN_PARAMETER",
            details={"param": param, "suggestions": suggestions},
        )
        self.param = param
        self.suggestions = suggestions


class DuplicateRegistrationError(SchemaError):
    """A URI or prefix is already registered."""

    def __init__(self, message: str, uri: Optional[str] = None) -> None:
        super().__init__(message, uri=uri, code="DUPLICATE_REGISTRATION")


class RegistryFrozenError(SchemaError):
    """Registry is frozen and cannot be modified."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="REGISTRY_FROZEN")


class ValidationError(RxError):
    """A value failed validation.

    The path is a slash-delimited breadcrumb naming the schema nodes the
    failure passed through, e.g. ``/rec:'tags'`` or ``/all/int``.

    Attributes:
        path: Location of the failure (empty until a node sets it)
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(
            message,
            code="VALIDATION_ERROR",
            details={"path": path or ""},
        )
        self.path = path or ""

    def __str__(self) -> str:
        return f"{self.message} ({self.path})"

    def __repr__(self) -> str:
        return f"ValidationError({self.message!r}, {self.path!r})"
