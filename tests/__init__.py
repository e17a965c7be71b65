"""
rx-schema Test Suite.

This package contains:
- unit/: Unit tests for the range, errors, registry and each kind
- integration/: Schemas loaded from YAML documents, checked end to end
"""
