"""
Unit tests for the type registry.

Tests cover:
- URI expansion and prefixes
- Type registration and duplicate detection
- Learned types (aliases)
- Schema compilation errors
- Registry freezing and the global registry
"""

import threading

import pytest

from rx_schema import compile_schema, core_types, schema
from rx_schema.config import get_settings
from rx_schema.errors import (
    DuplicateRegistrationError,
    RegistryFrozenError,
    SchemaError,
    UnknownParameterError,
    UnknownPrefixError,
    UnknownTypeError,
)
from rx_schema.registry import Alias, Builtin, Registry, get_registry, reset_registry
from rx_schema.types import SUCCESS, CheckResult, IntType, StrType, Validator

CORE = "tag:codesimply.com,2008:rx/core/"
PORT_URI = "tag:example.com,2024:rx/port"


class EvenType(Validator):
    """User-defined kind used to exercise register_type."""

    uri = "tag:example.com,2024:rx/even"

    def validate(self, value):
        if isinstance(value, int) and value % 2 == 0:
            return SUCCESS
        return CheckResult.failure(f"expected even got {value!r}", "/even")


class PrefixingType(Validator):
    """User-defined kind whose constructor adds a prefix to its registry."""

    uri = "tag:example.com,2024:rx/prefixing"

    def __init__(self, param, rx):
        super().__init__(param, rx)
        rx.add_prefix("made", "tag:example.com,2024:rx/made/")

    def validate(self, value):
        return SUCCESS


class TestExpandUri:
    """Tests for Registry.expand_uri."""

    def test_full_uri_unchanged(self):
        """Names with a scheme are already URIs."""
        rx = Registry()
        assert rx.expand_uri("tag:example.com,2024:x") == "tag:example.com,2024:x"

    def test_core_shorthand(self):
        """The empty prefix maps to the core namespace."""
        rx = Registry()
        assert rx.expand_uri("//int") == CORE + "int"

    def test_meta_shorthand(self):
        """The .meta prefix maps to the meta namespace."""
        rx = Registry()
        assert rx.expand_uri("/.meta/schema") == "tag:codesimply.com,2008:rx/meta/schema"

    def test_unknown_prefix_raises(self):
        """Unregistered prefixes are definition errors."""
        rx = Registry()
        with pytest.raises(UnknownPrefixError, match="unknown prefix 'nope'"):
            rx.expand_uri("/nope/int")

    def test_unparseable_name_raises(self):
        """Names that are neither URIs nor shorthand are rejected."""
        rx = Registry()
        with pytest.raises(SchemaError, match="couldn't understand"):
            rx.expand_uri("int")

    def test_add_prefix(self):
        """Added prefixes expand like the defaults."""
        rx = Registry()
        rx.add_prefix("ex", "tag:example.com,2024:rx/")
        assert rx.expand_uri("/ex/port") == "tag:example.com,2024:rx/port"

    def test_add_duplicate_prefix_raises(self):
        """A prefix can only be added once."""
        rx = Registry()
        with pytest.raises(DuplicateRegistrationError, match="already registered"):
            rx.add_prefix("", "tag:other:")


class TestRegisterType:
    """Tests for Registry.register_type."""

    def test_core_types_loaded(self):
        """A default registry knows all sixteen core kinds."""
        rx = Registry()
        assert len(core_types) == 16
        assert rx.known_types() == sorted(CORE + t.subname for t in core_types)
        for name in ("all", "any", "arr", "bool", "date", "def", "fail", "int",
                     "map", "nil", "num", "one", "rec", "seq", "str", "time"):
            assert f"//{name}" in rx

    def test_empty_registry(self):
        """load_core=False starts empty."""
        rx = Registry(load_core=False)
        assert rx.known_types() == []
        with pytest.raises(UnknownTypeError):
            rx.make_schema("//int")

    def test_register_custom_type(self):
        """Custom kinds compile and validate."""
        rx = Registry()
        rx.register_type(EvenType)

        node = rx.make_schema({"type": EvenType.uri})
        assert node.check(4)
        assert not node.check(3)
        assert node.uri == EvenType.uri

    def test_register_duplicate_raises(self):
        """Registering an existing URI raises."""
        rx = Registry()
        with pytest.raises(DuplicateRegistrationError, match="already-known type"):
            rx.register_type(IntType)

    def test_register_without_uri_raises(self):
        """Constructors must carry a URI."""
        rx = Registry()
        with pytest.raises(SchemaError, match="no type URI"):
            rx.register_type(lambda param, reg: None)

    def test_custom_type_unknown_param(self):
        """Custom kinds get the default allow-list check."""
        rx = Registry()
        rx.register_type(EvenType)
        with pytest.raises(UnknownParameterError):
            rx.make_schema({"type": EvenType.uri, "max": 10})


class TestLearnType:
    """Tests for Registry.learn_type."""

    @pytest.fixture
    def rx(self):
        """Registry with a learned port type."""
        registry = Registry()
        registry.learn_type(PORT_URI, {"type": "//int", "range": {"min": 1, "max": 65535}})
        return registry

    def test_learned_type_matches_inline(self, rx):
        """An alias behaves like its schema inlined."""
        alias = rx.make_schema(PORT_URI)
        inline = rx.make_schema({"type": "//int", "range": {"min": 1, "max": 65535}})

        for value in (0, 1, 80, 65535, 65536, 8.5, "80", None):
            assert alias.check(value) == inline.check(value)

    def test_learned_type_in_container(self, rx):
        """Aliases can be used as nested schemas."""
        node = rx.make_schema({"type": "//arr", "contents": PORT_URI})
        assert node.check([22, 80, 443])
        assert not node.check([22, 0])

    def test_alias_chain(self, rx):
        """Aliases may refer to other aliases."""
        rx.learn_type("tag:example.com,2024:rx/ports", {"type": "//arr", "contents": PORT_URI})
        rx.learn_type("tag:example.com,2024:rx/listeners", "tag:example.com,2024:rx/ports")

        node = rx.make_schema("tag:example.com,2024:rx/listeners")
        assert node.check([80])
        assert not node.check([80, -1])

    def test_relearn_raises(self, rx):
        """Learning under a used URI raises."""
        with pytest.raises(DuplicateRegistrationError, match="already-registered uri"):
            rx.learn_type(PORT_URI, "//str")

    def test_learn_over_core_type_raises(self, rx):
        """Core URIs cannot be replaced by aliases."""
        with pytest.raises(DuplicateRegistrationError):
            rx.learn_type(CORE + "int", "//num")

    def test_learn_invalid_schema_raises(self):
        """Learned schemas are compiled eagerly."""
        rx = Registry()
        with pytest.raises(UnknownParameterError):
            rx.learn_type(PORT_URI, {"type": "//int", "lenght": 3})
        assert PORT_URI not in rx

    def test_self_reference_is_rejected(self):
        """An alias cannot refer to itself."""
        rx = Registry()
        with pytest.raises(UnknownTypeError):
            rx.learn_type(PORT_URI, {"type": "//arr", "contents": PORT_URI})

    def test_constructor_may_call_back_into_registry(self):
        """Compiling a learned schema does not hold the registry lock."""
        rx = Registry()
        rx.register_type(PrefixingType)

        worker = threading.Thread(
            target=rx.learn_type,
            args=(PORT_URI, {"type": PrefixingType.uri}),
            daemon=True,
        )
        worker.start()
        worker.join(timeout=5)

        assert not worker.is_alive()
        assert rx.is_alias(PORT_URI)
        assert rx.expand_uri("/made/x") == "tag:example.com,2024:rx/made/x"

    def test_alias_takes_no_arguments(self, rx):
        """Aliases reject parameters."""
        with pytest.raises(SchemaError, match="composed type does not take check arguments"):
            rx.make_schema({"type": PORT_URI, "range": {"min": 1000}})

    def test_learn_with_prefix(self):
        """Learned URIs may be given in shorthand."""
        rx = Registry()
        rx.add_prefix("ex", "tag:example.com,2024:rx/")
        rx.learn_type("/ex/name", {"type": "//str", "length": {"min": 1}})

        assert rx.is_alias("tag:example.com,2024:rx/name")
        assert rx.make_schema("/ex/name").check("a")
        assert not rx.make_schema("/ex/name").check("")

    def test_stored_schema_is_copied(self):
        """Mutating the learned schema afterwards has no effect."""
        rx = Registry()
        definition = {"type": "//str", "length": {"max": 3}}
        rx.learn_type(PORT_URI, definition)
        definition["length"]["max"] = 100

        assert not rx.make_schema(PORT_URI).check("abcdef")

    def test_entries_are_tagged(self, rx):
        """The type table holds Builtin and Alias entries."""
        assert isinstance(rx._types[PORT_URI], Alias)
        assert isinstance(rx._types[CORE + "int"], Builtin)
        assert rx._types[CORE + "int"].constructor is IntType
        assert not rx.is_alias("//int")


class TestMakeSchema:
    """Tests for Registry.make_schema."""

    def test_bare_string_is_type_shorthand(self):
        """'//str' means {type: '//str'}."""
        rx = Registry()
        node = rx.make_schema("//str")
        assert isinstance(node, StrType)
        assert node.uri == CORE + "str"

    def test_full_uri_type(self):
        """Full URIs work as type names."""
        rx = Registry()
        assert rx.make_schema({"type": CORE + "int"}).check(3)

    @pytest.mark.parametrize("bad", [None, 3, [], {}, {"type": None}, {"type": 7}, {"of": []}])
    def test_invalid_type_raises(self, bad):
        """Schemas need a string 'type'."""
        rx = Registry()
        with pytest.raises(SchemaError, match="invalid type"):
            rx.make_schema(bad)

    def test_unknown_type_suggests(self):
        """Unknown URIs suggest close matches."""
        rx = Registry()
        with pytest.raises(UnknownTypeError) as exc_info:
            rx.make_schema("//strr")
        assert CORE + "str" in exc_info.value.suggestions

    @pytest.mark.parametrize("definition", [
        {"type": "//all", "of": ["//int"]},
        {"type": "//any"},
        {"type": "//arr", "contents": "//int"},
        {"type": "//bool"},
        {"type": "//date"},
        {"type": "//def"},
        {"type": "//fail"},
        {"type": "//int"},
        {"type": "//map", "values": "//int"},
        {"type": "//nil"},
        {"type": "//num"},
        {"type": "//one"},
        {"type": "//rec", "required": {"a": "//int"}},
        {"type": "//seq", "contents": ["//int"]},
        {"type": "//str"},
        {"type": "//time"},
    ], ids=lambda definition: definition["type"])
    def test_unknown_parameter_rejected_by_every_kind(self, definition):
        """Every core kind rejects keys it does not know."""
        rx = Registry()
        rx.make_schema(definition)
        with pytest.raises(UnknownParameterError, match="unknown parameter bogus"):
            rx.make_schema({**definition, "bogus": 1})

    def test_independent_instances(self):
        """Compiling twice gives two equivalent, separate trees."""
        rx = Registry()
        definition = {"type": "//seq", "contents": ["//int"], "tail": {"type": "//arr", "contents": "//str"}}
        first = rx.make_schema(definition)
        second = rx.make_schema(definition)

        assert first is not second
        assert first.contents[0] is not second.contents[0]
        for value in ([1], [1, "a"], [1, 2], ["a"], [], None):
            assert first.check(value) == second.check(value)

    def test_schema_convenience(self):
        """schema() compiles with a fresh core registry."""
        assert schema is compile_schema
        node = schema({"type": "//str", "length": {"min": 2}})
        assert node.check("ab")
        assert not node.check("a")


class TestFreeze:
    """Tests for Registry.freeze."""

    def test_freeze(self):
        """Frozen registries still compile schemas."""
        rx = Registry()
        rx.freeze()
        assert rx.frozen is True
        assert rx.make_schema("//int").check(1)

    def test_freeze_twice_raises(self):
        """Freezing twice raises error."""
        rx = Registry()
        rx.freeze()
        with pytest.raises(RegistryFrozenError):
            rx.freeze()

    def test_mutation_after_freeze_raises(self):
        """No registration, learning or prefixes after freeze."""
        rx = Registry()
        rx.freeze()

        with pytest.raises(RegistryFrozenError):
            rx.register_type(EvenType)
        with pytest.raises(RegistryFrozenError):
            rx.learn_type(PORT_URI, "//int")
        with pytest.raises(RegistryFrozenError):
            rx.add_prefix("ex", "tag:example.com,2024:rx/")

    def test_concurrent_learning(self):
        """Learning from several threads registers every type once."""
        rx = Registry()
        errors = []

        def learn(i):
            try:
                rx.learn_type(f"tag:example.com,2024:rx/t{i}", {"type": "//int", "value": i})
            except Exception as e:  # pragma: no cover
                errors.append(e)

        threads = [threading.Thread(target=learn, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        for i in range(20):
            assert rx.make_schema(f"tag:example.com,2024:rx/t{i}").check(i)


class TestGlobalRegistry:
    """Tests for get_registry/reset_registry."""

    @pytest.fixture(autouse=True)
    def clean(self, monkeypatch):
        monkeypatch.delenv("RX_LOAD_CORE", raising=False)
        monkeypatch.delenv("RX_FREEZE_GLOBAL_REGISTRY", raising=False)
        get_settings.cache_clear()
        reset_registry()
        yield
        get_settings.cache_clear()
        reset_registry()

    def test_same_instance(self):
        """get_registry returns one shared registry."""
        assert get_registry() is get_registry()
        assert "//int" in get_registry()
        assert get_registry().frozen is False

    def test_reset(self):
        """reset_registry discards the shared registry."""
        first = get_registry()
        reset_registry()
        assert get_registry() is not first

    def test_frozen_from_settings(self, monkeypatch):
        """RX_FREEZE_GLOBAL_REGISTRY freezes on creation."""
        monkeypatch.setenv("RX_FREEZE_GLOBAL_REGISTRY", "true")
        get_settings.cache_clear()
        assert get_registry().frozen is True

    def test_no_core_from_settings(self, monkeypatch):
        """RX_LOAD_CORE=false gives an empty registry."""
        monkeypatch.setenv("RX_LOAD_CORE", "false")
        get_settings.cache_clear()
        assert get_registry().known_types() == []
