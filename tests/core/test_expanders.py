"""Tests for container and field expanders."""

import array

from deepassert.core import (
    AttributeIntrospector,
    MapAssertionPolicy,
    OptionalDouble,
    OptionalInt,
    OptionalLong,
    OptionalValue,
    RecursiveAssertionConfiguration,
    StructuralKind,
)
from deepassert.core.expanders import (
    Child,
    array_component_type,
    expand_array,
    expand_fields,
    expand_map,
    expand_optional,
    expand_primitive_optional,
    expand_sequence,
    expand_special_kind,
)
from tests.conftest import Address, Measurements, Person

DEFAULT = RecursiveAssertionConfiguration()


class TestSequenceExpander:
    def test_elements_with_index_segments(self):
        children = list(expand_sequence(["a", 2, None]))

        assert children == [
            Child("a", str, "[0]"),
            Child(2, int, "[1]"),
            Child(None, object, "[2]"),
        ]

    def test_empty(self):
        assert list(expand_sequence(())) == []


class TestArrayExpander:
    def test_component_type_from_typecode(self):
        assert array_component_type(array.array("i")) is int
        assert array_component_type(array.array("d")) is float
        assert array_component_type(array.array("f")) is float

    def test_elements_use_component_type(self):
        children = list(expand_array(array.array("d", [1.0, 2.5])))
        assert children == [Child(1.0, float, "[0]"), Child(2.5, float, "[1]")]


class TestMapExpander:
    def test_values_then_keys_for_object_and_entries(self):
        children = list(expand_map({"a": 1, "b": None}, DEFAULT))

        assert children == [
            Child(1, int, "VAL[1]"),
            Child(None, object, "VAL[None]"),
            Child("a", str, "KEY[a]"),
            Child("b", str, "KEY[b]"),
        ]

    def test_values_only(self):
        config = DEFAULT.with_map_assertion_policy(MapAssertionPolicy.MAP_VALUES_ONLY)
        children = list(expand_map({"a": 1, "b": 2}, config))

        assert [c.segment for c in children] == ["VAL[1]", "VAL[2]"]

    def test_segments_use_str_of_element(self):
        children = list(expand_map({(1, 2): "x"}, DEFAULT))
        assert [c.segment for c in children] == ["VAL[x]", "KEY[(1, 2)]"]

    def test_segments_ignore_custom_format(self):
        class Token:
            def __str__(self):
                return "str-form"

            def __format__(self, spec):
                return "format-form"

        token = Token()

        children = list(expand_map({token: token}, DEFAULT))

        assert [c.segment for c in children] == ["VAL[str-form]", "KEY[str-form]"]


class TestOptionalExpanders:
    def test_present_generic(self):
        address = Address("Main", 1)
        children = list(expand_optional(OptionalValue.of(address)))
        assert children == [Child(address, Address, "VAL")]

    def test_empty_generic_yields_none_child(self):
        assert list(expand_optional(OptionalValue.empty())) == [Child(None, object, "VAL")]

    def test_present_primitives(self):
        assert list(expand_primitive_optional(OptionalInt.of(3))) == [Child(3, int, "VAL")]
        assert list(expand_primitive_optional(OptionalDouble.of(1.5))) == [
            Child(1.5, float, "VAL")
        ]
        assert list(expand_primitive_optional(OptionalLong.of(7))) == [Child(7, int, "VAL")]

    def test_empty_primitives_yield_nothing(self):
        for empty in (OptionalInt.empty(), OptionalDouble.empty(), OptionalLong.empty()):
            assert list(expand_primitive_optional(empty)) == []


class TestSpecialKindDispatch:
    def test_none_has_no_children(self):
        for kind in (StructuralKind.SEQUENCE, StructuralKind.MAP, StructuralKind.OPTIONAL):
            assert list(expand_special_kind(kind, None, DEFAULT)) == []

    def test_dispatch(self):
        assert len(list(expand_special_kind(StructuralKind.SEQUENCE, [1, 2], DEFAULT))) == 2
        assert len(list(expand_special_kind(StructuralKind.MAP, {1: 2}, DEFAULT))) == 2
        optional = OptionalInt.of(1)
        assert len(list(expand_special_kind(StructuralKind.OPTIONAL_INT, optional, DEFAULT))) == 1


class TestFieldExpander:
    def test_one_child_per_field(self):
        address = Address("Main", 1)
        person = Person("Ann", 30, address)

        children = list(expand_fields(person, AttributeIntrospector()))

        assert children == [
            Child("Ann", str, "name"),
            Child(30, int, "age"),
            Child(address, Address, "address"),
            Child(None, Person, "friend"),
        ]

    def test_declared_primitive_type_wins(self):
        values = Measurements(ratio=1, count=True, active=False)

        children = list(expand_fields(values, AttributeIntrospector()))

        assert [c.node_type for c in children] == [float, int, bool]

    def test_runtime_type_wins_for_non_primitive_declarations(self):
        class Special(Address):
            pass

        special = Special("x", 1)
        person = Person("Ann", 30, special)

        address_child = list(expand_fields(person, AttributeIntrospector()))[2]
        assert address_child.node_type is Special
