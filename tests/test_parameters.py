"""
Tests for typed descriptor parameters.

Parameters keep the type they were declared with; lookups with another type
fail instead of converting.
"""

import pytest

from nlpkit.featuregen import (
    AggregatedFeatureGenerator,
    InvalidParameterTypeError,
    MissingParameterError,
    ParameterStoreBuilder,
    ParameterType,
    ParameterTypeMismatchError,
    ParameterValue,
)
from nlpkit.featuregen.token_generators import OutcomePriorFeatureGenerator, TokenFeatureGenerator


class TestParameterValueParsing:
    """Tests for ParameterValue.parse()."""

    def test_parses_each_primitive_type(self):
        """Every primitive tag parses to its Python value with the tag kept."""
        assert ParameterValue.parse("int", "42") == ParameterValue(ParameterType.INT, 42)
        assert ParameterValue.parse("long", "9000000000") == ParameterValue(ParameterType.LONG, 9000000000)
        assert ParameterValue.parse("float", "0.5") == ParameterValue(ParameterType.FLOAT, 0.5)
        assert ParameterValue.parse("double", "-1e3") == ParameterValue(ParameterType.DOUBLE, -1000.0)
        assert ParameterValue.parse("str", "abc") == ParameterValue(ParameterType.STR, "abc")
        assert ParameterValue.parse("bool", "TRUE") == ParameterValue(ParameterType.BOOL, True)

    def test_numbers_tolerate_surrounding_whitespace(self):
        """Pretty-printed descriptors may pad numeric values."""
        assert ParameterValue.parse("int", " 7\n").value == 7

    def test_int_out_of_range(self):
        """int is 32-bit; larger values must be declared as long."""
        with pytest.raises(InvalidParameterTypeError, match="out of range"):
            ParameterValue.parse("int", "2147483648", "big")

    def test_unparsable_literal(self):
        """Text that is not a number is rejected with the tag in the message."""
        with pytest.raises(InvalidParameterTypeError) as excinfo:
            ParameterValue.parse("int", "two", "prevLength")

        assert excinfo.value.tag == "int"
        assert "prevLength" in str(excinfo.value)

    @pytest.mark.parametrize("tag, text", [
        ("int", "1_000"),
        ("int", "١٢"),
        ("int", "0x10"),
        ("int", "1.0"),
        ("long", "12_345"),
        ("long", "１２"),
        ("double", "1_000.5"),
        ("double", "١.5"),
        ("double", "inf"),
        ("float", "nan"),
        ("float", "1e39"),
    ])
    def test_only_plain_ascii_numbers(self, tag, text):
        """Digit group separators, non-ASCII digits and other Python-only spellings are unparsable."""
        with pytest.raises(InvalidParameterTypeError):
            ParameterValue.parse(tag, text, "n")

    def test_decimal_spellings(self):
        """Exponents, leading dots and the special values are accepted."""
        assert ParameterValue.parse("double", "+.5").value == 0.5
        assert ParameterValue.parse("double", "2.").value == 2.0
        assert ParameterValue.parse("double", "1E-2").value == 0.01
        assert ParameterValue.parse("double", "-Infinity").value == float("-inf")
        assert ParameterValue.parse("float", "NaN").value != ParameterValue.parse("float", "NaN").value

    def test_float_is_single_precision(self):
        """float values are rounded to single precision, double values are not."""
        single = ParameterValue.parse("float", "0.1").value
        double = ParameterValue.parse("double", "0.1").value

        assert double == 0.1
        assert single != 0.1
        assert single == pytest.approx(0.1, rel=1e-7)

    def test_bool_rejects_other_words(self):
        """Only true and false are accepted for bool."""
        with pytest.raises(InvalidParameterTypeError):
            ParameterValue.parse("bool", "yes")

    def test_unknown_tag(self):
        """Tags outside the six primitive types are rejected by name."""
        with pytest.raises(InvalidParameterTypeError) as excinfo:
            ParameterValue.parse("weird", "1", "x")

        assert excinfo.value.tag == "weird"
        assert "<weird>" in str(excinfo.value)

    def test_generator_tag_is_not_a_leaf_type(self):
        """'generator' elements are built, never parsed as literals."""
        with pytest.raises(InvalidParameterTypeError):
            ParameterType.from_tag("generator")


class TestParameterStore:
    """Tests for the typed accessors."""

    @pytest.fixture
    def store(self):
        return (ParameterStoreBuilder()
                .add_leaf("int", "size", "3")
                .add_leaf("long", "seed", "12")
                .add_leaf("float", "ratio", "0.25")
                .add_leaf("double", "weight", "1.5")
                .add_leaf("str", "label", "PER")
                .add_leaf("bool", "flag", "false")
                .build())

    def test_required_accessors(self, store):
        """Each accessor returns the value declared with its type."""
        assert store.get_int("size") == 3
        assert store.get_long("seed") == 12
        assert store.get_float("ratio") == 0.25
        assert store.get_double("weight") == 1.5
        assert store.get_str("label") == "PER"
        assert store.get_bool("flag") is False

    def test_missing_required_parameter(self, store):
        """A required lookup of an absent name raises MissingParameterError."""
        with pytest.raises(MissingParameterError, match="absent must be set"):
            store.get_int("absent")

    def test_defaulted_accessor_returns_default(self, store):
        """An absent name returns exactly the supplied default."""
        sentinel = object()

        assert store.get_int("absent", 9) == 9
        assert store.get_str("absent", None) is None
        assert store.get_bool("absent", sentinel) is sentinel

    def test_type_mismatch_on_bool_as_int(self, store):
        """Asking for an int that was declared bool fails."""
        with pytest.raises(ParameterTypeMismatchError) as excinfo:
            store.get_int("flag")

        assert excinfo.value.expected == "int"
        assert excinfo.value.actual == "bool"

    def test_no_numeric_coercion(self, store):
        """int, long, float and double never stand in for each other."""
        with pytest.raises(ParameterTypeMismatchError):
            store.get_long("size")
        with pytest.raises(ParameterTypeMismatchError):
            store.get_double("ratio")
        with pytest.raises(ParameterTypeMismatchError):
            store.get_float("size")

    def test_mismatch_even_with_default(self, store):
        """A default only applies to absent names, not to wrongly typed ones."""
        with pytest.raises(ParameterTypeMismatchError):
            store.get_int("label", 0)

    def test_declaration_order_is_kept(self, store):
        """Iteration follows declaration order."""
        assert list(store) == ["size", "seed", "ratio", "weight", "label", "flag"]


class TestParameterStoreBuilder:
    """Tests for generator child handling."""

    def test_leaf_without_name(self):
        """Leaves must carry a name attribute."""
        with pytest.raises(InvalidParameterTypeError, match="name attribute"):
            ParameterStoreBuilder().add_leaf("int", None, "1")

    def test_single_generator_passes_through(self):
        """One generator child is stored unchanged under generator#0."""
        token = TokenFeatureGenerator()

        store = ParameterStoreBuilder().add_generator(token).build()

        assert store.get_generator() is token

    def test_several_generators_are_aggregated(self):
        """More than one generator child becomes a single aggregate under generator#0."""
        first, second = TokenFeatureGenerator(), OutcomePriorFeatureGenerator()

        store = (ParameterStoreBuilder()
                 .add_generator(first)
                 .add_leaf("int", "size", "1")
                 .add_generator(second)
                 .build())

        aggregate = store.get_generator("generator#0")
        assert isinstance(aggregate, AggregatedFeatureGenerator)
        assert aggregate.generators == (first, second)
        assert "generator#1" not in store
        assert store.get_int("size") == 1

    def test_none_child_keeps_its_slot(self):
        """A child producing None uses up its index but is not stored."""
        token = TokenFeatureGenerator()

        store = ParameterStoreBuilder().add_generator(None).add_generator(token).build()

        assert "generator#0" not in store
        assert store.get_generator("generator#1") is token

    def test_generator_requested_as_str(self):
        """Generator entries are typed like any other parameter."""
        store = ParameterStoreBuilder().add_generator(TokenFeatureGenerator()).build()

        with pytest.raises(ParameterTypeMismatchError):
            store.get_str("generator#0")
