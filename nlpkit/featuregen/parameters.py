"""
Typed parameters for feature generator factories.

Each generator element in a descriptor declares its parameters as typed
child elements:

    <int name="prevLength">2</int>
    <bool name="lowercase">false</bool>

The declared tag is kept with the parsed value. Lookups must ask for the
same type that was declared; an int is never handed out as a float.

Numeric literals are plain ASCII decimal: digit group underscores and
non-ASCII digits are rejected. int and long are 32-bit and 64-bit signed.
float values are rounded to single precision; double keeps the full
precision of a Python float.
"""

import re
import struct
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator

from nlpkit.config import GENERATOR_KEY_PREFIX
from nlpkit.featuregen.errors import (
    InvalidParameterTypeError,
    MissingParameterError,
    ParameterTypeMismatchError,
)
from nlpkit.featuregen.generators import AggregatedFeatureGenerator

INT_MIN, INT_MAX = -(2 ** 31), 2 ** 31 - 1
LONG_MIN, LONG_MAX = -(2 ** 63), 2 ** 63 - 1

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)
_DECIMAL_PATTERN = re.compile(
    r"[+-]?(?:NaN|Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)",
    re.ASCII,
)

# Sentinel for "no default supplied" in the typed accessors
NO_DEFAULT = object()


class ParameterType(Enum):
    """Declared type of a descriptor parameter. Values are the XML tags."""
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    STR = "str"
    BOOL = "bool"
    GENERATOR = "generator"

    @classmethod
    def from_tag(cls, tag: str) -> 'ParameterType':
        """
        Map a leaf element tag to its parameter type.

        Raises:
            InvalidParameterTypeError: If the tag is not a primitive type tag
        """
        try:
            parameter_type = cls(tag)
        except ValueError:
            parameter_type = None
        if parameter_type is None or parameter_type is cls.GENERATOR:
            raise InvalidParameterTypeError(
                tag,
                "is not a valid child element, must be one of generator, "
                "int, long, float, double, str or bool",
            )
        return parameter_type


def _parse_integer(text: str, low: int, high: int) -> int:
    literal = text.strip()
    if not _INTEGER_PATTERN.fullmatch(literal):
        raise ValueError("not a decimal integer")
    value = int(literal)
    if not low <= value <= high:
        raise ValueError(f"{value} is out of range")
    return value


def _parse_decimal(text: str) -> float:
    literal = text.strip()
    if not _DECIMAL_PATTERN.fullmatch(literal):
        raise ValueError("not a decimal number")
    return float(literal.replace("Infinity", "inf"))


def _parse_single(text: str) -> float:
    value = _parse_decimal(text)
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        raise ValueError(f"{value} is out of range for float") from None


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"{text!r} is not true or false")


_PARSERS = {
    ParameterType.INT: lambda text: _parse_integer(text, INT_MIN, INT_MAX),
    ParameterType.LONG: lambda text: _parse_integer(text, LONG_MIN, LONG_MAX),
    ParameterType.FLOAT: _parse_single,
    ParameterType.DOUBLE: _parse_decimal,
    ParameterType.STR: lambda text: text,
    ParameterType.BOOL: _parse_bool,
}


@dataclass(frozen=True)
class ParameterValue:
    """A parameter value together with the type it was declared as."""
    type: ParameterType
    value: Any

    @classmethod
    def parse(cls, tag: str, text: str | None, name: str | None = None) -> 'ParameterValue':
        """
        Parse the text of a typed leaf element.

        Raises:
            InvalidParameterTypeError: On an unknown tag or unparsable text
        """
        parameter_type = ParameterType.from_tag(tag)
        try:
            value = _PARSERS[parameter_type](text if text is not None else "")
        except ValueError as e:
            raise InvalidParameterTypeError(
                tag, f"parameter {name} has invalid value {text!r}: {e}", name=name
            ) from e
        return cls(parameter_type, value)

    @classmethod
    def generator(cls, generator) -> 'ParameterValue':
        return cls(ParameterType.GENERATOR, generator)


def generator_key(index: int) -> str:
    """Synthetic parameter key for the index-th generator child."""
    return f"{GENERATOR_KEY_PREFIX}{index}"


class ParameterStore:
    """
    Insertion-ordered, read-only view of one generator element's parameters.

    Built by ParameterStoreBuilder while the element is initialized and
    handed to the factory afterwards.
    """

    def __init__(self, values: 'OrderedDict[str, ParameterValue] | None' = None):
        self._values: OrderedDict[str, ParameterValue] = OrderedDict(values or {})

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def _get(self, name: str, expected: ParameterType, default: Any) -> Any:
        parameter = self._values.get(name)
        if parameter is None:
            if default is NO_DEFAULT:
                raise MissingParameterError(name)
            return default
        if parameter.type is not expected:
            raise ParameterTypeMismatchError(name, expected.value, parameter.type.value)
        return parameter.value

    def get_int(self, name: str, default: Any = NO_DEFAULT) -> int:
        return self._get(name, ParameterType.INT, default)

    def get_long(self, name: str, default: Any = NO_DEFAULT) -> int:
        return self._get(name, ParameterType.LONG, default)

    def get_float(self, name: str, default: Any = NO_DEFAULT) -> float:
        return self._get(name, ParameterType.FLOAT, default)

    def get_double(self, name: str, default: Any = NO_DEFAULT) -> float:
        return self._get(name, ParameterType.DOUBLE, default)

    def get_str(self, name: str, default: Any = NO_DEFAULT) -> str:
        return self._get(name, ParameterType.STR, default)

    def get_bool(self, name: str, default: Any = NO_DEFAULT) -> bool:
        return self._get(name, ParameterType.BOOL, default)

    def get_generator(self, name: str = generator_key(0), default: Any = NO_DEFAULT):
        return self._get(name, ParameterType.GENERATOR, default)

    def __repr__(self) -> str:
        entries = ", ".join(f"{name}:{value.type.value}" for name, value in self._values.items())
        return f"ParameterStore({entries})"


class ParameterStoreBuilder:
    """
    Collects the parameters of a single generator element.

    Generator children are added in document order and stored under
    generator#0, generator#1, ...; call build() once all children have been
    added. When more than one generator child produced a generator, build()
    replaces all of them with one aggregate, stored as the only generator
    entry under generator#0.
    """

    def __init__(self):
        self._values: OrderedDict[str, ParameterValue] = OrderedDict()
        self._generators: list = []
        self._generator_slots = 0

    def add_parameter(self, name: str, value: ParameterValue) -> 'ParameterStoreBuilder':
        self._values[name] = value
        return self

    def add_leaf(self, tag: str, name: str | None, text: str | None) -> 'ParameterStoreBuilder':
        """Parse a typed leaf element and add it under its name."""
        value = ParameterValue.parse(tag, text, name)
        if not name:
            raise InvalidParameterTypeError(tag, "element must have a name attribute")
        return self.add_parameter(name, value)

    def add_generator(self, generator) -> 'ParameterStoreBuilder':
        """
        Add the result of building a generator child.

        A child that produced None still takes up its slot index but is
        not stored.
        """
        key = generator_key(self._generator_slots)
        self._generator_slots += 1
        if generator is not None:
            self._generators.append(generator)
            self._values[key] = ParameterValue.generator(generator)
        return self

    def build(self) -> ParameterStore:
        values = OrderedDict(self._values)
        if len(self._generators) > 1:
            for index in range(self._generator_slots):
                values.pop(generator_key(index), None)
            aggregate = AggregatedFeatureGenerator(*self._generators)
            values[generator_key(0)] = ParameterValue.generator(aggregate)
        return ParameterStore(values)
