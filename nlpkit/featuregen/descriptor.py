"""
Feature generator descriptor parsing.

A descriptor is a small XML document describing a tree of feature
generators:

    <featureGenerators name="namefind">
      <generator class="nlpkit.featuregen.WindowFeatureGeneratorFactory">
        <int name="prevLength">2</int>
        <int name="nextLength">2</int>
        <generator class="nlpkit.featuregen.TokenFeatureGeneratorFactory"/>
      </generator>
    </featureGenerators>

This module only turns the markup into an immutable DescriptorNode tree.
It does not resolve classes or check parameter types; that happens in
nlpkit.featuregen.factory.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import IO, Iterator, Mapping, Union

from nlpkit.config import CLASS_ATTRIBUTE, GENERATOR_TAG, NAME_ATTRIBUTE
from nlpkit.featuregen.errors import MalformedDescriptorError

DescriptorSource = Union[bytes, str, IO]


@dataclass(frozen=True)
class DescriptorNode:
    """
    One element of a parsed descriptor.

    Attributes:
        tag: Element name ("featureGenerators", "generator", "int", ...)
        attributes: Read-only attribute mapping
        children: Child elements in document order
        text: Text content for elements without child elements, else None
    """
    tag: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    children: tuple['DescriptorNode', ...] = ()
    text: str | None = None

    def __post_init__(self):
        object.__setattr__(self, 'attributes', MappingProxyType(dict(self.attributes)))
        object.__setattr__(self, 'children', tuple(self.children))

    @property
    def is_generator(self) -> bool:
        return self.tag == GENERATOR_TAG

    @property
    def class_name(self) -> str | None:
        return self.attributes.get(CLASS_ATTRIBUTE)

    @property
    def name(self) -> str | None:
        return self.attributes.get(NAME_ATTRIBUTE)

    def iter(self) -> Iterator['DescriptorNode']:
        """Yield this node and all descendants in document order."""
        yield self
        for child in self.children:
            yield from child.iter()

    def generator_children(self) -> list['DescriptorNode']:
        return [child for child in self.children if child.is_generator]

    def __repr__(self) -> str:
        label = self.class_name or self.name
        suffix = f" {label!r}" if label else ""
        return f"DescriptorNode(<{self.tag}>{suffix}, children={len(self.children)})"


def _convert(element: ET.Element) -> DescriptorNode:
    children = tuple(_convert(child) for child in element)
    text = None if children else (element.text or "")
    return DescriptorNode(
        tag=element.tag,
        attributes=element.attrib,
        children=children,
        text=text,
    )


def parse_descriptor(source: DescriptorSource) -> DescriptorNode:
    """
    Parse a descriptor into a DescriptorNode tree.

    Args:
        source: The descriptor as bytes, as a str, or as a readable stream.
            Streams are read to the end but left open; closing them is
            the caller's job.

    Returns:
        The root node of the document

    Raises:
        MalformedDescriptorError: If the input is not well-formed XML
    """
    try:
        if isinstance(source, (bytes, str)):
            root = ET.fromstring(source)
        else:
            root = ET.parse(source).getroot()
    except ET.ParseError as e:
        raise MalformedDescriptorError(f"Descriptor is not valid XML: {e}") from e

    return _convert(root)
