"""
Feature generator assembly from XML descriptors.

Each <generator> element names a factory by its registered class name.
The factory receives the element's typed parameters and already-built
child generators, and returns the generator for that element:

    <featureGenerators name="namefind">
      <generator class="nlpkit.featuregen.CachedFeatureGeneratorFactory">
        <generator class="nlpkit.featuregen.WindowFeatureGeneratorFactory">
          <int name="prevLength">2</int>
          <int name="nextLength">2</int>
          <generator class="nlpkit.featuregen.TokenClassFeatureGeneratorFactory"/>
        </generator>
        <generator class="nlpkit.featuregen.SentenceFeatureGeneratorFactory">
          <bool name="begin">true</bool>
          <bool name="end">false</bool>
        </generator>
      </generator>
    </featureGenerators>

Children are built before their parent. When an element has more than one
generator child, the children are combined into one
AggregatedFeatureGenerator which the parent sees as generator#0.

Usage:
    from nlpkit.featuregen import create, MappingResourceProvider

    with open("namefinder.xml", "rb") as descriptor:
        generator = create(descriptor, MappingResourceProvider({"names": names}))

    features = generator.generate(["Pierre", "Vinken", "joined"], 0)

Registration:
    @register_factory("com.example.MyFeatureGeneratorFactory")
    class MyFeatureGeneratorFactory(FeatureGeneratorFactory):
        def create(self):
            return MyFeatureGenerator(self.get_int("size", 3))
"""

import importlib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Type

import yaml

from nlpkit.config import FEATURE_GENERATORS_TAG, GENERATOR_TAG, PLUGIN_CONFIG_FILE
from nlpkit.featuregen.descriptor import DescriptorNode, DescriptorSource, parse_descriptor
from nlpkit.featuregen.errors import (
    FactoryInstantiationError,
    InvalidFormatError,
    InvalidParameterTypeError,
    MissingClassAttributeError,
    MissingResourceProviderError,
    UnknownGeneratorClassError,
    UnsupportedDescriptorFormatError,
)
from nlpkit.featuregen.generators import AdaptiveFeatureGenerator, AggregatedFeatureGenerator
from nlpkit.featuregen.parameters import (
    NO_DEFAULT,
    ParameterStore,
    ParameterStoreBuilder,
    ParameterType,
    generator_key,
)
from nlpkit.featuregen.resources import FeatureGeneratorResourceProvider
from nlpkit.featuregen.serializers import ArtifactSerializer
from nlpkit.logging_config import Timer, debug_log, warning

# Registry of available factories (class references, not instances)
_FACTORY_REGISTRY: dict[str, Type['FeatureGeneratorFactory']] = {}


# =============================================================================
# Factory Base Class
# =============================================================================

class FeatureGeneratorFactory(ABC):
    """
    Abstract base class for the factory behind one <generator> element.

    A new factory instance is created for every element. init() fills in
    the element, the resource provider and the parameter store; create()
    then builds the generator.

    Attributes:
        element: The DescriptorNode this factory was initialized with
        resource_provider: Provider for named resources, None during
            serializer discovery
        parameters: Typed parameters and child generators of the element

    Example:
        @register_factory("nlpkit.featuregen.PrefixFeatureGeneratorFactory")
        class PrefixFeatureGeneratorFactory(FeatureGeneratorFactory):
            def create(self):
                return PrefixFeatureGenerator(self.get_int("length", 4))
    """

    def __init__(self):
        self.element: DescriptorNode | None = None
        self.resource_provider: FeatureGeneratorResourceProvider | None = None
        self.parameters = ParameterStore()

    def init(self, element: DescriptorNode,
             resource_provider: FeatureGeneratorResourceProvider | None) -> None:
        """
        Build the child generators of element and parse its parameters.

        Raises:
            InvalidParameterTypeError: On an unknown leaf tag or bad literal
            Any error raised while building a child generator
        """
        self.element = element
        self.resource_provider = resource_provider

        builder = ParameterStoreBuilder()
        for child in element.children:
            if child.tag == GENERATOR_TAG:
                builder.add_generator(build_generator(child, resource_provider))
            else:
                builder.add_leaf(child.tag, child.name, child.text)

        self.parameters = builder.build()

    @abstractmethod
    def create(self) -> AdaptiveFeatureGenerator | None:
        """
        Build the generator for this element.

        Returns:
            The generator, or None if the element only exists to declare
            artifact serializers
        """
        pass

    def get_artifact_serializer_mapping(self) -> dict[str, ArtifactSerializer] | None:
        """
        Return the serializers for the resources this element refers to.

        Called after init() with no resource provider. Factories that do not
        reference resources keep the default, which contributes nothing.
        """
        return None

    # Typed parameter access. Without a default a missing parameter raises
    # MissingParameterError; a parameter declared with another type raises
    # ParameterTypeMismatchError either way.

    def get_int(self, name: str, default: Any = NO_DEFAULT) -> int:
        return self.parameters.get_int(name, default)

    def get_long(self, name: str, default: Any = NO_DEFAULT) -> int:
        return self.parameters.get_long(name, default)

    def get_float(self, name: str, default: Any = NO_DEFAULT) -> float:
        return self.parameters.get_float(name, default)

    def get_double(self, name: str, default: Any = NO_DEFAULT) -> float:
        return self.parameters.get_double(name, default)

    def get_str(self, name: str, default: Any = NO_DEFAULT) -> str:
        return self.parameters.get_str(name, default)

    def get_bool(self, name: str, default: Any = NO_DEFAULT) -> bool:
        return self.parameters.get_bool(name, default)

    def get_generator(self, name: str = generator_key(0),
                      default: Any = NO_DEFAULT) -> AdaptiveFeatureGenerator:
        return self.parameters.get_generator(name, default)

    def get_resource(self, key: str) -> Any:
        """
        Resolve a resource through the resource provider.

        Raises:
            MissingResourceProviderError: If no provider was supplied
            ResourceNotFoundError: If the provider does not know key
        """
        if self.resource_provider is None:
            raise MissingResourceProviderError(key)
        return self.resource_provider.get_resource(key)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(parameters={self.parameters!r})"


# =============================================================================
# Registry
# =============================================================================

def register_factory(name: str | None = None):
    """
    Decorator to register a factory class under a descriptor class name.

    Args:
        name: The value descriptors put in the class attribute. Defaults to
            the dotted module path and class name of the decorated class.

    Raises:
        ValueError: If name is already registered (prevents accidental overwrites)
    """
    def decorator(cls: Type[FeatureGeneratorFactory]) -> Type[FeatureGeneratorFactory]:
        key = name or f"{cls.__module__}.{cls.__qualname__}"
        if key in _FACTORY_REGISTRY:
            raise ValueError(
                f"Factory '{key}' is already registered. "
                f"Existing: {_FACTORY_REGISTRY[key].__name__}, New: {cls.__name__}"
            )
        _FACTORY_REGISTRY[key] = cls
        return cls
    return decorator


def get_factory_class(name: str) -> Type[FeatureGeneratorFactory]:
    """
    Look up a registered factory class.

    Raises:
        UnknownGeneratorClassError: If nothing is registered under name
    """
    try:
        return _FACTORY_REGISTRY[name]
    except KeyError:
        raise UnknownGeneratorClassError(name, get_available_factories()) from None


def get_available_factories() -> list[str]:
    """Return the sorted names of all registered factories."""
    return sorted(_FACTORY_REGISTRY.keys())


def load_builtin_factories() -> None:
    """Import the bundled factories so their decorators register them."""
    importlib.import_module("nlpkit.featuregen.factories")


def load_factory_plugins(config_path: Path | None = None) -> list[str]:
    """
    Import the plugin modules listed in a YAML file.

    The file looks like:

        plugins:
          - nlpkit.featuregen.factories
          - mycompany.nlp.generators

    Args:
        config_path: Path to the plugin list (uses PLUGIN_CONFIG_FILE if None)

    Returns:
        Names of the modules that were imported

    Raises:
        ImportError: If a listed module cannot be imported
    """
    config_path = config_path or PLUGIN_CONFIG_FILE
    try:
        with open(config_path, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        debug_log(f"[REGISTRY] Plugin config not found: {config_path}")
        return []
    except yaml.YAMLError as e:
        warning(f"[REGISTRY] Plugin config {config_path} is not valid YAML: {e}")
        return []

    modules = data.get('plugins') or []
    for module_name in modules:
        importlib.import_module(module_name)

    debug_log(f"[REGISTRY] Loaded {len(modules)} plugin modules, "
              f"{len(_FACTORY_REGISTRY)} factories registered")
    return list(modules)


def _instantiate_factory(class_name: str) -> FeatureGeneratorFactory:
    factory_class = get_factory_class(class_name)
    try:
        return factory_class()
    except Exception as e:
        raise FactoryInstantiationError(class_name, e) from e


# =============================================================================
# Building
# =============================================================================

def build_generator(
    element: DescriptorNode,
    resource_provider: FeatureGeneratorResourceProvider | None,
) -> AdaptiveFeatureGenerator | None:
    """
    Build the generator for one <generator> element and its subtree.

    Raises:
        MissingClassAttributeError: If the class attribute is missing or blank
        UnknownGeneratorClassError: If no factory is registered for the class
        FactoryInstantiationError: If the factory cannot be constructed
        InvalidFormatError: If parameters are invalid or missing
    """
    class_name = element.class_name
    if class_name is None or not class_name.strip():
        raise MissingClassAttributeError(element.tag)

    factory = _instantiate_factory(class_name)
    factory.init(element, resource_provider)
    generator = factory.create()

    debug_log(f"[FEATUREGEN] {class_name} -> {type(generator).__name__ if generator else None}")
    return generator


def _build_root(root: DescriptorNode,
                resource_provider: FeatureGeneratorResourceProvider | None):
    if root.tag != FEATURE_GENERATORS_TAG:
        return build_generator(root, resource_provider)

    # Only generators may appear below the root
    for child in root.children:
        if child.tag != GENERATOR_TAG:
            ParameterType.from_tag(child.tag)
            raise InvalidParameterTypeError(
                child.tag,
                f"parameter {child.name} is not allowed directly below <{FEATURE_GENERATORS_TAG}>",
                name=child.name,
            )

    generators = [build_generator(child, resource_provider) for child in root.generator_children()]
    generators = [generator for generator in generators if generator is not None]
    if not generators:
        return None
    if len(generators) == 1:
        return generators[0]
    return AggregatedFeatureGenerator(*generators)


def create(
    descriptor: DescriptorSource,
    resource_provider: FeatureGeneratorResourceProvider | None,
) -> AdaptiveFeatureGenerator | None:
    """
    Create a feature generator from a descriptor.

    The root may be a <featureGenerators> element, whose generator children
    are combined like the children of any other element, or a single
    <generator> element.

    Args:
        descriptor: XML as bytes, str, or a readable stream. Streams stay
            open and must be closed by the caller.
        resource_provider: Resolves resource keys used in the descriptor,
            may be None if no generator needs resources

    Returns:
        The top-level generator, or None if nothing in the descriptor
        produces one

    Raises:
        GeneratorFactoryError: If the descriptor cannot be turned into a generator
    """
    root = parse_descriptor(descriptor)

    with Timer(f"[FEATUREGEN] Building <{root.tag}> descriptor"):
        return _build_root(root, resource_provider)


# =============================================================================
# Serializer Discovery
# =============================================================================

def _collect_serializers(mapping: dict[str, ArtifactSerializer], element: DescriptorNode) -> None:
    class_name = element.class_name
    if class_name and class_name.strip():
        factory = _instantiate_factory(class_name)
        try:
            factory.init(element, None)
            contributed = factory.get_artifact_serializer_mapping()
        except InvalidFormatError as e:
            # Without resources many elements cannot be initialized
            debug_log(f"[FEATUREGEN] Skipping serializers of {class_name}: {e}")
            contributed = None

        if contributed:
            mapping.update(contributed)

    for child in element.generator_children():
        _collect_serializers(mapping, child)


def extract_artifact_serializer_mappings(descriptor: DescriptorSource) -> dict[str, ArtifactSerializer]:
    """
    Find the artifact serializers needed by the resources of a descriptor.

    Every <generator> element in the tree is visited, including children a
    parent factory never uses. No resource provider is needed. When two
    elements declare the same key, the one visited later wins.

    Raises:
        MalformedDescriptorError: If the descriptor is not valid XML
        UnsupportedDescriptorFormatError: If the root is not <featureGenerators>
        UnknownGeneratorClassError: If an element names an unregistered factory
        FactoryInstantiationError: If a factory cannot be constructed
    """
    root = parse_descriptor(descriptor)
    if root.tag != FEATURE_GENERATORS_TAG:
        raise UnsupportedDescriptorFormatError(root.tag, FEATURE_GENERATORS_TAG)

    mapping: dict[str, ArtifactSerializer] = {}
    for child in root.generator_children():
        _collect_serializers(mapping, child)

    debug_log(f"[FEATUREGEN] Found {len(mapping)} artifact serializers: {sorted(mapping)}")
    return mapping


def get_descriptor_elements(descriptor: DescriptorSource) -> list[DescriptorNode]:
    """
    List every element of a descriptor, root first, in document order.

    Raises:
        MalformedDescriptorError: If the descriptor is not valid XML
    """
    return list(parse_descriptor(descriptor).iter())
