"""
Feature Generator Package

Builds the feature generators used by the name finder, document
categorizer and language detector from XML descriptors.

Main Components:
- create(): Build a generator tree from a descriptor
- extract_artifact_serializer_mappings(): Find the serializers for the
  resources a descriptor refers to, without loading them
- get_descriptor_elements(): Flat list of all descriptor elements
- FeatureGeneratorFactory / register_factory: Plug in new generators

Usage:
    from nlpkit.featuregen import create, MappingResourceProvider

    generator = create(descriptor_bytes, MappingResourceProvider({"names": names}))
    features = generator.generate(tokens, index)
"""

from nlpkit.config import DEFAULT_NAMEFINDER_DESCRIPTOR
from nlpkit.featuregen.descriptor import DescriptorNode, parse_descriptor
from nlpkit.featuregen.dictionary import Dictionary, DictionaryFeatureGenerator
from nlpkit.featuregen.errors import (
    AdaptiveDataClearError,
    FactoryInstantiationError,
    GeneratorFactoryError,
    InvalidFormatError,
    InvalidParameterTypeError,
    MalformedDescriptorError,
    MissingClassAttributeError,
    MissingParameterError,
    MissingResourceProviderError,
    ParameterTypeMismatchError,
    ResourceNotFoundError,
    UnknownGeneratorClassError,
    UnsupportedDescriptorFormatError,
)
from nlpkit.featuregen.factory import (
    FeatureGeneratorFactory,
    build_generator,
    create,
    extract_artifact_serializer_mappings,
    get_available_factories,
    get_descriptor_elements,
    get_factory_class,
    load_builtin_factories,
    load_factory_plugins,
    register_factory,
)
from nlpkit.featuregen.generators import (
    AdaptiveFeatureGenerator,
    AggregatedFeatureGenerator,
    CachedFeatureGenerator,
    WindowFeatureGenerator,
)
from nlpkit.featuregen.parameters import (
    ParameterStore,
    ParameterStoreBuilder,
    ParameterType,
    ParameterValue,
)
from nlpkit.featuregen.resources import FeatureGeneratorResourceProvider, MappingResourceProvider
from nlpkit.featuregen.serializers import ArtifactSerializer, DictionarySerializer

# Registers the bundled factories
load_builtin_factories()


def create_default_generator(resource_provider: FeatureGeneratorResourceProvider | None = None):
    """
    Create the feature generator of the bundled name finder descriptor.

    Returns:
        The generator described by descriptors/default_namefinder.xml
    """
    with open(DEFAULT_NAMEFINDER_DESCRIPTOR, 'rb') as descriptor:
        return create(descriptor, resource_provider)


__all__ = [
    'AdaptiveDataClearError',
    'AdaptiveFeatureGenerator',
    'AggregatedFeatureGenerator',
    'ArtifactSerializer',
    'CachedFeatureGenerator',
    'DescriptorNode',
    'Dictionary',
    'DictionaryFeatureGenerator',
    'DictionarySerializer',
    'FactoryInstantiationError',
    'FeatureGeneratorFactory',
    'FeatureGeneratorResourceProvider',
    'GeneratorFactoryError',
    'InvalidFormatError',
    'InvalidParameterTypeError',
    'MalformedDescriptorError',
    'MappingResourceProvider',
    'MissingClassAttributeError',
    'MissingParameterError',
    'MissingResourceProviderError',
    'ParameterStore',
    'ParameterStoreBuilder',
    'ParameterType',
    'ParameterTypeMismatchError',
    'ParameterValue',
    'ResourceNotFoundError',
    'UnknownGeneratorClassError',
    'UnsupportedDescriptorFormatError',
    'WindowFeatureGenerator',
    'build_generator',
    'create',
    'create_default_generator',
    'extract_artifact_serializer_mappings',
    'get_available_factories',
    'get_descriptor_elements',
    'get_factory_class',
    'load_builtin_factories',
    'load_factory_plugins',
    'parse_descriptor',
    'register_factory',
]
