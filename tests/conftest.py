"""
Shared fixtures and test-only factories for the feature generator tests.

The factories below are registered once, when pytest imports this module,
under names starting with "test.".
"""

import pytest

from nlpkit.featuregen import (
    AdaptiveFeatureGenerator,
    Dictionary,
    DictionarySerializer,
    FeatureGeneratorFactory,
    InvalidFormatError,
    register_factory,
)


class FixedFeatureGenerator(AdaptiveFeatureGenerator):
    """Emits the same feature for every token."""

    def __init__(self, feature: str):
        self.feature = feature
        self.cleared = 0

    def create_features(self, features, tokens, index, previous_outcomes=None):
        features.append(self.feature)

    def clear_adaptive_data(self):
        self.cleared += 1


class PassThroughFeatureGenerator(AdaptiveFeatureGenerator):
    """Delegates to the wrapped generator unchanged."""

    def __init__(self, generator: AdaptiveFeatureGenerator):
        self.generator = generator

    def create_features(self, features, tokens, index, previous_outcomes=None):
        self.generator.create_features(features, tokens, index, previous_outcomes)


@register_factory("test.A")
class PassThroughFactory(FeatureGeneratorFactory):

    def create(self):
        return PassThroughFeatureGenerator(self.get_generator())


@register_factory("test.B")
class BFactory(FeatureGeneratorFactory):

    def create(self):
        return FixedFeatureGenerator("B")


@register_factory("test.C")
class CFactory(FeatureGeneratorFactory):

    def create(self):
        return FixedFeatureGenerator("C")


@register_factory("test.Fixed")
class FixedFactory(FeatureGeneratorFactory):

    def create(self):
        return FixedFeatureGenerator(self.get_str("feature"))


@register_factory("test.Recording")
class RecordingFactory(FeatureGeneratorFactory):
    """Keeps the last initialized instance so tests can inspect its parameters."""

    last_instance = None

    def create(self):
        type(self).last_instance = self
        return FixedFeatureGenerator("recorded")


@register_factory("test.SerializerOnly")
class SerializerOnlyFactory(FeatureGeneratorFactory):
    """Produces no generator, only declares a serializer for its key."""

    def create(self):
        return None

    def get_artifact_serializer_mapping(self):
        return {self.get_str("key"): DictionarySerializer()}


@register_factory("test.NeedsResource")
class NeedsResourceFactory(FeatureGeneratorFactory):

    def create(self):
        return FixedFeatureGenerator(f"res={len(self.get_resource('lexicon'))}")

    def get_artifact_serializer_mapping(self):
        return {"lexicon": DictionarySerializer()}


@register_factory("test.FormatErrorOnCreate")
class FormatErrorOnCreateFactory(FeatureGeneratorFactory):

    def create(self):
        raise InvalidFormatError("cannot create without real data")

    def get_artifact_serializer_mapping(self):
        return {"on-create": DictionarySerializer()}


@register_factory("test.FormatErrorOnMapping")
class FormatErrorOnMappingFactory(FeatureGeneratorFactory):

    def create(self):
        return FixedFeatureGenerator("mapping")

    def get_artifact_serializer_mapping(self):
        raise InvalidFormatError("mapping needs data")


@register_factory("test.BrokenConstructor")
class BrokenConstructorFactory(FeatureGeneratorFactory):

    def __init__(self):
        super().__init__()
        raise RuntimeError("constructor exploded")

    def create(self):
        return None


@pytest.fixture
def lexicon():
    """Small case-insensitive dictionary of place names."""
    return Dictionary([["New", "York"], ["Berlin"], ["San", "Francisco", "Bay"]])
