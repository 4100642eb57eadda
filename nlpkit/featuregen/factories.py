"""
Factories for the bundled feature generators.

Importing this module registers every factory under
"nlpkit.featuregen.<FactoryName>", the value descriptors use in the class
attribute. nlpkit.featuregen imports it, so the names are available as soon
as the package is imported.
"""

from nlpkit.featuregen.dictionary import Dictionary, DictionaryFeatureGenerator
from nlpkit.featuregen.errors import InvalidFormatError
from nlpkit.featuregen.factory import FeatureGeneratorFactory, register_factory
from nlpkit.featuregen.generators import CachedFeatureGenerator, WindowFeatureGenerator
from nlpkit.featuregen.serializers import DictionarySerializer
from nlpkit.featuregen.token_generators import (
    BigramNameFeatureGenerator,
    CharacterNgramFeatureGenerator,
    OutcomePriorFeatureGenerator,
    PrefixFeatureGenerator,
    PreviousMapFeatureGenerator,
    SentenceFeatureGenerator,
    SuffixFeatureGenerator,
    TokenClassFeatureGenerator,
    TokenFeatureGenerator,
    TokenPatternFeatureGenerator,
)

FACTORY_PREFIX = "nlpkit.featuregen."


def builtin(cls):
    """Register a bundled factory under nlpkit.featuregen.<ClassName>."""
    return register_factory(FACTORY_PREFIX + cls.__name__)(cls)


# =============================================================================
# Wrapping Generators
# =============================================================================

@builtin
class AggregatedFeatureGeneratorFactory(FeatureGeneratorFactory):
    """
    Groups its generator children.

    Several children already arrive as one aggregate under generator#0, so
    this factory returns whatever is stored there.
    """

    def create(self):
        return self.get_generator()


@builtin
class CachedFeatureGeneratorFactory(FeatureGeneratorFactory):

    def create(self):
        return CachedFeatureGenerator(self.get_generator())


@builtin
class WindowFeatureGeneratorFactory(FeatureGeneratorFactory):
    """
    Parameters:
        prevLength (int): tokens to look back
        nextLength (int): tokens to look ahead
    """

    def create(self):
        prev_length = self.get_int("prevLength")
        next_length = self.get_int("nextLength")
        if prev_length < 0 or next_length < 0:
            raise InvalidFormatError(
                f"window lengths must not be negative, got {prev_length} and {next_length}"
            )
        return WindowFeatureGenerator(self.get_generator(), prev_length, next_length)


# =============================================================================
# Token Generators
# =============================================================================

@builtin
class TokenFeatureGeneratorFactory(FeatureGeneratorFactory):

    def create(self):
        return TokenFeatureGenerator(self.get_bool("lowercase", True))


@builtin
class TokenClassFeatureGeneratorFactory(FeatureGeneratorFactory):

    def create(self):
        return TokenClassFeatureGenerator(self.get_bool("wordAndClass", True))


@builtin
class TokenPatternFeatureGeneratorFactory(FeatureGeneratorFactory):

    def create(self):
        return TokenPatternFeatureGenerator()


@builtin
class PrefixFeatureGeneratorFactory(FeatureGeneratorFactory):

    def create(self):
        length = self.get_int("length", 4)
        if length < 1:
            raise InvalidFormatError(f"prefix length must be at least 1, got {length}")
        return PrefixFeatureGenerator(length)


@builtin
class SuffixFeatureGeneratorFactory(FeatureGeneratorFactory):

    def create(self):
        length = self.get_int("length", 4)
        if length < 1:
            raise InvalidFormatError(f"suffix length must be at least 1, got {length}")
        return SuffixFeatureGenerator(length)


@builtin
class CharacterNgramFeatureGeneratorFactory(FeatureGeneratorFactory):

    def create(self):
        min_length = self.get_int("min", 2)
        max_length = self.get_int("max", 5)
        if min_length < 1 or max_length < min_length:
            raise InvalidFormatError(f"invalid n-gram range {min_length}..{max_length}")
        return CharacterNgramFeatureGenerator(min_length, max_length)


@builtin
class SentenceFeatureGeneratorFactory(FeatureGeneratorFactory):

    def create(self):
        return SentenceFeatureGenerator(self.get_bool("begin", True), self.get_bool("end", False))


@builtin
class BigramNameFeatureGeneratorFactory(FeatureGeneratorFactory):

    def create(self):
        return BigramNameFeatureGenerator()


@builtin
class OutcomePriorFeatureGeneratorFactory(FeatureGeneratorFactory):

    def create(self):
        return OutcomePriorFeatureGenerator()


@builtin
class PreviousMapFeatureGeneratorFactory(FeatureGeneratorFactory):

    def create(self):
        return PreviousMapFeatureGenerator()


# =============================================================================
# Resource-backed Generators
# =============================================================================

@builtin
class DictionaryFeatureGeneratorFactory(FeatureGeneratorFactory):
    """
    Parameters:
        dict (str): resource key of the Dictionary
        prefix (str): feature prefix, defaults to the resource key
    """

    def create(self):
        key = self.get_str("dict")
        dictionary = self.get_resource(key)
        if not isinstance(dictionary, Dictionary):
            raise InvalidFormatError(
                f"resource '{key}' must be a Dictionary, got {type(dictionary).__name__}"
            )
        return DictionaryFeatureGenerator(dictionary, self.get_str("prefix", key))

    def get_artifact_serializer_mapping(self):
        return {self.get_str("dict"): DictionarySerializer()}
