"""
Base classes for feature generators.

A feature generator looks at one token of a sentence (plus its neighbours
and the outcomes already predicted for earlier tokens) and appends feature
strings to a list. Generators are combined by wrapping: a window generator
wraps a token generator, an aggregate runs several generators side by side.

Design Principles:
- Single Responsibility: Each generator produces one family of features
- Open/Closed: Add new generators without modifying existing code
- Adaptive generators keep per-document state, reset via clear_adaptive_data()

Example:
    class CapitalizedFeatureGenerator(AdaptiveFeatureGenerator):
        def create_features(self, features, tokens, index, previous_outcomes=None):
            if tokens[index][:1].isupper():
                features.append("cap")
"""

from abc import ABC, abstractmethod
from typing import Sequence

from nlpkit.featuregen.errors import AdaptiveDataClearError
from nlpkit.logging_config import debug_log


class AdaptiveFeatureGenerator(ABC):
    """
    Abstract base class for feature generators.

    Subclasses implement create_features(). Generators that learn from the
    document being processed also override update_adaptive_data() and
    clear_adaptive_data(); the defaults do nothing.
    """

    @abstractmethod
    def create_features(
        self,
        features: list[str],
        tokens: Sequence[str],
        index: int,
        previous_outcomes: Sequence[str] | None = None,
    ) -> None:
        """
        Append the features for tokens[index] to features.

        Args:
            features: List the generated features are appended to
            tokens: All tokens of the sentence
            index: Position of the token to generate features for
            previous_outcomes: Outcomes already decided for tokens[:index]
        """
        pass

    def update_adaptive_data(self, tokens: Sequence[str], outcomes: Sequence[str]) -> None:
        """Inform the generator about the outcomes decided for a sentence."""

    def clear_adaptive_data(self) -> None:
        """Forget everything learned via update_adaptive_data()."""

    def generate(
        self,
        tokens: Sequence[str],
        index: int,
        previous_outcomes: Sequence[str] | None = None,
    ) -> list[str]:
        """Return the features for tokens[index] as a new list."""
        features: list[str] = []
        self.create_features(features, tokens, index, previous_outcomes)
        return features

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class AggregatedFeatureGenerator(AdaptiveFeatureGenerator):
    """
    Runs several generators and concatenates their features.

    Children run in the order given. Adaptive-data notifications go to every
    child in the same order; a child that fails to clear does not stop the
    others from being cleared.

    Example:
        aggregate = AggregatedFeatureGenerator(
            TokenFeatureGenerator(),
            TokenClassFeatureGenerator(),
        )
        aggregate.generate(["Hello", "world"], 0)
        # ['w=hello', 'wc=ic', 'w&c=hello,ic']
    """

    def __init__(self, *generators: AdaptiveFeatureGenerator):
        if not generators:
            raise ValueError("AggregatedFeatureGenerator needs at least one generator")
        for generator in generators:
            if generator is None:
                raise ValueError("AggregatedFeatureGenerator does not accept None generators")
        self._generators = tuple(generators)

    @property
    def generators(self) -> tuple[AdaptiveFeatureGenerator, ...]:
        return self._generators

    def create_features(self, features, tokens, index, previous_outcomes=None):
        for generator in self._generators:
            generator.create_features(features, tokens, index, previous_outcomes)

    def update_adaptive_data(self, tokens, outcomes):
        for generator in self._generators:
            generator.update_adaptive_data(tokens, outcomes)

    def clear_adaptive_data(self):
        """
        Clear every child, then report all failures together.

        Raises:
            AdaptiveDataClearError: If one or more children raised
        """
        failures = []
        for generator in self._generators:
            try:
                generator.clear_adaptive_data()
            except Exception as e:
                debug_log(f"[FEATUREGEN] {type(generator).__name__} failed to clear adaptive data: {e}")
                failures.append((generator, e))

        if failures:
            raise AdaptiveDataClearError(failures)

    def __len__(self) -> int:
        return len(self._generators)

    def __repr__(self) -> str:
        return f"AggregatedFeatureGenerator({', '.join(repr(g) for g in self._generators)})"


class CachedFeatureGenerator(AdaptiveFeatureGenerator):
    """
    Remembers the features of the sentence currently being processed.

    Trainers and decoders ask for the same token several times (once per
    candidate outcome sequence). The cache is keyed on the identity of the
    token sequence, so a new sentence flushes it. Previous outcomes are not
    part of the key; only wrap generators that ignore them.
    """

    def __init__(self, generator: AdaptiveFeatureGenerator):
        self.generator = generator
        self._cached_tokens = None
        self._cache: dict[int, list[str]] = {}
        self.hits = 0
        self.misses = 0

    def create_features(self, features, tokens, index, previous_outcomes=None):
        if tokens is not self._cached_tokens:
            self._cached_tokens = tokens
            self._cache.clear()

        cached = self._cache.get(index)
        if cached is None:
            self.misses += 1
            cached = []
            self.generator.create_features(cached, tokens, index, previous_outcomes)
            self._cache[index] = cached
        else:
            self.hits += 1

        features.extend(cached)

    def update_adaptive_data(self, tokens, outcomes):
        self.generator.update_adaptive_data(tokens, outcomes)

    def clear_adaptive_data(self):
        self._cached_tokens = None
        self._cache.clear()
        self.generator.clear_adaptive_data()

    def __repr__(self) -> str:
        return f"CachedFeatureGenerator({self.generator!r}, hits={self.hits}, misses={self.misses})"


class WindowFeatureGenerator(AdaptiveFeatureGenerator):
    """
    Applies a generator to the tokens around the current one.

    Features from the current token are kept as is; features from the token
    n positions before are prefixed "p{n}", from n positions after "n{n}".
    """

    def __init__(
        self,
        generator: AdaptiveFeatureGenerator,
        prev_window_size: int = 2,
        next_window_size: int = 2,
    ):
        if prev_window_size < 0 or next_window_size < 0:
            raise ValueError("Window sizes must not be negative")
        self.generator = generator
        self.prev_window_size = prev_window_size
        self.next_window_size = next_window_size

    def create_features(self, features, tokens, index, previous_outcomes=None):
        self.generator.create_features(features, tokens, index, previous_outcomes)

        for offset in range(1, self.prev_window_size + 1):
            position = index - offset
            if position < 0:
                break
            window_features: list[str] = []
            self.generator.create_features(window_features, tokens, position, previous_outcomes)
            features.extend(f"p{offset}{feature}" for feature in window_features)

        for offset in range(1, self.next_window_size + 1):
            position = index + offset
            if position >= len(tokens):
                break
            window_features = []
            self.generator.create_features(window_features, tokens, position, previous_outcomes)
            features.extend(f"n{offset}{feature}" for feature in window_features)

    def update_adaptive_data(self, tokens, outcomes):
        self.generator.update_adaptive_data(tokens, outcomes)

    def clear_adaptive_data(self):
        self.generator.clear_adaptive_data()

    def __repr__(self) -> str:
        return (f"WindowFeatureGenerator({self.generator!r}, prev={self.prev_window_size}, "
                f"next={self.next_window_size})")
