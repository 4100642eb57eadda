"""
Tests for the feature generators.

Each generator is tested in isolation; the aggregate, cache and window
wrappers are tested with small fake generators.
"""

import pytest

from nlpkit.featuregen import (
    AdaptiveDataClearError,
    AdaptiveFeatureGenerator,
    AggregatedFeatureGenerator,
    CachedFeatureGenerator,
    DictionaryFeatureGenerator,
    WindowFeatureGenerator,
)
from nlpkit.featuregen.token_generators import (
    BigramNameFeatureGenerator,
    CharacterNgramFeatureGenerator,
    PrefixFeatureGenerator,
    PreviousMapFeatureGenerator,
    SentenceFeatureGenerator,
    SuffixFeatureGenerator,
    TokenClassFeatureGenerator,
    TokenFeatureGenerator,
    TokenPatternFeatureGenerator,
    token_class,
)

TOKENS = ["Mr", "Smith", "visited", "IBM", "in", "1999", "."]


class Emit(AdaptiveFeatureGenerator):
    """Emits fixed features and records lifecycle calls."""

    def __init__(self, *features, fail_on_clear=False):
        self.features = list(features)
        self.fail_on_clear = fail_on_clear
        self.calls = 0
        self.cleared = 0
        self.updates = []

    def create_features(self, features, tokens, index, previous_outcomes=None):
        self.calls += 1
        features.extend(self.features)

    def update_adaptive_data(self, tokens, outcomes):
        self.updates.append((list(tokens), list(outcomes)))

    def clear_adaptive_data(self):
        self.cleared += 1
        if self.fail_on_clear:
            raise RuntimeError(f"{self.features} cannot clear")


class TestAggregatedFeatureGenerator:
    """Tests for AggregatedFeatureGenerator."""

    def test_concatenates_in_order(self):
        """Features are the children's features, in child order."""
        aggregate = AggregatedFeatureGenerator(Emit("a1", "a2"), Emit(), Emit("c"))

        assert aggregate.generate(TOKENS, 0) == ["a1", "a2", "c"]

    def test_appends_to_existing_features(self):
        """create_features() extends the list it is given."""
        features = ["existing"]

        AggregatedFeatureGenerator(Emit("x")).create_features(features, TOKENS, 0)

        assert features == ["existing", "x"]

    def test_update_is_forwarded(self):
        """Adaptive updates reach every child."""
        first, second = Emit(), Emit()

        AggregatedFeatureGenerator(first, second).update_adaptive_data(["a"], ["O"])

        assert first.updates == [(["a"], ["O"])]
        assert second.updates == [(["a"], ["O"])]

    def test_clear_reaches_all_children_despite_failures(self):
        """A child failing to clear does not stop the others; failures are reported together."""
        first = Emit("1", fail_on_clear=True)
        second = Emit("2")
        third = Emit("3", fail_on_clear=True)
        aggregate = AggregatedFeatureGenerator(first, second, third)

        with pytest.raises(AdaptiveDataClearError) as excinfo:
            aggregate.clear_adaptive_data()

        assert (first.cleared, second.cleared, third.cleared) == (1, 1, 1)
        assert [generator for generator, _ in excinfo.value.failures] == [first, third]
        assert all(isinstance(e, RuntimeError) for _, e in excinfo.value.failures)

    def test_clear_without_failures(self):
        """Clearing succeeds silently when every child succeeds."""
        child = Emit()

        AggregatedFeatureGenerator(child).clear_adaptive_data()

        assert child.cleared == 1

    def test_rejects_empty_and_none(self):
        """At least one real generator is required."""
        with pytest.raises(ValueError):
            AggregatedFeatureGenerator()
        with pytest.raises(ValueError):
            AggregatedFeatureGenerator(Emit(), None)


class TestCachedFeatureGenerator:
    """Tests for CachedFeatureGenerator."""

    def test_repeated_calls_hit_the_cache(self):
        """The wrapped generator runs once per token of the same sentence."""
        inner = Emit("f")
        cached = CachedFeatureGenerator(inner)

        assert cached.generate(TOKENS, 1) == ["f"]
        assert cached.generate(TOKENS, 1) == ["f"]

        assert inner.calls == 1
        assert (cached.hits, cached.misses) == (1, 1)

    def test_new_sentence_flushes(self):
        """A different token sequence is not served from the cache."""
        inner = Emit("f")
        cached = CachedFeatureGenerator(inner)

        cached.generate(TOKENS, 0)
        cached.generate(list(TOKENS), 0)

        assert inner.calls == 2

    def test_cached_list_is_not_shared(self):
        """Callers mutating their feature list cannot corrupt the cache."""
        cached = CachedFeatureGenerator(Emit("f"))

        first = cached.generate(TOKENS, 0)
        first.append("mutated")

        assert cached.generate(TOKENS, 0) == ["f"]

    def test_clear_is_forwarded(self):
        """Clearing empties the cache and clears the wrapped generator."""
        inner = Emit("f")
        cached = CachedFeatureGenerator(inner)
        cached.generate(TOKENS, 0)

        cached.clear_adaptive_data()
        cached.generate(TOKENS, 0)

        assert inner.cleared == 1
        assert inner.calls == 2


class TestWindowFeatureGenerator:
    """Tests for WindowFeatureGenerator."""

    def test_window_prefixes(self):
        """Neighbour features are prefixed with their distance."""
        window = WindowFeatureGenerator(TokenFeatureGenerator(), 2, 1)

        assert window.generate(TOKENS, 2) == ["w=visited", "p1w=smith", "p2w=mr", "n1w=ibm"]

    def test_window_stops_at_sentence_edges(self):
        """No features are produced for positions outside the sentence."""
        window = WindowFeatureGenerator(TokenFeatureGenerator(), 2, 2)

        assert window.generate(["only"], 0) == ["w=only"]

    def test_negative_window_rejected(self):
        """Window sizes must be zero or more."""
        with pytest.raises(ValueError):
            WindowFeatureGenerator(TokenFeatureGenerator(), -1, 0)


class TestTokenClass:
    """Tests for token_class()."""

    @pytest.mark.parametrize("token, expected", [
        ("the", "lc"),
        ("IBM", "ac"),
        ("A", "sc"),
        ("Smith", "ic"),
        ("McDonald", "other"),
        ("99", "2d"),
        ("1999", "4d"),
        ("123456", "num"),
        ("A4", "an"),
        ("10-12", "dd"),
        ("3/4", "ds"),
        ("1,000", "dc"),
        ("3.14", "dp"),
        ("-", "other"),
        ("", "other"),
    ])
    def test_classes(self, token, expected):
        assert token_class(token) == expected


class TestTokenGenerators:
    """Tests for the surface-form generators."""

    def test_token(self):
        assert TokenFeatureGenerator().generate(TOKENS, 1) == ["w=smith"]
        assert TokenFeatureGenerator(lowercase=False).generate(TOKENS, 1) == ["w=Smith"]

    def test_token_class(self):
        assert TokenClassFeatureGenerator().generate(TOKENS, 3) == ["wc=ac", "w&c=ibm,ac"]
        assert TokenClassFeatureGenerator(False).generate(TOKENS, 3) == ["wc=ac"]

    def test_token_pattern(self):
        assert TokenPatternFeatureGenerator().generate(["McDonald's"], 0) == ["st=XxXx'x"]

    def test_prefix_and_suffix(self):
        assert PrefixFeatureGenerator(2).generate(TOKENS, 1) == ["pre=S", "pre=Sm"]
        assert SuffixFeatureGenerator(2).generate(TOKENS, 4) == ["suf=n", "suf=in"]

    def test_short_tokens_limit_affixes(self):
        """Affixes are never longer than the token."""
        assert PrefixFeatureGenerator(4).generate(TOKENS, 6) == ["pre=."]

    def test_character_ngrams(self):
        assert CharacterNgramFeatureGenerator(2, 3).generate(["Abc"], 0) == ["ng=ab", "ng=bc", "ng=abc"]

    def test_sentence(self):
        generator = SentenceFeatureGenerator(True, True)

        assert generator.generate(TOKENS, 0) == ["S=begin"]
        assert generator.generate(TOKENS, 6) == ["S=end"]
        assert generator.generate(TOKENS, 3) == []

    def test_bigram(self):
        assert BigramNameFeatureGenerator().generate(TOKENS, 1) == ["pw,w=mr,smith", "w,nw=smith,visited"]
        assert BigramNameFeatureGenerator().generate(TOKENS, 0) == ["w,nw=mr,smith"]


class TestPreviousMapFeatureGenerator:
    """Tests for the adaptive previous-outcome generator."""

    def test_remembers_outcomes_until_cleared(self):
        generator = PreviousMapFeatureGenerator()
        assert generator.generate(TOKENS, 1) == ["pd=None"]

        generator.update_adaptive_data(["Smith"], ["person-start"])
        assert generator.generate(TOKENS, 1) == ["pd=person-start"]

        generator.clear_adaptive_data()
        assert generator.generate(TOKENS, 1) == ["pd=None"]

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            PreviousMapFeatureGenerator().update_adaptive_data(["a", "b"], ["O"])


class TestDictionaryFeatureGenerator:
    """Tests for DictionaryFeatureGenerator."""

    def test_longest_match_wins(self, lexicon):
        """Tokens inside a multi-token entry are marked by position."""
        generator = DictionaryFeatureGenerator(lexicon, "loc")
        tokens = ["in", "san", "francisco", "bay", "today"]

        assert generator.generate(tokens, 1) == ["loc:start"]
        assert generator.generate(tokens, 2) == ["loc:cont"]
        assert generator.generate(tokens, 3) == ["loc:cont"]
        assert generator.generate(tokens, 4) == []

    def test_single_token_entry(self, lexicon):
        generator = DictionaryFeatureGenerator(lexicon)

        assert generator.generate(["BERLIN"], 0) == ["dict:start"]
