"""
Token dictionaries and the feature generator that looks tokens up in them.
"""

from typing import Iterable, Iterator, Sequence

from nlpkit.featuregen.generators import AdaptiveFeatureGenerator


class Dictionary:
    """
    A set of entries, each entry a sequence of tokens ("New York" is
    ("New", "York")).

    Attributes:
        case_sensitive: If False, lookups ignore case
        max_entry_length: Token count of the longest entry
    """

    def __init__(self, entries: Iterable[Sequence[str]] = (), case_sensitive: bool = False):
        self.case_sensitive = case_sensitive
        self._entries: dict[tuple[str, ...], tuple[str, ...]] = {}
        self.max_entry_length = 0
        for entry in entries:
            self.add(entry)

    def _key(self, tokens: Sequence[str]) -> tuple[str, ...]:
        if self.case_sensitive:
            return tuple(tokens)
        return tuple(token.lower() for token in tokens)

    def add(self, entry: Sequence[str]) -> None:
        if isinstance(entry, str):
            entry = entry.split()
        entry = tuple(entry)
        if not entry:
            raise ValueError("Dictionary entries must contain at least one token")
        self._entries.setdefault(self._key(entry), entry)
        self.max_entry_length = max(self.max_entry_length, len(entry))

    def contains(self, tokens: Sequence[str]) -> bool:
        return self._key(tokens) in self._entries

    def __contains__(self, tokens) -> bool:
        if isinstance(tokens, str):
            tokens = tokens.split()
        return self.contains(tokens)

    def __iter__(self) -> Iterator[tuple[str, ...]]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Dictionary(entries={len(self)}, case_sensitive={self.case_sensitive})"


class DictionaryFeatureGenerator(AdaptiveFeatureGenerator):
    """
    Marks tokens covered by a dictionary entry, using BIO-style positions.

    For the longest entry covering the token, emits <prefix>:<pos> where pos
    is "start" for the first token of the match and "cont" otherwise.
    """

    def __init__(self, dictionary: Dictionary, prefix: str = "dict"):
        self.dictionary = dictionary
        self.prefix = prefix

    def create_features(self, features, tokens, index, previous_outcomes=None):
        max_length = self.dictionary.max_entry_length
        for length in range(min(max_length, len(tokens)), 0, -1):
            for start in range(max(0, index - length + 1), min(index, len(tokens) - length) + 1):
                if self.dictionary.contains(tokens[start:start + length]):
                    position = "start" if start == index else "cont"
                    features.append(f"{self.prefix}:{position}")
                    return

    def __repr__(self) -> str:
        return f"DictionaryFeatureGenerator({self.dictionary!r}, prefix={self.prefix!r})"
