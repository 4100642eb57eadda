"""
Feature generators that look at the surface form of tokens.

These are the building blocks most descriptors wrap in window and cache
generators: the token itself, its shape class, prefixes and suffixes,
character n-grams, and sentence position markers.
"""

import re

from nlpkit.featuregen.generators import AdaptiveFeatureGenerator

# Shape classes for tokens that are not purely alphabetic, checked in order
_TOKEN_CLASSES = [
    ("2d", re.compile(r"^\d{2}$")),
    ("4d", re.compile(r"^\d{4}$")),
    ("num", re.compile(r"^\d+$")),
    ("dd", re.compile(r"^(?=.*\d)[\d-]+$")),
    ("ds", re.compile(r"^(?=.*\d)[\d/]+$")),
    ("dc", re.compile(r"^(?=.*\d)[\d,]+$")),
    ("dp", re.compile(r"^(?=.*\d)[\d.]+$")),
    ("an", re.compile(r"^(?=.*\d)(?=.*[^\W\d_])\w+$")),
]


def token_class(token: str) -> str:
    """
    Return the shape class of a token.

    Classes:
        lc: all lowercase letters       ac: all capital letters
        sc: a single capital letter     ic: initial capital, rest lowercase
        2d: two digits                  4d: four digits
        num: other digit strings        an: letters and digits
        dd/ds/dc/dp: digits with dashes/slashes/commas/periods
        other: everything else
    """
    if not token:
        return "other"
    if len(token) == 1 and token.isalpha() and token.isupper():
        return "sc"
    if token.isalpha():
        if token.islower():
            return "lc"
        if token.isupper():
            return "ac"
        if token[0].isupper() and token[1:].islower():
            return "ic"
        return "other"
    for name, pattern in _TOKEN_CLASSES:
        if pattern.match(token):
            return name
    return "other"


class TokenFeatureGenerator(AdaptiveFeatureGenerator):
    """Emits the token itself as w=<token>."""

    def __init__(self, lowercase: bool = True):
        self.lowercase = lowercase

    def create_features(self, features, tokens, index, previous_outcomes=None):
        token = tokens[index]
        features.append(f"w={token.lower() if self.lowercase else token}")

    def __repr__(self) -> str:
        return f"TokenFeatureGenerator(lowercase={self.lowercase})"


class TokenClassFeatureGenerator(AdaptiveFeatureGenerator):
    """Emits wc=<class>, and optionally w&c=<token>,<class>."""

    def __init__(self, generate_word_and_class: bool = True):
        self.generate_word_and_class = generate_word_and_class

    def create_features(self, features, tokens, index, previous_outcomes=None):
        token = tokens[index]
        shape = token_class(token)
        features.append(f"wc={shape}")
        if self.generate_word_and_class:
            features.append(f"w&c={token.lower()},{shape}")


class TokenPatternFeatureGenerator(AdaptiveFeatureGenerator):
    """
    Emits a compressed character shape of the token.

    Uppercase letters map to X, lowercase to x, digits to d; runs of the
    same symbol collapse, so "McDonald's" becomes st=XxXx'x.
    """

    def create_features(self, features, tokens, index, previous_outcomes=None):
        shape = []
        for char in tokens[index]:
            if char.isupper():
                symbol = "X"
            elif char.islower():
                symbol = "x"
            elif char.isdigit():
                symbol = "d"
            else:
                symbol = char
            if not shape or shape[-1] != symbol:
                shape.append(symbol)
        features.append(f"st={''.join(shape)}")


class PrefixFeatureGenerator(AdaptiveFeatureGenerator):
    """Emits pre=<prefix> for every prefix up to length characters."""

    def __init__(self, length: int = 4):
        if length < 1:
            raise ValueError("Prefix length must be at least 1")
        self.length = length

    def create_features(self, features, tokens, index, previous_outcomes=None):
        token = tokens[index]
        for size in range(1, min(self.length, len(token)) + 1):
            features.append(f"pre={token[:size]}")


class SuffixFeatureGenerator(AdaptiveFeatureGenerator):
    """Emits suf=<suffix> for every suffix up to length characters."""

    def __init__(self, length: int = 4):
        if length < 1:
            raise ValueError("Suffix length must be at least 1")
        self.length = length

    def create_features(self, features, tokens, index, previous_outcomes=None):
        token = tokens[index]
        for size in range(1, min(self.length, len(token)) + 1):
            features.append(f"suf={token[-size:]}")


class CharacterNgramFeatureGenerator(AdaptiveFeatureGenerator):
    """Emits ng=<gram> for each lowercased character n-gram with min_length <= n <= max_length."""

    def __init__(self, min_length: int = 2, max_length: int = 5):
        if min_length < 1 or max_length < min_length:
            raise ValueError(f"Invalid n-gram range {min_length}..{max_length}")
        self.min_length = min_length
        self.max_length = max_length

    def create_features(self, features, tokens, index, previous_outcomes=None):
        token = tokens[index].lower()
        for size in range(self.min_length, self.max_length + 1):
            for start in range(len(token) - size + 1):
                features.append(f"ng={token[start:start + size]}")


class SentenceFeatureGenerator(AdaptiveFeatureGenerator):
    """Marks the first and/or last token of a sentence."""

    def __init__(self, is_generate_first_word_feature: bool = True,
                 is_generate_last_word_feature: bool = False):
        self.is_generate_first_word_feature = is_generate_first_word_feature
        self.is_generate_last_word_feature = is_generate_last_word_feature

    def create_features(self, features, tokens, index, previous_outcomes=None):
        if self.is_generate_first_word_feature and index == 0:
            features.append("S=begin")
        if self.is_generate_last_word_feature and index == len(tokens) - 1:
            features.append("S=end")


class BigramNameFeatureGenerator(AdaptiveFeatureGenerator):
    """Emits the bigrams formed with the previous and the next token."""

    def create_features(self, features, tokens, index, previous_outcomes=None):
        word = tokens[index].lower()
        if index > 0:
            features.append(f"pw,w={tokens[index - 1].lower()},{word}")
        if index + 1 < len(tokens):
            features.append(f"w,nw={word},{tokens[index + 1].lower()}")


class OutcomePriorFeatureGenerator(AdaptiveFeatureGenerator):
    """Emits a constant feature so the model can learn outcome priors."""

    OUTCOME_PRIOR_FEATURE = "def"

    def create_features(self, features, tokens, index, previous_outcomes=None):
        features.append(self.OUTCOME_PRIOR_FEATURE)


class PreviousMapFeatureGenerator(AdaptiveFeatureGenerator):
    """
    Emits the outcome this token received the last time it was seen.

    The memory is filled by update_adaptive_data() and lives until
    clear_adaptive_data(), usually at the end of a document.
    """

    def __init__(self):
        self._previous_map: dict[str, str] = {}

    def create_features(self, features, tokens, index, previous_outcomes=None):
        features.append(f"pd={self._previous_map.get(tokens[index])}")

    def update_adaptive_data(self, tokens, outcomes):
        if len(tokens) != len(outcomes):
            raise ValueError("tokens and outcomes must have the same length")
        for token, outcome in zip(tokens, outcomes):
            self._previous_map[token] = outcome

    def clear_adaptive_data(self):
        self._previous_map.clear()

    def __len__(self) -> int:
        return len(self._previous_map)
