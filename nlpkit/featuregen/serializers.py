"""
Artifact serializers read and write the resources referenced by a
descriptor, so that a trained model can be packaged together with the
dictionaries its feature generators were built from.

Factories announce which serializer handles which resource key through
FeatureGeneratorFactory.get_artifact_serializer_mapping().
"""

import json
from abc import ABC, abstractmethod
from typing import IO, Any

from nlpkit.featuregen.dictionary import Dictionary
from nlpkit.featuregen.errors import InvalidFormatError


class ArtifactSerializer(ABC):
    """Reads and writes one kind of artifact from and to binary streams."""

    @abstractmethod
    def create(self, stream: IO[bytes]) -> Any:
        """Read an artifact from stream. The stream is left open."""
        pass

    @abstractmethod
    def serialize(self, artifact: Any, stream: IO[bytes]) -> None:
        """Write artifact to stream. The stream is left open."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"

    def __eq__(self, other) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))


class DictionarySerializer(ArtifactSerializer):
    """
    Stores a Dictionary as UTF-8 JSON:

        {"caseSensitive": false, "entries": [["New", "York"], ["Berlin"]]}
    """

    def create(self, stream: IO[bytes]) -> Dictionary:
        try:
            data = json.loads(stream.read().decode("utf-8"))
            entries = data["entries"]
            case_sensitive = bool(data.get("caseSensitive", False))
        except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError) as e:
            raise InvalidFormatError(f"Dictionary artifact is not valid: {e}") from e

        return Dictionary(entries, case_sensitive=case_sensitive)

    def serialize(self, artifact: Dictionary, stream: IO[bytes]) -> None:
        data = {
            "caseSensitive": artifact.case_sensitive,
            "entries": [list(entry) for entry in artifact],
        }
        stream.write(json.dumps(data, ensure_ascii=False, indent=2).encode("utf-8"))
