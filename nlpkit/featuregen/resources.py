"""
Resource providers hand pre-built artifacts (dictionaries, word clusters,
embeddings) to the factories that need them.

Descriptors refer to resources by key:

    <generator class="nlpkit.featuregen.DictionaryFeatureGeneratorFactory">
      <str name="dict">person-names</str>
    </generator>

The embedding application decides where "person-names" comes from, usually
a model package, and supplies a provider at build time.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping

from nlpkit.featuregen.errors import ResourceNotFoundError


class FeatureGeneratorResourceProvider(ABC):
    """Resolves a resource key from a descriptor to a loaded artifact."""

    @abstractmethod
    def get_resource(self, key: str) -> Any:
        """
        Return the artifact registered under key.

        Raises:
            ResourceNotFoundError: If no artifact is known under key
        """
        pass


class MappingResourceProvider(FeatureGeneratorResourceProvider):
    """Resource provider backed by a plain mapping of key to artifact."""

    def __init__(self, resources: Mapping[str, Any] | None = None):
        self._resources = dict(resources or {})

    def get_resource(self, key: str) -> Any:
        try:
            return self._resources[key]
        except KeyError:
            raise ResourceNotFoundError(key) from None

    def __contains__(self, key: str) -> bool:
        return key in self._resources

    def __repr__(self) -> str:
        return f"MappingResourceProvider(keys={sorted(self._resources)})"
