"""
nlpkit - trainable NLP models and the feature generation they are built on.

Subpackages:
- nlpkit.featuregen: Descriptor-driven assembly of feature generators
"""

__version__ = "0.3.0"
