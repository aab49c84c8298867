"""Analyzers that annotate a technology registry."""

from .similarity import (
    DEFAULT_SIMILARITY_LIMIT,
    SimilarPair,
    SimilarityAnalyzer,
    annotate,
    positional_mismatch_count,
)

__all__ = [
    "DEFAULT_SIMILARITY_LIMIT",
    "SimilarPair",
    "SimilarityAnalyzer",
    "annotate",
    "positional_mismatch_count",
]
