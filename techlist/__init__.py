"""techlist - deduplicate technology names into reviewed SQL inserts."""

__version__ = "0.1.0"

from .core.records import TechnologyRecord
from .core.registry import TechnologyRegistry, ingest
from .analyzers.similarity import SimilarityAnalyzer, annotate, positional_mismatch_count
from .core.reporting import StatementFormatter, render
from .pipeline import generate

__all__ = [
    "TechnologyRecord",
    "TechnologyRegistry",
    "ingest",
    "SimilarityAnalyzer",
    "annotate",
    "positional_mismatch_count",
    "StatementFormatter",
    "render",
    "generate",
    "__version__",
]
