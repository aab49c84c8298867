"""End-to-end generation: ingest, annotate, render."""

from dataclasses import dataclass, field
from typing import Iterable, List

from .analyzers.similarity import DEFAULT_SIMILARITY_LIMIT, SimilarPair, SimilarityAnalyzer
from .core.registry import TechnologyRegistry, ingest
from .core.reporting import StatementFormatter
from .utils.logging_setup import get_logger

logger = get_logger(__name__)


@dataclass
class GenerationResult:
    """Everything produced by one run over a list of lines."""

    registry: TechnologyRegistry
    pairs: List[SimilarPair] = field(default_factory=list)
    statements: List[str] = field(default_factory=list)

    @property
    def diagnostics(self) -> List[str]:
        return [pair.describe() for pair in self.pairs]


def generate(
    lines: Iterable[str],
    limit: int = DEFAULT_SIMILARITY_LIMIT,
    strip_whitespace: bool = False,
) -> GenerationResult:
    """Run the three phases in order over ``lines``.

    Args:
        lines: Raw technology names in input order
        limit: Maximum positional mismatch distance for similar names
        strip_whitespace: Trim lines before keying them

    Returns:
        GenerationResult with statements in sorted-key order
    """
    registry = ingest(lines, strip_whitespace=strip_whitespace)
    pairs = SimilarityAnalyzer(limit).run(registry)
    statements = StatementFormatter().render_all(registry)
    logger.info(
        f"Generated {len(statements)} statements "
        f"({len(registry.duplicated())} duplicated, {len(pairs)} similar pairs)"
    )
    return GenerationResult(registry=registry, pairs=pairs, statements=statements)
