"""Near-duplicate detection using positional mismatch distance.

Two normalized keys are compared position by position: every index where
the characters differ counts as one, and the trailing characters of the
longer key count as one each. This is a Hamming distance extended to
unequal lengths, not an edit distance; an insertion early in a key shifts
every later position and is penalised accordingly.

The distance is never smaller than the length difference, so keys are
grouped by length and only groups whose lengths are within the limit are
compared. Detected pairs are reported in sorted-key comparison order: by
the earlier key, then by the later one.
"""

from __future__ import annotations
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..core.registry import TechnologyRegistry
from ..utils.logging_setup import get_logger, log_operation

logger = get_logger(__name__)

DEFAULT_SIMILARITY_LIMIT = 2

# Never a valid code point, so padding only ever matches padding.
_PAD = -1


def positional_mismatch_count(a: str, b: str) -> int:
    """Length difference plus per-position mismatches over the shared prefix."""
    distance = abs(len(b) - len(a))
    for ca, cb in zip(a, b):
        if ca != cb:
            distance += 1
    return distance


def encode_keys(keys: Sequence[str], width: Optional[int] = None) -> np.ndarray:
    """Encode keys as a padded matrix of code points, one row per key.

    Comparing two rows element-wise counts exactly the positional mismatch
    distance between the keys: positions past the shorter key hold padding
    on one side and a character on the other.
    """
    if width is None:
        width = max((len(k) for k in keys), default=0)
    matrix = np.full((len(keys), width), _PAD, dtype=np.int32)
    for row, key in enumerate(keys):
        if key:
            matrix[row, :len(key)] = np.fromiter(map(ord, key), dtype=np.int32, count=len(key))
    return matrix


def group_by_length(keys: Sequence[str]) -> Dict[int, List[int]]:
    """Indices into ``keys`` grouped by key length, each group ascending."""
    groups: Dict[int, List[int]] = defaultdict(list)
    for index, key in enumerate(keys):
        groups[len(key)].append(index)
    return dict(groups)


@dataclass(frozen=True)
class SimilarPair:
    """Two records whose keys are within the similarity limit."""

    key_a: str
    key_b: str
    name_a: str
    name_b: str
    distance: int

    def describe(self) -> str:
        """Diagnostic line for this pair."""
        return f"similar: {self.name_a!r} ~ {self.name_b!r} (distance {self.distance})"


class SimilarityAnalyzer:
    """Annotates registry records with the names of near-duplicate records."""

    name = "similarity"

    def __init__(self, limit: int = DEFAULT_SIMILARITY_LIMIT):
        self.limit = limit

    def run(self, registry: TechnologyRegistry) -> List[SimilarPair]:
        """Compare every pair of keys and cross-reference similar records.

        Returns:
            Detected pairs in comparison order
        """
        log_operation(logger, "annotate", limit=self.limit, records=len(registry))
        if self.limit < 0:
            logger.warning(f"Negative similarity limit {self.limit}; no pairs can match")

        keys = registry.sorted_keys()
        pairs: List[SimilarPair] = []
        for i, j, distance in self.find_matches(keys):
            pairs.append(self._link(registry, keys[i], keys[j], distance))

        logger.info(f"Found {len(pairs)} similar pairs among {len(keys)} records")
        return pairs

    def find_matches(self, keys: Sequence[str]) -> List[Tuple[int, int, int]]:
        """Index pairs ``(i, j, distance)`` with ``i < j`` and distance within the limit.

        Memory per comparison step is bounded by one length group, so a
        single very long key never widens the comparison of short keys.
        """
        matches: List[Tuple[int, int, int]] = []
        if self.limit < 0 or len(keys) < 2:
            return matches

        groups = group_by_length(keys)
        encoded = {
            length: encode_keys([keys[i] for i in indices], width=length)
            for length, indices in groups.items()
        }
        lengths = sorted(groups)

        for short in lengths:
            for long in lengths:
                if long < short or long - short > self.limit:
                    continue
                same = long == short
                candidates = encoded[long]
                for row, i in enumerate(groups[short]):
                    probe = encoded[short][row]
                    if not same:
                        probe = np.pad(probe, (0, long - short), constant_values=_PAD)
                    start = row + 1 if same else 0
                    distances = np.count_nonzero(candidates[start:] != probe, axis=1)
                    for offset in np.flatnonzero(distances <= self.limit):
                        j = groups[long][start + int(offset)]
                        matches.append((min(i, j), max(i, j), int(distances[offset])))

        matches.sort()
        return matches

    def _link(self, registry: TechnologyRegistry, key_a: str, key_b: str,
              distance: int) -> SimilarPair:
        record_a = registry[key_a]
        record_b = registry[key_b]
        record_a.add_similar(record_b.original_name)
        record_b.add_similar(record_a.original_name)

        pair = SimilarPair(
            key_a=key_a,
            key_b=key_b,
            name_a=record_a.original_name,
            name_b=record_b.original_name,
            distance=distance,
        )
        logger.debug(pair.describe())
        return pair


def annotate(registry: TechnologyRegistry, limit: int = DEFAULT_SIMILARITY_LIMIT) -> List[SimilarPair]:
    """Annotate ``registry`` in place; see SimilarityAnalyzer.run."""
    return SimilarityAnalyzer(limit).run(registry)
