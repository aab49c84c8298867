"""Technology record data structures."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Set


def normalize(name: str) -> str:
    """Return the deduplication key for a raw technology name."""
    return name.lower()


@dataclass
class TechnologyRecord:
    """One deduplicated technology entry.

    ``original_name`` keeps the casing of the first occurrence seen in the
    input. ``similar_names`` holds the original names of other records whose
    keys fall within the similarity limit.
    """

    original_name: str
    normalized_key: str = ""
    has_multiple_occurrences: bool = False
    occurrences: int = 1
    similar_names: Set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        if not self.normalized_key:
            self.normalized_key = normalize(self.original_name)

    def mark_occurrence(self) -> None:
        """Record another input line mapping to this key."""
        self.occurrences += 1
        self.has_multiple_occurrences = True

    def add_similar(self, name: str) -> None:
        """Cross-reference another record's original name."""
        self.similar_names.add(name)

    @property
    def is_flagged(self) -> bool:
        """True when the record needs manual review."""
        return self.has_multiple_occurrences or bool(self.similar_names)
