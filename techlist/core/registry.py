"""Registry of deduplicated technology records keyed by normalized name."""

from __future__ import annotations
from typing import Dict, Iterable, Iterator, List, Optional

from .records import TechnologyRecord, normalize
from ..utils.logging_setup import get_logger

logger = get_logger(__name__)


class TechnologyRegistry:
    """Mapping of normalized key to TechnologyRecord.

    Holds exactly one record per key. The first occurrence of a key decides
    the record's casing; later occurrences only mark it as duplicated.
    """

    def __init__(self, strip_whitespace: bool = False):
        self.strip_whitespace = strip_whitespace
        self._records: Dict[str, TechnologyRecord] = {}

    def add(self, line: str) -> TechnologyRecord:
        """Ingest a single raw line and return the record it maps to."""
        if self.strip_whitespace:
            line = line.strip()
        key = normalize(line)
        record = self._records.get(key)
        if record is None:
            record = TechnologyRecord(original_name=line, normalized_key=key)
            self._records[key] = record
        else:
            record.mark_occurrence()
            logger.debug(f"Repeated entry {line!r} for key {key!r}")
        return record

    def get(self, key: str) -> Optional[TechnologyRecord]:
        return self._records.get(key)

    def sorted_keys(self) -> List[str]:
        """Keys in ascending lexicographic order."""
        return sorted(self._records)

    def records(self) -> List[TechnologyRecord]:
        """Records in sorted-key order."""
        return [self._records[key] for key in self.sorted_keys()]

    def duplicated(self) -> List[TechnologyRecord]:
        return [r for r in self.records() if r.has_multiple_occurrences]

    def flagged(self) -> List[TechnologyRecord]:
        return [r for r in self.records() if r.is_flagged]

    def __getitem__(self, key: str) -> TechnologyRecord:
        return self._records[key]

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)


def ingest(lines: Iterable[str], strip_whitespace: bool = False) -> TechnologyRegistry:
    """Build a registry from raw input lines.

    Args:
        lines: Raw technology names in input order
        strip_whitespace: Trim surrounding whitespace before keying

    Returns:
        Registry with one record per distinct lowercase line
    """
    registry = TechnologyRegistry(strip_whitespace=strip_whitespace)
    total = 0
    for line in lines:
        registry.add(line)
        total += 1
    logger.info(f"Ingested {total} lines into {len(registry)} records")
    return registry
