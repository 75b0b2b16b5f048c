import logging
from typing import Any, Dict, Hashable, Iterator

logger = logging.getLogger(__name__)


class DuplicationManager:
    """
    Visited set of one crawl, keyed by canonical URL

    claim() is a plain synchronous check-and-insert. Workers only run
    between awaits on a single event loop, so two workers can never both
    claim the same key.
    """

    def __init__(self):
        self._records: Dict[Hashable, Any] = {}

        # Statistics
        self.stats = {
            'references_seen': 0,
            'duplicate_references': 0,
            'unique_keys': 0
        }

    def claim(self, key: Hashable, record: Any) -> bool:
        """
        Register record under key unless the key is already known

        Returns:
            True if the caller now owns the key and must schedule it
        """
        self.stats['references_seen'] += 1
        if key in self._records:
            self.stats['duplicate_references'] += 1
            return False
        self._records[key] = record
        self.stats['unique_keys'] += 1
        return True

    def __contains__(self, key: Hashable) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Any]:
        """Records in the order their keys were first claimed"""
        return iter(self._records.values())

    def get_deduplication_stats(self) -> Dict[str, Any]:
        stats = self.stats.copy()
        stats['dedup_rate'] = stats['duplicate_references'] / max(stats['references_seen'], 1) * 100
        return stats
