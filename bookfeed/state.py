"""Mutable state of one feed session."""
from dataclasses import dataclass, field
from typing import List, Optional, Set

from bookfeed.models import BookRecord, FilterSignature
from bookfeed.parse import deduplicate_books


@dataclass
class FeedState:
    """
    Accumulated results for the active browsing context.

    ``items`` only grows while the signature stays the same and holds each
    record id at most once. ``offset`` is the start index of the next page.
    """
    items: List[BookRecord] = field(default_factory=list)
    offset: int = 0
    in_flight: bool = False
    active_signature: Optional[FilterSignature] = None
    exhausted: bool = False
    _seen_ids: Set[str] = field(default_factory=set, repr=False)

    def reset(self, signature: FilterSignature):
        """Switch to a new signature, dropping everything from the old one."""
        self.active_signature = signature
        self.items = []
        self._seen_ids = set()
        self.offset = 0
        self.in_flight = False
        self.exhausted = False

    def append_page(self, records: List[BookRecord], next_offset: int) -> int:
        """
        Append a fetched page and advance the offset.

        Args:
            records: Normalized records in received order
            next_offset: Offset of the following page

        Returns:
            Number of records actually added after deduplication
        """
        fresh = [r for r in deduplicate_books(records) if r.id not in self._seen_ids]
        self.items.extend(fresh)
        self._seen_ids.update(r.id for r in fresh)
        self.offset = next_offset
        self.in_flight = False
        if not records:
            self.exhausted = True
        return len(fresh)
