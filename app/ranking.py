# app/ranking.py
"""Max-heap used to order listing search results.

Boosted listings (higher ``priority``) come first; listings with the same
priority are ordered newest first by their creation timestamp.
"""
from typing import Any, Iterable, List, Mapping, Optional, Tuple


def ranking_key(listing: Any) -> Tuple[Any, Any]:
    """Return the (priority, created_at) pair a listing is ranked by.

    Accepts ORM objects as well as dicts keyed by the JSON field names.
    """
    if isinstance(listing, Mapping):
        return listing["priority"], listing["createdAt"]
    return listing.priority, listing.created_at


def outranks(a: Any, b: Any) -> bool:
    pa, ca = ranking_key(a)
    pb, cb = ranking_key(b)
    if pa != pb:
        return pa > pb
    return ca > cb


class ListingHeap:
    def __init__(self):
        self._heap: List[Any] = []

    def __len__(self):
        return len(self._heap)

    def is_empty(self) -> bool:
        return not self._heap

    def insert(self, listing: Any) -> None:
        self._heap.append(listing)
        self._sift_up(len(self._heap) - 1)

    def extract_top(self) -> Optional[Any]:
        """Remove and return the highest ranked listing, or None when drained."""
        if not self._heap:
            return None
        last = len(self._heap) - 1
        self._swap(0, last)
        top = self._heap.pop()
        if self._heap:
            self._sift_down(0)
        return top

    def _swap(self, i: int, j: int) -> None:
        self._heap[i], self._heap[j] = self._heap[j], self._heap[i]

    def _sift_up(self, i: int) -> None:
        while i > 0:
            parent = (i - 1) // 2
            if not outranks(self._heap[i], self._heap[parent]):
                break
            self._swap(i, parent)
            i = parent

    def _sift_down(self, i: int) -> None:
        size = len(self._heap)
        while True:
            left, right = 2 * i + 1, 2 * i + 2
            best = i
            if left < size and outranks(self._heap[left], self._heap[best]):
                best = left
            if right < size and outranks(self._heap[right], self._heap[best]):
                best = right
            if best == i:
                return
            self._swap(i, best)
            i = best


def rank_listings(listings: Iterable[Any]) -> List[Any]:
    heap = ListingHeap()
    for listing in listings:
        heap.insert(listing)
    ranked = []
    while not heap.is_empty():
        ranked.append(heap.extract_top())
    return ranked
