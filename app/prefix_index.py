# app/prefix_index.py
"""In-memory prefix tree over event names for autocomplete lookups.

The tree is never edited after a refresh: `PrefixIndexHolder.rebuild` builds a
complete new `PrefixIndex` and only then replaces the published one, so a
lookup always runs against a fully built tree.
"""
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Set

from .utils import logger


@dataclass
class PrefixNode:
    children: Dict[str, "PrefixNode"] = field(default_factory=dict)
    is_terminal: bool = False
    listing_ids: Set[str] = field(default_factory=set)


class PrefixIndex:
    """Maps lowercase event-name prefixes to listing ids."""

    def __init__(self):
        self.root = PrefixNode()

    @classmethod
    def from_entries(cls, entries: Iterable[Mapping]) -> "PrefixIndex":
        """Build an index from ``[{"name": ..., "ids": [...]}, ...]`` rows.

        Rows without a name and falsy ids are skipped.
        """
        index = cls()
        for entry in entries:
            name = entry.get("name")
            if not name:
                continue
            for listing_id in entry.get("ids") or ():
                if listing_id:
                    index.insert(name, listing_id)
        return index

    def insert(self, name: str, listing_id: str) -> None:
        node = self.root
        for ch in name.lower():
            child = node.children.get(ch)
            if child is None:
                child = node.children[ch] = PrefixNode()
            node = child
        node.is_terminal = True
        node.listing_ids.add(listing_id)

    def find_by_prefix(self, prefix: str) -> Set[str]:
        """Return the ids of every listing whose event name starts with `prefix`.

        A miss returns an empty set. The empty prefix matches everything.
        """
        node = self.root
        for ch in prefix.lower():
            node = node.children.get(ch)
            if node is None:
                return set()
        return self._collect(node)

    @staticmethod
    def _collect(node: PrefixNode) -> Set[str]:
        found: Set[str] = set()
        stack = [node]
        while stack:
            current = stack.pop()
            found |= current.listing_ids
            stack.extend(current.children.values())
        return found


class PrefixIndexHolder:
    """Process-wide reference to the current `PrefixIndex` snapshot."""

    def __init__(self):
        self._lock = threading.Lock()
        self._index = PrefixIndex()
        self._version = 0

    @property
    def index(self) -> PrefixIndex:
        return self._index

    @property
    def version(self) -> int:
        return self._version

    def rebuild(self, entries: Iterable[Mapping]) -> int:
        entries = list(entries)
        fresh = PrefixIndex.from_entries(entries)
        with self._lock:
            self._index = fresh
            self._version += 1
            version = self._version
        logger.info("Prefix index rebuilt: version=%d names=%d", version, len(entries))
        return version

    def lookup(self, prefix: str) -> Set[str]:
        return self._index.find_by_prefix(prefix)


event_index = PrefixIndexHolder()
