"""
Folder id cache keyed by (parent folder id, subfolder name).

Names are compared case-insensitively on the cache side only; Drive's own
name match stays exact.
"""
from typing import Dict, Optional, Protocol, Tuple


class FolderCache(Protocol):
    """Operations the subfolder resolver needs from a cache."""

    def get(self, parent_id: str, name: str) -> Optional[str]:
        ...

    def put(self, parent_id: str, name: str, folder_id: str) -> None:
        ...


def cache_key(parent_id: str, name: str) -> Tuple[str, str]:
    return parent_id, name.lower()


class InMemoryFolderCache:
    """Process-lifetime cache. Entries are never evicted."""

    def __init__(self):
        self._entries: Dict[Tuple[str, str], str] = {}

    def get(self, parent_id: str, name: str) -> Optional[str]:
        return self._entries.get(cache_key(parent_id, name))

    def put(self, parent_id: str, name: str, folder_id: str) -> None:
        self._entries[cache_key(parent_id, name)] = folder_id

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
