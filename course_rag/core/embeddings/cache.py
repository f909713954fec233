"""
Bounded in-process cache of query embeddings.

Dependencies: None
System role: Avoids repeat provider calls for identical query texts
"""

import threading
from collections import OrderedDict


class EmbeddingCache:
    """
    Exact-text embedding cache with first-in first-out eviction.

    A lookup does not refresh an entry: when a new key is added at capacity
    the entry inserted earliest is dropped.
    """

    def __init__(self, max_size: int = 1000) -> None:
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self.max_size = max_size
        self._entries: OrderedDict[str, list[float]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, text: str) -> list[float] | None:
        with self._lock:
            vector = self._entries.get(text)
        return list(vector) if vector is not None else None

    def put(self, text: str, vector: list[float]) -> None:
        with self._lock:
            if text in self._entries:
                self._entries[text] = list(vector)
                return
            while len(self._entries) >= self.max_size:
                self._entries.popitem(last=False)
            self._entries[text] = list(vector)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"size": len(self._entries), "max_size": self.max_size}

    def __contains__(self, text: object) -> bool:
        with self._lock:
            return text in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
