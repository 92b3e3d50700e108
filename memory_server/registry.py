# registry.py
# Live allocations keyed by id, guarded by one lock

import threading
from typing import Dict, List, Tuple

from .allocator import Allocation, reclaim


class Registry:
    """Owns the id counter and every live Allocation.

    Each public method takes the lock once, so a counter bump and the matching
    insert are never interleaved with another request.
    """

    def __init__(self, allocation_factory=Allocation):
        self._lock = threading.Lock()
        self._count = 0
        self._allocations: Dict[str, Allocation] = {}
        self._allocation_factory = allocation_factory

    def next_id(self) -> str:
        """Consume an id without registering anything."""
        with self._lock:
            self._count += 1
            return str(self._count)

    def allocate(self, size: int) -> str:
        with self._lock:
            self._count += 1
            allocation_id = str(self._count)
            self._allocations[allocation_id] = self._allocation_factory(size)
            return allocation_id

    def deallocate(self, allocation_id: str) -> bool:
        with self._lock:
            allocation = self._allocations.pop(allocation_id, None)
        if allocation is None:
            return False
        allocation.release()
        reclaim()
        return True

    def clear(self) -> int:
        with self._lock:
            removed = list(self._allocations.values())
            self._allocations.clear()
        for allocation in removed:
            allocation.release()
        reclaim()
        return len(removed)

    def snapshot(self) -> List[Tuple[str, int]]:
        with self._lock:
            entries = [(key, value.size) for key, value in self._allocations.items()]
        return sorted(entries, key=lambda entry: int(entry[0]))

