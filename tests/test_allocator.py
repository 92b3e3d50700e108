import gc

import pytest

from memory_server import allocator
from memory_server.allocator import MIB, Allocation, AllocationError, reclaim


def test_allocate_and_release():
    allocation = Allocation(2)
    assert allocation.size == 2
    assert allocation.address
    assert not allocation.released

    allocation.release()
    assert allocation.released


def test_release_is_idempotent(monkeypatch):
    freed = []
    monkeypatch.setattr(allocator, "_free", lambda address, size: freed.append(address))

    allocation = Allocation(1, malloc=lambda size: 0x1000)
    allocation.release()
    allocation.release()
    assert freed == [0x1000]


def test_zero_size_needs_no_block():
    allocation = Allocation(0)
    assert allocation.address is None
    assert allocation.released
    allocation.release()


def test_requests_scaled_bytes(monkeypatch):
    requested = []
    monkeypatch.setattr(allocator, "_free", lambda address, size: None)

    def fake_malloc(size):
        requested.append(size)
        return 0x2000

    Allocation(3, malloc=fake_malloc).release()
    assert requested == [3 * MIB]


def test_malloc_failure_raises():
    with pytest.raises(AllocationError) as excinfo:
        Allocation(4, malloc=lambda size: None)
    assert excinfo.value.size == 4


def test_oversized_request_raises():
    with pytest.raises(AllocationError):
        Allocation(allocator.SIZE_MAX)


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        Allocation(-1)


def test_dropped_allocation_is_freed_by_finalizer(monkeypatch):
    freed = []
    monkeypatch.setattr(allocator, "_free", lambda address, size: freed.append((address, size)))

    allocation = Allocation(1, malloc=lambda size: 0x3000)
    del allocation
    gc.collect()
    assert freed == [(0x3000, 1)]


def test_reclaim_runs():
    assert isinstance(reclaim(), bool)
