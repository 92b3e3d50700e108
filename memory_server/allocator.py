# allocator.py
# Native memory blocks backed by the C allocator, released through finalizers

import ctypes
import ctypes.util
import gc
import logging
import weakref

logger = logging.getLogger(__name__)

MIB = 1024 * 1024
SIZE_MAX = ctypes.c_size_t(-1).value

_libc = ctypes.CDLL(ctypes.util.find_library("c"))
_libc.malloc.argtypes = [ctypes.c_size_t]
_libc.malloc.restype = ctypes.c_void_p
_libc.free.argtypes = [ctypes.c_void_p]
_libc.free.restype = None

# glibc only
_malloc_trim = getattr(_libc, "malloc_trim", None)
if _malloc_trim is not None:
    _malloc_trim.argtypes = [ctypes.c_size_t]
    _malloc_trim.restype = ctypes.c_int


class AllocationError(MemoryError):
    """Raised when the C allocator refuses a request."""

    def __init__(self, size):
        super().__init__(f"could not allocate {size} MiB")
        self.size = size


def _free(address, size):
    logger.info(f"freeing memory {size} MiB at {address:#x}")
    _libc.free(address)


class Allocation:
    """One block of `size` MiB obtained from malloc.

    The block is freed exactly once: either by `release()` or, if the object
    is dropped without being released, by its finalizer when it is collected
    (or at interpreter exit).
    """

    def __init__(self, size, malloc=None):
        if size < 0:
            raise ValueError("size must be non-negative")
        self.size = size
        self.address = None
        self._finalizer = None
        if size == 0:
            return

        if size * MIB > SIZE_MAX:
            raise AllocationError(size)
        address = (malloc or _libc.malloc)(size * MIB)
        if not address:
            raise AllocationError(size)
        self.address = address
        self._finalizer = weakref.finalize(self, _free, address, size)
        logger.info(f"allocated {size} MiB at {address:#x}")

    @property
    def released(self):
        return self._finalizer is None or not self._finalizer.alive

    def release(self):
        if not self.released:
            self._finalizer()

    def __repr__(self):
        return f"Allocation(size={self.size}, address={self.address})"


def reclaim():
    """Best-effort pass returning freed heap memory to the OS."""
    collected = gc.collect()
    trimmed = bool(_malloc_trim(0)) if _malloc_trim is not None else False
    logger.debug(f"reclamation pass: {collected} objects collected, trimmed={trimmed}")
    return trimmed
