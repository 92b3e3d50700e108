from .allocator import Allocation, AllocationError, reclaim
from .app import DEFAULT_GREETING, create_app
from .registry import Registry

__all__ = [
    "Allocation",
    "AllocationError",
    "DEFAULT_GREETING",
    "Registry",
    "create_app",
    "reclaim",
]
