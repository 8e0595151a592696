"""
Cart — the store checkout snapshots from and clears on success.
"""

from vitrine.cart._store import CartStore, MemoryCart

__all__ = ("CartStore", "MemoryCart")
