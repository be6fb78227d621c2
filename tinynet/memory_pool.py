"""A page-based memory pool over a simulated address space.

Small requests are carved out of fixed-size pages linked into a list; large
requests get their own block and are tracked on a separate list whose nodes
themselves live in pool memory. Addresses are plain integers; the bytes
behind them can be reached through :meth:`MemoryPool.view`.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Dict, List, Optional

PAGE_SIZE = 4096
MP_ALIGNMENT = 16

# Sizes of the bookkeeping records as laid out in pool memory.
POOL_HEADER_SIZE = 24
SMALL_NODE_SIZE = 32
LARGE_NODE_SIZE = 24

# Large-list nodes checked for reuse before a new one is made.
_LARGE_REUSE_LIMIT = 3
# Pages that failed this often are skipped by later small allocations.
_FAILED_LIMIT = 5

_ARENA_START = 0x10000
_UINT_MASK = 0xFFFFFFFF


def align(n: int, alignment: int = MP_ALIGNMENT) -> int:
    """Round ``n`` up to a multiple of ``alignment`` (a power of two)."""
    return (n + alignment - 1) & ~(alignment - 1)


@dataclass
class SmallNode:
    """A page of small allocations: ``base`` is where the node record sits."""

    base: int
    end: int
    last: int
    quote: int = 0
    failed: int = 0
    next: Optional[SmallNode] = None


@dataclass
class LargeNode:
    """A block too big for a page; ``address`` is None once freed."""

    address: Optional[int]
    size: int
    next: Optional[LargeNode] = None


class MemoryPool:
    """Hands out aligned addresses from pages and large blocks."""

    def __init__(self) -> None:
        self._blocks: Dict[int, bytearray] = {}
        self._bases: List[int] = []
        self._next_base = _ARENA_START
        self.base: Optional[int] = None
        self.head: Optional[SmallNode] = None
        self.current: Optional[SmallNode] = None
        self.large_list: Optional[LargeNode] = None

    # -- simulated address space -------------------------------------------

    def _allocate(self, size: int) -> int:
        base = self._next_base
        self._blocks[base] = bytearray(size)
        self._bases.append(base)
        self._next_base = align(base + size, PAGE_SIZE) + PAGE_SIZE
        return base

    def _release(self, base: int) -> None:
        if self._blocks.pop(base, None) is None:
            return
        index = bisect.bisect_left(self._bases, base)
        del self._bases[index]

    def view(self, address: int, size: int) -> memoryview:
        """The ``size`` bytes of pool memory starting at ``address``."""
        index = bisect.bisect_right(self._bases, address) - 1
        if index >= 0 and size >= 0:
            base = self._bases[index]
            block = self._blocks[base]
            offset = address - base
            if offset + size <= len(block):
                return memoryview(block)[offset : offset + size]
        raise ValueError(f"address {address:#x} with size {size} is not pool memory")

    def _require_pool(self) -> SmallNode:
        if self.head is None:
            raise RuntimeError("memory pool is not created")
        return self.head

    # -- public interface ---------------------------------------------------

    def create_pool(self) -> None:
        """Allocate the first page holding the pool header and head node."""
        base = self._allocate(PAGE_SIZE)
        self.base = base
        self.large_list = None
        self.head = SmallNode(
            base=base + POOL_HEADER_SIZE,
            end=base + PAGE_SIZE,
            last=base + POOL_HEADER_SIZE + SMALL_NODE_SIZE,
        )
        self.current = self.head

    def destroy_pool(self) -> None:
        """Release every large block, every page and the pool itself."""
        head = self._require_pool()
        large = self.large_list
        while large is not None:
            if large.address is not None:
                self._release(large.address)
                large.address = None
            large = large.next
        node = head.next
        while node is not None:
            self._release(node.base)
            node = node.next
        assert self.base is not None
        self._release(self.base)
        self.base = None
        self.head = None
        self.current = None
        self.large_list = None

    def _malloc_large(self, size: int) -> Optional[int]:
        address = self._allocate(size)
        count = 0
        large = self.large_list
        while large is not None:
            if large.address is None:
                large.size = size
                large.address = address
                return address
            if count > _LARGE_REUSE_LIMIT:
                break
            count += 1
            large = large.next
        # The list node itself is carved out of pool memory.
        if self.malloc(LARGE_NODE_SIZE) is None:
            self._release(address)
            return None
        self.large_list = LargeNode(address=address, size=size, next=self.large_list)
        return address

    def _malloc_small_page(self, size: int) -> int:
        block = self._allocate(PAGE_SIZE)
        address = align(block + SMALL_NODE_SIZE)
        node = SmallNode(base=block, end=block + PAGE_SIZE, last=address + size, quote=1)

        assert self.current is not None
        current = self.current
        cur = current
        while cur.next is not None:
            if cur.failed >= _FAILED_LIMIT:
                current = cur.next
            cur.failed += 1
            cur = cur.next
        cur.next = node
        self.current = current
        return address

    def malloc(self, size: int) -> Optional[int]:
        """Return the address of ``size`` fresh bytes, or None for size <= 0."""
        self._require_pool()
        if size <= 0:
            return None
        if size > PAGE_SIZE - SMALL_NODE_SIZE:
            return self._malloc_large(size)
        cur = self.current
        while cur is not None:
            address = align(cur.last)
            if cur.end - address >= size:
                cur.quote += 1
                cur.last = address + size
                return address
            cur = cur.next
        return self._malloc_small_page(size)

    def calloc(self, size: int) -> Optional[int]:
        """Like :meth:`malloc`, with the bytes set to zero."""
        address = self.malloc(size)
        if address is not None:
            self.view(address, size)[:] = bytes(size)
        return address

    def free_memory(self, address: int) -> None:
        """Free a large block, or drop one reference to the page holding it.

        A page whose references reach zero becomes empty again.
        """
        head = self._require_pool()
        large = self.large_list
        while large is not None:
            if large.address == address:
                self._release(address)
                large.size = 0
                large.address = None
                return
            large = large.next

        node: Optional[SmallNode] = head
        while node is not None:
            if node.base <= address <= node.end:
                node.quote = (node.quote - 1) & _UINT_MASK
                if node.quote == 0:
                    node.last = node.base + SMALL_NODE_SIZE
                    node.failed = 0
                    self.current = head
                return
            node = node.next

    def reset_pool(self) -> None:
        """Free all large blocks and mark every page empty."""
        head = self._require_pool()
        large = self.large_list
        while large is not None:
            if large.address is not None:
                self._release(large.address)
            large = large.next
        self.large_list = None
        self.current = head
        node: Optional[SmallNode] = head
        while node is not None:
            node.last = node.base + SMALL_NODE_SIZE
            node.failed = 0
            node.quote = 0
            node = node.next