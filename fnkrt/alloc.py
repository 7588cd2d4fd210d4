"""A first-fit heap allocator working inside a fixed byte arena.

Pointers are integer offsets into ``Heap.memory``. Every block is preceded
by a header of ``HEADER_SIZE`` bytes. Freed blocks go on a free list that is
coalesced lazily, and a free block that ends at the top of the heap is handed
back to the unused region.
"""

from __future__ import annotations

from typing import Optional

from fnkrt.memops import alignp2, memset

#: Size of a machine word in bytes.
WORD_SIZE = 8

#: Bytes taken by a block header: its size and the link to the next free block.
HEADER_SIZE = 2 * WORD_SIZE

#: Arena size used when none is given.
DEFAULT_CAPACITY = 32 * 1024


class Heap:
    """A heap over a ``capacity``-byte arena.

    ``coalescing_max`` is the number of frees between two coalescing passes;
    0 or 1 coalesces on every free.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, coalescing_max: int = 0) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        if not 0 <= coalescing_max <= 0xFF:
            raise ValueError("coalescing_max must fit in a byte")
        self.memory = bytearray(capacity)
        self._coalescing_max = coalescing_max
        self._coalescing_prio = 0
        self._sizes: dict[int, int] = {}
        self._free: list[int] = []
        self._end = 0
        self._active = True

    @property
    def end(self) -> int:
        """Offset where the unused region of the arena begins."""
        return self._end

    @property
    def free_blocks(self) -> list[tuple[int, int]]:
        """The free list as ``(pointer, size)`` pairs in list order."""
        return [(header + HEADER_SIZE, self._sizes[header]) for header in self._free]

    def block_size(self, ptr: int) -> int:
        """Return the usable size of the block at ``ptr``."""
        header = ptr - HEADER_SIZE
        if header not in self._sizes:
            raise ValueError(f"no block at {ptr}")
        return self._sizes[header]

    def _check(self) -> None:
        if not self._active:
            raise RuntimeError("heap has been finalised")

    def malloc(self, size: int) -> Optional[int]:
        """Allocate ``size`` bytes and return the pointer, or ``None`` for 0 bytes."""
        self._check()
        if size < 0:
            raise ValueError("size must not be negative")
        if not size:
            return None
        size = alignp2(size, WORD_SIZE)
        size += alignp2(HEADER_SIZE, WORD_SIZE) - HEADER_SIZE

        index = next(
            (i for i, header in enumerate(self._free) if self._sizes[header] >= size),
            None,
        )

        if index is None:
            header = self._end
            new_end = header + HEADER_SIZE + size
            if new_end > len(self.memory):
                raise MemoryError(f"cannot allocate {size} bytes: arena exhausted")
            self._sizes[header] = size
            self._end = new_end
            return header + HEADER_SIZE

        header = self._free[index]
        if self._sizes[header] - size > HEADER_SIZE:
            # Carve the new block off the top of the free one.
            self._sizes[header] -= size + HEADER_SIZE
            new_header = header + HEADER_SIZE + self._sizes[header]
            self._sizes[new_header] = size
            return new_header + HEADER_SIZE

        del self._free[index]
        return header + HEADER_SIZE

    def calloc(self, nmemb: int, size: int) -> Optional[int]:
        """Allocate ``nmemb * size`` zeroed bytes."""
        total = nmemb * size
        ptr = self.malloc(total)
        if ptr is not None:
            memset(memoryview(self.memory)[ptr:], 0, total)
        return ptr

    def realloc(self, ptr: Optional[int], size: int) -> Optional[int]:
        """Allocate a new ``size``-byte block and copy ``size`` bytes from ``ptr`` into it.

        The old block is left allocated.
        """
        ret = self.malloc(size)
        if ret is None or ptr is None:
            return ret
        data = bytes(self.memory[ptr:ptr + size])
        self.memory[ret:ret + len(data)] = data
        return ret

    def free(self, ptr: int) -> None:
        """Return the block at ``ptr`` to the free list."""
        self._check()
        header = ptr - HEADER_SIZE
        if header not in self._sizes:
            raise ValueError(f"no block at {ptr}")
        if header in self._free:
            raise ValueError(f"block at {ptr} is already free")

        index = next((i for i, other in enumerate(self._free) if not other > header), None)
        if index is None:
            self._free.insert(0, header)
        else:
            self._free.insert(index + 1, header)

        self._coalescing_prio += 1
        if self._coalescing_prio >= self._coalescing_max:
            self._coalesce()
            self._coalescing_prio = 0

    def _coalesce(self) -> None:
        i = 0
        while i < len(self._free) - 1:
            entry, nxt = self._free[i], self._free[i + 1]
            if entry + HEADER_SIZE + self._sizes[entry] == nxt:
                self._sizes[entry] += self._sizes.pop(nxt) + HEADER_SIZE
                del self._free[i + 1]
                continue
            i += 1

        if self._free:
            last = self._free[-1]
            if last + HEADER_SIZE + self._sizes[last] == self._end:
                self._free.pop()
                del self._sizes[last]
                self._end = last

    def fini(self) -> None:
        """Tear the heap down; it cannot be used afterwards."""
        self._free.clear()
        self._active = False