from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Mapping, Optional, Set, Tuple

from .block_interval import BlockInterval
from .exceptions import MemoryBoundsError


class MemoryView(ABC):
    """
    Read-only queries over a fixed-size linear address space.

    Subclasses only supply the capacity and the id -> interval mapping; every
    derived query (free slots, neighbours, fragmentation) is computed here so
    the mutable space and its read-only views always agree.
    """

    capacity: int

    @abstractmethod
    def _intervals(self) -> Mapping[int, BlockInterval]:
        ...

    def contains_block(self, block_id: int) -> bool:
        return block_id in self._intervals()

    def blocks(self) -> Set[int]:
        return set(self._intervals())

    def block_size(self, block_id: int) -> int:
        """Size of an allocated block. Raises KeyError for unknown ids."""
        interval = self._intervals().get(block_id)
        if interval is None:
            raise KeyError(block_id)
        return interval.size

    def interval(self, block_id: int) -> Optional[BlockInterval]:
        return self._intervals().get(block_id)

    def allocated(self) -> int:
        return sum(interval.size for interval in self._intervals().values())

    def available(self) -> int:
        return self.capacity - self.allocated()

    def neighbors(self, block_id: int) -> Set[int]:
        """Ids of blocks that touch the given block on either side."""
        intervals = self._intervals()
        target = intervals.get(block_id)
        if target is None:
            return set()
        return {
            other_id
            for other_id, other in intervals.items()
            if other_id != block_id
            and (other.low_address == target.high_address + 1 or other.high_address == target.low_address - 1)
        }

    def fragmentation(self) -> float:
        intervals = self._intervals()
        if len(intervals) <= 1:
            return 0.0
        largest = max(interval.size for interval in intervals.values())
        return 1.0 - (largest / self.capacity)

    def sorted_blocks(self) -> List[Tuple[int, BlockInterval]]:
        """Allocated (id, interval) pairs ordered by low address."""
        return sorted(self._intervals().items(), key=lambda item: item[1].low_address)

    def sorted_free_slots(self) -> List[BlockInterval]:
        """Maximal gaps between allocated blocks, ordered by low address."""
        slots: List[BlockInterval] = []
        cursor = 0
        for _, interval in self.sorted_blocks():
            if interval.low_address > cursor:
                slots.append(BlockInterval(cursor, interval.low_address - 1))
            cursor = max(cursor, interval.high_address + 1)
        if cursor <= self.capacity - 1:
            slots.append(BlockInterval(cursor, self.capacity - 1))
        return slots

    def free_slots(self) -> Set[BlockInterval]:
        return set(self.sorted_free_slots())

    def snapshot(self) -> Dict[str, List[Tuple[int, ...]]]:
        """Blocks as (id, low, high) and free slots as (low, high), both in address order."""
        return {
            "allocated": [
                (block_id, interval.low_address, interval.high_address)
                for block_id, interval in self.sorted_blocks()
            ],
            "free": [(slot.low_address, slot.high_address) for slot in self.sorted_free_slots()],
        }

    def __str__(self) -> str:
        lines = [f"Memory Size = {self.capacity}"]
        for block_id, interval in self.sorted_blocks():
            lines.append(f"{interval} --> ID {block_id}")
        for slot in self.sorted_free_slots():
            lines.append(f"{slot} --> EMPTY")
        return "\n".join(lines) + "\n"


class MemorySpace(MemoryView):
    """
    Simulated contiguous address space with explicit placement and compaction.

    Placement is explicit: callers choose the start address. The space checks
    bounds but not overlap or duplicate ids; allocators are expected to pick
    addresses inside a free slot.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"Capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._allocated: Dict[int, BlockInterval] = {}

    def _intervals(self) -> Mapping[int, BlockInterval]:
        return self._allocated

    def allocate(self, block_id: int, start_address: int, size: int) -> BlockInterval:
        end_address = start_address + size - 1
        if size <= 0 or start_address < 0 or end_address >= self.capacity:
            raise MemoryBoundsError(
                f"Cannot place block {block_id} of size {size} at {start_address} "
                f"in memory of size {self.capacity}"
            )
        interval = BlockInterval(start_address, end_address)
        self._allocated[block_id] = interval
        return interval

    def deallocate(self, block_id: int) -> None:
        self._allocated.pop(block_id, None)

    def compact(self) -> int:
        """
        Slide every block towards address 0, keeping their order and sizes.

        Returns the number of addressable units that changed position.
        """
        moved = 0
        cursor = 0
        packed: Dict[int, BlockInterval] = {}
        for block_id, interval in self.sorted_blocks():
            if interval.low_address != cursor:
                moved += interval.size
                interval = BlockInterval(cursor, cursor + interval.size - 1)
            packed[block_id] = interval
            cursor += interval.size
        self._allocated = packed
        return moved


class ReadOnlyMemory(MemoryView):
    """Query-only handle over a MemorySpace, for code that must not mutate it."""

    def __init__(self, space: MemorySpace) -> None:
        self._space = space

    @property
    def capacity(self) -> int:  # type: ignore[override]
        return self._space.capacity

    def _intervals(self) -> Mapping[int, BlockInterval]:
        return self._space._intervals()
